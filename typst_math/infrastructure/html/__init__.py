"""
基础设施层 - HTML 模块
"""
from .tree import (
    MathElement,
    parse_fragment,
    collect_math_elements,
    splice,
)
from .math_renderer import HtmlMathRenderer

__all__ = [
    "MathElement",
    "parse_fragment",
    "collect_math_elements",
    "splice",
    "HtmlMathRenderer",
]
