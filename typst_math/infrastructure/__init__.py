"""
基础设施层
"""
from .backend import (
    LatexBackend,
    TypstBackend,
)
from .markdown import (
    typst_math_plugin,
    create_parser,
    parse_markdown,
)
from .html import HtmlMathRenderer

__all__ = [
    "LatexBackend",
    "TypstBackend",
    "typst_math_plugin",
    "create_parser",
    "parse_markdown",
    "HtmlMathRenderer",
]
