"""
TypstMath
检测 Markdown/HTML 中的数学公式属于 LaTeX 还是 Typst，并分别渲染
"""

from .types import (
    MATH_TYPE_ATTR,
    MATH_TYPE_META_KEY,
    LatexOptions,
    MathType,
    RenderOptions,
)
from .domain import (
    classify_math,
    MathRenderError,
    TypstRenderError,
    LatexRenderError,
    BackendInitError,
)
from .infrastructure import (
    LatexBackend,
    TypstBackend,
    HtmlMathRenderer,
    typst_math_plugin,
    create_parser,
    parse_markdown,
)
from .application import MathPipeline

__version__ = "1.0.0"

__all__ = [
    "MATH_TYPE_ATTR",
    "MATH_TYPE_META_KEY",
    "LatexOptions",
    "MathType",
    "RenderOptions",
    "classify_math",
    "MathRenderError",
    "TypstRenderError",
    "LatexRenderError",
    "BackendInitError",
    "LatexBackend",
    "TypstBackend",
    "HtmlMathRenderer",
    "typst_math_plugin",
    "create_parser",
    "parse_markdown",
    "MathPipeline",
]
