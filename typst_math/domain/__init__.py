"""
领域层 - 分类器、核心接口和错误定义
"""

from .classifier import MATH_TYPE_RULES, classify_math, match_rule
from .interfaces import (
    IMathClassifier,
    ILatexBackend,
    ITypstBackend,
    IMathRenderer,
)
from .errors import (
    ErrorCode,
    MathRenderError,
    TypstRenderError,
    LatexRenderError,
    BackendInitError,
    FragmentParseError,
)

__all__ = [
    "MATH_TYPE_RULES",
    "classify_math",
    "match_rule",
    "IMathClassifier",
    "ILatexBackend",
    "ITypstBackend",
    "IMathRenderer",
    "ErrorCode",
    "MathRenderError",
    "TypstRenderError",
    "LatexRenderError",
    "BackendInitError",
    "FragmentParseError",
]
