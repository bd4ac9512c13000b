"""
基础设施层 - Markdown 模块
"""
from .math_plugin import (
    MATH_TOKEN_TYPES,
    typst_math_plugin,
    annotate_math_tokens,
    get_math_type,
    create_parser,
    parse_markdown,
    iter_math_nodes,
)

__all__ = [
    "MATH_TOKEN_TYPES",
    "typst_math_plugin",
    "annotate_math_tokens",
    "get_math_type",
    "create_parser",
    "parse_markdown",
    "iter_math_nodes",
]
