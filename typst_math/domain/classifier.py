"""
公式类型分类器
按优先级依次检查 LaTeX 特征，命中即返回，否则视为 Typst
"""

from typing import Callable

from ..types import MathType
from ..utils import regex_patterns as patterns

# (规则名, 判定函数)，按顺序短路求值
MATH_TYPE_RULES: list[tuple[str, Callable[[str], bool]]] = [
    ("latex_command", lambda text: patterns.CLASSIFY_LATEX_COMMAND.search(text) is not None),
    ("latex_environment", lambda text: patterns.CLASSIFY_LATEX_ENVIRONMENT.search(text) is not None),
    ("latex_symbol", lambda text: patterns.CLASSIFY_LATEX_SYMBOL.search(text) is not None),
]


def match_rule(text: str) -> str | None:
    """返回第一条命中的规则名"""
    for name, predicate in MATH_TYPE_RULES:
        if predicate(text):
            return name
    return None


def classify_math(text: str) -> MathType:
    """检测数学表达式的类型

    Typst 的运算符从不以反斜杠开头，因此只要出现 LaTeX 转义语法即判为 LaTeX。
    不含反斜杠但只在 LaTeX 中合法的表达式会被判为 Typst。

    Args:
        text: 数学表达式内容

    Returns:
        MathType.LATEX 或 MathType.TYPST
    """
    if match_rule(text) is not None:
        return MathType.LATEX
    return MathType.TYPST
