"""
正则表达式模式集中管理模块

所有正则表达式按功能分组，预编译后供各模块引用。
"""

import re
from typing import Pattern

# ============================================================================
# 公式类型分类器相关正则 (domain/classifier.py)
# ============================================================================

# 常见 LaTeX 符号命令名，可按需追加
LATEX_SYMBOL_NAMES: tuple[str, ...] = (
    "frac",
    "sum",
    "int",
    "prod",
    "sqrt",
    "alpha",
    "beta",
    "gamma",
    "delta",
    "theta",
    "lambda",
    "mu",
    "pi",
    "sigma",
    "phi",
    "psi",
    "omega",
)

# 反斜杠后紧跟非空白字符（LaTeX 命令）
CLASSIFY_LATEX_COMMAND: Pattern[str] = re.compile(r"\\\S")

# \begin{...} 环境
CLASSIFY_LATEX_ENVIRONMENT: Pattern[str] = re.compile(r"\\begin\{[^}]+\}")

# 常见 LaTeX 符号
CLASSIFY_LATEX_SYMBOL: Pattern[str] = re.compile(
    r"\\(" + "|".join(LATEX_SYMBOL_NAMES) + r")"
)


# ============================================================================
# LaTeX 后端相关正则 (infrastructure/backend/latex_backend.py)
# ============================================================================

# 需要 trust 才能使用的命令名
LATEX_TRUST_COMMAND_NAMES: tuple[str, ...] = (
    "href",
    "url",
    "includegraphics",
    "htmlClass",
    "htmlId",
    "htmlStyle",
    "htmlData",
)

# 需要 trust 的命令，第一个参数作为 url
LATEX_UNTRUSTED_COMMAND: Pattern[str] = re.compile(
    r"\\(" + "|".join(LATEX_TRUST_COMMAND_NAMES) + r")"
    r"(?![A-Za-z])\s*(?:\[[^\]]*\])?\s*(?:\{([^}]*)\})?"
)

# 数学模式中的非 ASCII 字符
LATEX_NON_ASCII: Pattern[str] = re.compile(r"[^\x00-\x7f]")

# 完整的控制词 token，如 \frac、\invalidcommand
LATEX_CONTROL_WORD: Pattern[str] = re.compile(r"\\[A-Za-z]+")


def latex_macro_pattern(name: str) -> Pattern[str]:
    """匹配宏名，避免 \\R 命中 \\RR"""
    if not name.startswith("\\"):
        name = "\\" + name
    suffix = r"(?![A-Za-z])" if name[-1].isalpha() else ""
    return re.compile(re.escape(name) + suffix)


# ============================================================================
# Typst 后端相关正则 (infrastructure/backend/typst_backend.py)
# ============================================================================

# 编译产物中的纯黑填充/描边
TYPST_SVG_BLACK: Pattern[str] = re.compile(r' (fill|stroke)="#000000"')

# SVG 前的 XML 声明
TYPST_SVG_XML_DECL: Pattern[str] = re.compile(r"^\s*<\?xml[^>]*\?>\s*")


__all__ = [
    # 分类器
    "LATEX_SYMBOL_NAMES",
    "CLASSIFY_LATEX_COMMAND",
    "CLASSIFY_LATEX_ENVIRONMENT",
    "CLASSIFY_LATEX_SYMBOL",
    # LaTeX 后端
    "LATEX_TRUST_COMMAND_NAMES",
    "LATEX_UNTRUSTED_COMMAND",
    "LATEX_NON_ASCII",
    "LATEX_CONTROL_WORD",
    "latex_macro_pattern",
    # Typst 后端
    "TYPST_SVG_BLACK",
    "TYPST_SVG_XML_DECL",
]
