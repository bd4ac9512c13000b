"""
LaTeX 渲染后端
使用 latex2mathml 将 LaTeX 转为 MathML，错误时返回行内错误标记而不抛出
"""
import html
from typing import Optional
from urllib.parse import urlparse

from latex2mathml import commands as latex_commands
from latex2mathml.converter import convert as latex_to_mathml
from latex2mathml.symbols_parser import SYMBOLS
from latex2mathml.tokenizer import tokenize

from ...domain.errors import LatexRenderError
from ...types import LatexOptions
from ...utils import logger
from ...utils import regex_patterns as patterns

# 宏展开的最大次数
MAX_MACRO_EXPANSIONS = 1000

STRICT_UNICODE_CODE = "unicodeTextInMathMode"


def _collect_known_commands() -> frozenset:
    """latex2mathml 能识别的全部控制词（命令表与符号表）

    需要 trust 的命令已由 _check_trust 把关，同样视为已定义
    """
    known = set(SYMBOLS)
    known.update("\\" + name for name in patterns.LATEX_TRUST_COMMAND_NAMES)
    for value in vars(latex_commands).values():
        if isinstance(value, str):
            value = (value,)
        elif not isinstance(value, (tuple, list, set, frozenset, dict)):
            continue
        known.update(
            name for name in value if isinstance(name, str) and name.startswith("\\")
        )
    return frozenset(known)


KNOWN_COMMANDS = _collect_known_commands()


class LatexBackend:
    """LaTeX 渲染后端"""

    def __init__(self, options: Optional[LatexOptions] = None):
        self._options = options or LatexOptions()
        self._macros = [
            (patterns.latex_macro_pattern(name), replacement)
            for name, replacement in self._options.macros.items()
        ]

    @property
    def options(self) -> LatexOptions:
        return self._options

    def render(self, text: str, display_mode: bool = False) -> str:
        """渲染为 HTML 片段，失败时返回错误标记"""
        try:
            return self._render(text, display_mode)
        except Exception as e:
            logger.debug(f"[TypstMath] LaTeX 渲染失败: {text[:50]}... 错误: {e}")
            return self._render_error(text, e)

    def _render(self, text: str, display_mode: bool) -> str:
        self._check_trust(text)
        self._check_strict(text)
        expanded = self._expand_macros(text)
        self._check_commands(expanded)

        mathml = latex_to_mathml(expanded, display="block" if display_mode else "inline")

        classes = ["latex-math"]
        if display_mode:
            classes.append("latex-display")
            if self._options.fleqn:
                classes.append("fleqn")
            if self._options.leqno:
                classes.append("leqno")
        return f'<span class="{" ".join(classes)}">{mathml}</span>'

    def _render_error(self, text: str, error: Exception) -> str:
        title = html.escape(f"ParseError: {error}", quote=True)
        color = html.escape(self._options.error_color, quote=True)
        return (
            f'<span class="latex-error" title="{title}" style="color:{color}">'
            f"{html.escape(text)}</span>"
        )

    def _expand_macros(self, text: str) -> str:
        """展开无参数宏"""
        if not self._macros:
            return text
        total = 0
        while True:
            expanded = text
            for pattern, replacement in self._macros:
                expanded, count = pattern.subn(lambda _m, r=replacement: r, expanded)
                total += count
                if total > MAX_MACRO_EXPANSIONS:
                    raise LatexRenderError("宏展开次数过多，可能存在递归定义", source=text)
            if expanded == text:
                return text
            text = expanded

    def _check_commands(self, text: str) -> None:
        """未定义的控制词会被 latex2mathml 静默输出为 <mi>，这里提前报错"""
        for token in tokenize(text):
            if patterns.LATEX_CONTROL_WORD.fullmatch(token) and token not in KNOWN_COMMANDS:
                raise LatexRenderError(f"Undefined control sequence: {token}", source=text)

    def _check_trust(self, text: str) -> None:
        """检查需要 trust 的命令"""
        trust = self._options.trust
        if trust is True:
            return

        for match in patterns.LATEX_UNTRUSTED_COMMAND.finditer(text):
            command = "\\" + match.group(1)
            url = match.group(2)
            context = {"command": command}
            if url is not None:
                context["url"] = url
                context["protocol"] = urlparse(url).scheme or "_relative"

            trusted = bool(trust(context)) if callable(trust) else bool(trust)
            if not trusted:
                raise LatexRenderError(f"{command} 命令未被信任", source=text)

    def _check_strict(self, text: str) -> None:
        """按 strict 策略处理数学模式中的非 ASCII 字符"""
        match = patterns.LATEX_NON_ASCII.search(text)
        if match is None:
            return

        message = f'数学模式中使用了 Unicode 字符 "{match.group(0)}"'
        policy = self._options.strict
        if callable(policy):
            policy = policy(STRICT_UNICODE_CODE, message)

        if policy is None or policy is False or policy == "ignore":
            return
        if policy is True or policy == "error":
            raise LatexRenderError(
                f"strict 模式为 error: {message} [{STRICT_UNICODE_CODE}]", source=text
            )
        logger.warning(f"[TypstMath] LaTeX strict 警告: {message} [{STRICT_UNICODE_CODE}]")
