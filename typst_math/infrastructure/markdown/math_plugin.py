"""
Markdown 数学公式插件
公式语法交给 dollarmath 扩展解析，本插件只负责为公式节点标注类型，
并把标注带到输出的 HTML 中
"""
from typing import Iterator, Optional

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from markdown_it.rules_core import StateCore
from markdown_it.token import Token
from markdown_it.tree import SyntaxTreeNode
from mdit_py_plugins.dollarmath import dollarmath_plugin

from ...domain.classifier import classify_math
from ...types import MATH_TYPE_ATTR, MATH_TYPE_META_KEY, MathType

INLINE_MATH_TYPES = ("math_inline", "math_inline_double")
BLOCK_MATH_TYPES = ("math_block", "math_block_label")
MATH_TOKEN_TYPES = INLINE_MATH_TYPES + BLOCK_MATH_TYPES


def typst_math_plugin(md: MarkdownIt, **options) -> None:
    """注册数学语法扩展和类型标注规则

    Args:
        md: markdown-it 实例
        **options: 透传给 dollarmath_plugin 的选项
    """
    dollarmath_plugin(md, **options)
    md.core.ruler.after("inline", "math_type", annotate_math_tokens)

    md.add_render_rule("math_inline", render_math_inline)
    md.add_render_rule("math_inline_double", render_math_inline_double)
    md.add_render_rule("math_block", render_math_block)
    md.add_render_rule("math_block_label", render_math_block_label)


def annotate_math_tokens(state: StateCore) -> None:
    """访问全部公式 token 并写入类型标注"""
    for token in _walk_tokens(state.tokens):
        if token.type in MATH_TOKEN_TYPES:
            token.meta[MATH_TYPE_META_KEY] = classify_math(token.content).value


def _walk_tokens(tokens: list[Token]) -> Iterator[Token]:
    for token in tokens:
        yield token
        if token.children:
            yield from _walk_tokens(token.children)


def get_math_type(token: Token) -> Optional[MathType]:
    """读取 token 上的类型标注"""
    return MathType.from_tag(token.meta.get(MATH_TYPE_META_KEY))


def _math_code(token: Token, mode_class: str) -> str:
    math_type = get_math_type(token)
    type_attr = f' {MATH_TYPE_ATTR}="{math_type.value}"' if math_type else ""
    return (
        f'<code class="language-math {mode_class}"{type_attr}>'
        f"{escapeHtml(token.content)}</code>"
    )


def render_math_inline(self, tokens: list[Token], idx: int, options, env) -> str:
    return _math_code(tokens[idx], "math-inline")


def render_math_inline_double(self, tokens: list[Token], idx: int, options, env) -> str:
    return _math_code(tokens[idx], "math-display")


def render_math_block(self, tokens: list[Token], idx: int, options, env) -> str:
    return f"<pre>{_math_code(tokens[idx], 'math-display')}</pre>\n"


def render_math_block_label(self, tokens: list[Token], idx: int, options, env) -> str:
    label = escapeHtml(tokens[idx].info)
    return (
        f'<div class="math-equation" id="{label}">'
        f"<pre>{_math_code(tokens[idx], 'math-display')}</pre></div>\n"
    )


def create_parser(**options) -> MarkdownIt:
    """创建带数学公式支持的 markdown-it 解析器"""
    md = MarkdownIt("commonmark")
    md.enable("table")
    md.enable("strikethrough")
    md.use(typst_math_plugin, **options)
    return md


def parse_markdown(text: str, md: Optional[MarkdownIt] = None) -> SyntaxTreeNode:
    """解析 Markdown 为已标注类型的语法树"""
    parser = md or create_parser()
    return SyntaxTreeNode(parser.parse(text))


def iter_math_nodes(tree: SyntaxTreeNode) -> Iterator[SyntaxTreeNode]:
    """按文档顺序遍历公式节点"""
    for node in tree.walk():
        if node.type in MATH_TOKEN_TYPES:
            yield node
