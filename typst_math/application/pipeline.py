"""
数学公式渲染管线
编排 Markdown 解析、类型标注与 HTML 渲染
"""
import traceback
from typing import TYPE_CHECKING, Optional

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from ..domain.errors import MathRenderError
from ..infrastructure.html import HtmlMathRenderer, parse_fragment
from ..infrastructure.markdown import create_parser
from ..types import RenderOptions
from ..utils import logger

if TYPE_CHECKING:
    from ..domain.interfaces import ILatexBackend, ITypstBackend


class MathPipeline:
    """
    渲染管线

    Pipeline:
    markdown ──► parse + annotate ──► html ──► render math ──► html

    1. Markdown 解析并标注公式类型 (math_plugin)
    2. 渲染为带标注的 HTML
    3. 数学节点渲染并替换 (math_renderer)
    """

    def __init__(
        self,
        options: Optional[RenderOptions] = None,
        latex_backend: Optional["ILatexBackend"] = None,
        typst_backend: Optional["ITypstBackend"] = None,
        md: Optional[MarkdownIt] = None,
    ):
        self._options = options or RenderOptions()
        self._md = md or create_parser()
        self._renderer = HtmlMathRenderer(
            options=self._options,
            latex_backend=latex_backend,
            typst_backend=typst_backend,
        )

    @property
    def renderer(self) -> HtmlMathRenderer:
        return self._renderer

    def parse_markdown(self, text: str) -> SyntaxTreeNode:
        """解析为已标注类型的语法树"""
        return SyntaxTreeNode(self._md.parse(text))

    def markdown_to_html(self, text: str) -> str:
        """转换为 HTML，公式保留为带类型标注的占位元素"""
        return self._md.render(text)

    async def render_markdown(self, text: str) -> str:
        """渲染 Markdown 为 HTML，公式替换为渲染结果

        Raises:
            MathRenderError: 后端初始化或管线本身失败
        """
        logger.info(f"[TypstMath] 开始渲染 Markdown，内容长度: {len(text)}")
        try:
            html = self.markdown_to_html(text)
            logger.debug("[TypstMath] Markdown转HTML完成")
        except Exception as e:
            logger.error(f"[TypstMath] Markdown 解析失败: {type(e).__name__}: {e}")
            logger.error(f"[TypstMath] 堆栈信息:\n{traceback.format_exc()}")
            raise MathRenderError(f"Markdown 解析失败: {e}")
        return await self.render_html(html)

    async def render_html(self, html: str) -> str:
        """渲染 HTML 中的数学节点

        Raises:
            MathRenderError: 后端初始化或管线本身失败
        """
        try:
            tree = parse_fragment(html)
            await self._renderer.transform(tree)
            output = str(tree)
            logger.info(f"[TypstMath] 渲染完成，输出长度: {len(output)}")
            return output

        except MathRenderError:
            raise
        except Exception as e:
            logger.error(f"[TypstMath] 渲染失败: {type(e).__name__}: {e}")
            logger.error(f"[TypstMath] 堆栈信息:\n{traceback.format_exc()}")
            raise MathRenderError(f"渲染失败: {e}")
