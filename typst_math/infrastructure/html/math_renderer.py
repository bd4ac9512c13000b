"""
HTML 数学公式渲染器
找出树中的数学节点，按类型分派给 LaTeX 或 Typst 后端，并把渲染结果替换回树中
"""
from typing import TYPE_CHECKING, Optional

from ...domain.classifier import classify_math
from ...types import MATH_TYPE_ATTR, MathType, RenderOptions
from ...utils import log_execution, logger
from ..backend import LatexBackend, TypstBackend
from .tree import (
    HtmlTree,
    MathElement,
    collect_math_elements,
    error_element,
    is_attached,
    parse_fragment,
    replace_children,
    splice,
    text_content,
)

if TYPE_CHECKING:
    from ...domain.interfaces import IMathClassifier, ILatexBackend, ITypstBackend


class HtmlMathRenderer:
    """
    HTML 数学公式渲染器

    Pipeline:
    tree ──► ensure_ready ──► collect ──► classify ──► render ──► splice

    单个节点渲染失败不会中断整体转换：Typst 失败时可回退到 LaTeX，
    仍失败则替换为行内错误提示。
    """

    def __init__(
        self,
        options: Optional[RenderOptions] = None,
        latex_backend: Optional["ILatexBackend"] = None,
        typst_backend: Optional["ITypstBackend"] = None,
        classifier: "IMathClassifier" = classify_math,
    ):
        self._options = options or RenderOptions()
        self._latex_backend = latex_backend or LatexBackend(self._options.latex)
        self._typst_backend = typst_backend or TypstBackend()
        self._classifier = classifier

    @property
    def options(self) -> RenderOptions:
        return self._options

    @log_execution
    async def transform(self, tree: HtmlTree) -> HtmlTree:
        """渲染树中的全部数学节点（原地修改）

        Args:
            tree: BeautifulSoup 树或其中的元素

        Returns:
            修改后的同一棵树

        Raises:
            BackendInitError: Typst 后端初始化失败
        """
        await self._typst_backend.ensure_ready()

        math_elements = collect_math_elements(tree)
        logger.debug(
            f"[TypstMath] 找到 {len(math_elements)} 个数学节点 "
            f"(fallbackToLatex={self._options.fallback_to_latex}, "
            f"preferTypst={self._options.prefer_typst})"
        )

        for math_element in math_elements:
            if not is_attached(math_element.element, tree):
                continue
            self.render_element(math_element)
        return tree

    def resolve_math_type(self, math_element: MathElement, content: str) -> MathType:
        """优先复用已有的类型标注，否则重新检测"""
        tagged = MathType.from_tag(math_element.element.get(MATH_TYPE_ATTR))
        if tagged is not None:
            return tagged
        return self._classifier(content)

    def render_element(self, math_element: MathElement) -> None:
        """渲染单个数学节点"""
        content = text_content(math_element.element)
        math_type = self.resolve_math_type(math_element, content)
        logger.debug(
            f"[TypstMath] 渲染 {math_type.value} 公式 "
            f"(display={math_element.display_mode}): {content[:50]}"
        )

        try:
            self._render_with(math_element, content, math_type)
            return
        except Exception as error:
            if math_type is MathType.TYPST and self._options.fallback_to_latex:
                logger.warning(f"[TypstMath] Typst 渲染失败，回退到 LaTeX: {error}")
                try:
                    self._render_with(math_element, content, MathType.LATEX)
                    return
                except Exception as fallback_error:
                    logger.warning(f"[TypstMath] LaTeX 回退渲染失败: {fallback_error}")
            else:
                logger.warning(f"[TypstMath] {math_type.value} 渲染失败: {error}")
            self._show_error(math_element, error)

    def _render_with(self, math_element: MathElement, content: str, math_type: MathType) -> None:
        if math_type is MathType.LATEX:
            rendered = self._latex_backend.render(content, display_mode=math_element.display_mode)
        else:
            rendered = self._typst_backend.render(content, display_mode=math_element.display_mode)

        fragment = parse_fragment(rendered)
        splice(math_element, fragment)

    def _show_error(self, math_element: MathElement, error: Exception) -> None:
        """把节点内容替换为错误提示"""
        replace_children(
            math_element.element,
            [error_element(str(error), self._options.latex.error_color)],
        )
