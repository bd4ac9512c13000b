"""
领域层 - 核心接口定义
遵循依赖倒置原则(DIP)，渲染器只依赖这些抽象接口
"""

from typing import Any, Protocol, runtime_checkable

from ..types import MathType


@runtime_checkable
class IMathClassifier(Protocol):
    """公式类型分类器接口"""

    def __call__(self, text: str) -> MathType:
        """判断公式是 LaTeX 还是 Typst"""
        ...


@runtime_checkable
class ILatexBackend(Protocol):
    """LaTeX 渲染后端接口

    约定：内部错误不抛出，而是返回带错误标记的 HTML
    """

    def render(self, text: str, display_mode: bool = False) -> str:
        """渲染为 HTML 片段"""
        ...


@runtime_checkable
class ITypstBackend(Protocol):
    """Typst 渲染后端接口"""

    async def ensure_ready(self) -> None:
        """一次性初始化，重复调用无副作用"""
        ...

    def render(self, text: str, display_mode: bool = False) -> str:
        """渲染为 HTML 片段

        Raises:
            TypstRenderError: 公式无法编译
        """
        ...

    @property
    def is_ready(self) -> bool:
        """是否已完成初始化"""
        ...


@runtime_checkable
class IMathRenderer(Protocol):
    """HTML 数学公式渲染器接口"""

    async def transform(self, tree: Any) -> Any:
        """渲染树中的全部数学节点"""
        ...
