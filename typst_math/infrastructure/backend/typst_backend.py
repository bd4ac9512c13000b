"""
Typst 渲染后端
使用 typst 编译器将公式编译为 SVG，首次使用前需要异步初始化
"""
import asyncio
import html
import traceback
from functools import lru_cache

import typst

from ...domain.errors import BackendInitError, TypstRenderError
from ...utils import log_execution, logger
from ...utils import regex_patterns as patterns

# 页面尺寸随内容自适应，无边距、透明背景
TYPST_PRELUDE = "#set page(width: auto, height: auto, margin: 0pt, fill: none)\n"

# 初始化时编译的预热公式
WARMUP_EQUATION = "$x$"


@lru_cache(maxsize=256)
def compile_svg(document: str) -> str:
    """编译 Typst 文档为 SVG 文本（按源码缓存）"""
    output = typst.compile(document.encode("utf-8"), format="svg")
    if isinstance(output, list):
        output = b"".join(output)
    return output.decode("utf-8")


def fix_svg(svg: str) -> str:
    """使编译产物可内嵌于 HTML

    - 去掉 XML 声明和首尾空白
    - 纯黑改为 currentColor，跟随文字颜色
    """
    svg = patterns.TYPST_SVG_XML_DECL.sub("", svg).strip()
    return patterns.TYPST_SVG_BLACK.sub(r' \1="currentColor"', svg)


def build_document(text: str, display_mode: bool) -> str:
    """组装完整 Typst 文档，公式两侧留空格即为块级公式"""
    body = text.strip()
    equation = f"$ {body} $" if display_mode else f"${body}$"
    return TYPST_PRELUDE + equation


class TypstBackend:
    """Typst 渲染后端 - 管理编译器初始化与公式编译"""

    def __init__(self):
        self._ready = False
        self._lock = asyncio.Lock()

    @property
    def is_ready(self) -> bool:
        """是否已完成初始化"""
        return self._ready

    # 首次编译需要加载字体，耗时较长
    @log_execution(slow_threshold=10.0)
    async def ensure_ready(self) -> None:
        """初始化编译器（幂等）"""
        if self._ready:
            return
        async with self._lock:
            if self._ready:
                return
            logger.info("[TypstMath] 正在初始化 Typst 编译器...")
            try:
                await asyncio.to_thread(compile_svg, build_document(WARMUP_EQUATION, False))
            except Exception as e:
                logger.error(f"[TypstMath] Typst 初始化失败: {type(e).__name__}: {e}")
                logger.error(f"[TypstMath] 堆栈信息:\n{traceback.format_exc()}")
                raise BackendInitError(f"Typst 初始化失败: {e}", backend="typst")
            self._ready = True
            logger.info("[TypstMath] Typst 编译器已就绪")

    def render(self, text: str, display_mode: bool = False) -> str:
        """渲染为 HTML 片段

        Raises:
            BackendInitError: 尚未初始化
            TypstRenderError: 公式无法编译
        """
        if not self._ready:
            raise BackendInitError("Typst 后端尚未初始化，请先调用 ensure_ready()", backend="typst")

        try:
            svg = compile_svg(build_document(text, display_mode))
        except Exception as e:
            raise TypstRenderError(f"Typst 编译失败: {e}", source=text)

        mode_class = "typst-display" if display_mode else "typst-inline"
        label = html.escape(text.strip(), quote=True)
        return (
            f'<span class="typst-math {mode_class}" role="img" aria-label="{label}">'
            f"{fix_svg(svg)}</span>"
        )
