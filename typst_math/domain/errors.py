"""
领域层 - 错误类型定义
"""

from enum import Enum


class ErrorCode(Enum):
    """错误代码枚举"""

    TYPST_RENDER_FAILED = "TYPST_RENDER_FAILED"
    LATEX_RENDER_FAILED = "LATEX_RENDER_FAILED"
    BACKEND_INIT_FAILED = "BACKEND_INIT_FAILED"
    FRAGMENT_PARSE_FAILED = "FRAGMENT_PARSE_FAILED"
    PIPELINE_FAILED = "PIPELINE_FAILED"


class MathRenderError(Exception):
    """渲染错误基类"""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.PIPELINE_FAILED):
        super().__init__(message)
        self.code = code


class TypstRenderError(MathRenderError):
    """Typst 编译错误"""

    def __init__(self, message: str, source: str = ""):
        super().__init__(message, code=ErrorCode.TYPST_RENDER_FAILED)
        self.source = source


class LatexRenderError(MathRenderError):
    """LaTeX 转换错误"""

    def __init__(self, message: str, source: str = ""):
        super().__init__(message, code=ErrorCode.LATEX_RENDER_FAILED)
        self.source = source


class BackendInitError(MathRenderError):
    """渲染后端初始化错误"""

    def __init__(self, message: str, backend: str = ""):
        super().__init__(message, code=ErrorCode.BACKEND_INIT_FAILED)
        self.backend = backend


class FragmentParseError(MathRenderError):
    """HTML 片段解析错误"""

    def __init__(self, message: str):
        super().__init__(message, code=ErrorCode.FRAGMENT_PARSE_FAILED)
