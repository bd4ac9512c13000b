"""
基础设施层 - 渲染后端模块
"""
from .latex_backend import LatexBackend
from .typst_backend import TypstBackend

__all__ = [
    "LatexBackend",
    "TypstBackend",
]
