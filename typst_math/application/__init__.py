"""
应用层
"""
from .pipeline import MathPipeline

__all__ = ["MathPipeline"]
