"""
工具层 - 日志、AOP装饰器和正则表达式
"""

from .log import logger
from .decorators import log_execution
from . import regex_patterns

__all__ = ["logger", "log_execution", "regex_patterns"]
