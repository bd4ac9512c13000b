"""
工具层 - 包级日志器
"""

import logging

logger = logging.getLogger("typst_math")
logger.addHandler(logging.NullHandler())
