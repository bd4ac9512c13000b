"""
工具层 - AOP装饰器
日志等横切关注点
"""

import functools
import inspect
import time
from typing import Callable, Optional, TypeVar

from .log import logger

T = TypeVar("T")

# 超过该耗时（秒）的调用以 WARNING 级别记录
SLOW_CALL_SECONDS = 1.0


def _log_finished(name: str, start: float, slow_threshold: float) -> None:
    elapsed = time.perf_counter() - start
    if elapsed > slow_threshold:
        logger.warning(
            f"[TypstMath] {name} 执行较慢，耗时: {elapsed:.3f}s (阈值 {slow_threshold:.3f}s)",
        )
    else:
        logger.debug(f"[TypstMath] {name} 执行完成，耗时: {elapsed:.3f}s")


def _log_failed(name: str, start: float, error: Exception) -> None:
    elapsed = time.perf_counter() - start
    logger.error(
        f"[TypstMath] {name} 执行失败，耗时: {elapsed:.3f}s, "
        f"错误: {type(error).__name__}: {error}"
    )


def log_execution(
    func: Optional[Callable[..., T]] = None, *, slow_threshold: float = SLOW_CALL_SECONDS
):
    """日志装饰器 - 记录执行耗时，慢调用升级为警告

    支持同步与异步函数，异常记录后原样抛出::

        @log_execution
        async def transform(...): ...

        @log_execution(slow_threshold=10.0)
        async def ensure_ready(...): ...
    """
    if func is None:
        return functools.partial(log_execution, slow_threshold=slow_threshold)

    name = func.__qualname__

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs) -> T:
            logger.debug(f"[TypstMath] {name} 开始执行")
            start = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                _log_failed(name, start, e)
                raise
            _log_finished(name, start, slow_threshold)
            return result

        return async_wrapper

    @functools.wraps(func)
    def sync_wrapper(*args, **kwargs) -> T:
        logger.debug(f"[TypstMath] {name} 开始执行")
        start = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            _log_failed(name, start, e)
            raise
        _log_finished(name, start, slow_threshold)
        return result

    return sync_wrapper
