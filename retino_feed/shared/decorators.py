import time
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from loguru import logger

P = ParamSpec("P")
R = TypeVar("R")


def log_errors(func: Callable[P, R]) -> Callable[P, R]:
    """Log any exception leaving ``func`` as ``[qualname] ExcType: message`` and re-raise it.

    Usage::

        @log_errors
        def process_feed(self, orders: Iterable[Order]) -> str: ...
    """

    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except Exception as exc:
            logger.error(f"[{func.__qualname__}] {type(exc).__name__}: {exc}")
            raise

    return wrapper


def log_duration(func: Callable[P, R]) -> Callable[P, R]:
    """Debug-log how long each call of ``func`` took, whether it returned or raised."""

    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        started = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.debug(f"[{func.__qualname__}] finished in {elapsed_ms:.1f} ms")

    return wrapper
