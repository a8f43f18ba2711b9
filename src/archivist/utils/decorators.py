"""Timing decorator for job execution."""
import functools
import logging
import time
from typing import Any, Callable, Optional, TypeVar, cast

logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


def log_execution_time(label: Optional[Callable[..., str]] = None) -> Callable[[F], F]:
    """Log how long each call of the decorated function takes.

    Args:
        label: Called with the decorated function's arguments to name the
            call in the log line, e.g. the job class. Defaults to the
            function's qualified name.
    """
    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            name = label(*args, **kwargs) if label else func.__qualname__
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(f"{name} failed after {time.perf_counter() - started:.3f}s: {str(e)}")
                raise
            logger.info(f"{name} finished in {time.perf_counter() - started:.3f}s")
            return result
        return cast(F, wrapper)
    return decorator
