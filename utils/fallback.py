import inspect
from typing import TypeVar, Callable
from functools import wraps

from utils.logger import setup_logger

logger = setup_logger(__name__)

T = TypeVar('T')


def with_fallback(
    fallback_func: Callable[..., T],
    exception_types: tuple = (Exception,),
    log_errors: bool = True
) -> Callable:
    """Call ``fallback_func`` with the same arguments when the wrapped call raises.

    Works for plain functions and coroutine functions; the fallback itself is
    always synchronous.
    """
    def _log(func: Callable, error: Exception):
        if log_errors:
            logger.warning(
                f"Function {func.__name__} failed, using fallback",
                extra={
                    "function": func.__name__,
                    "error": str(error),
                    "fallback": fallback_func.__name__
                }
            )

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                try:
                    return await func(*args, **kwargs)
                except exception_types as e:
                    _log(func, e)
                    return fallback_func(*args, **kwargs)
            return async_wrapper

        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except exception_types as e:
                _log(func, e)
                return fallback_func(*args, **kwargs)
        return wrapper
    return decorator
