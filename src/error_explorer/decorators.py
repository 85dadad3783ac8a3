"""Decorators for reporting exceptions raised by functions."""

from __future__ import annotations

import functools
import inspect
from typing import Any


def capture_exceptions(environment: str = "prod", reraise: bool = True) -> Any:
    """Decorator that reports exceptions escaping the wrapped function.

    Works with both sync and async functions. With ``reraise=False`` the
    exception is swallowed after reporting and the call returns None.
    """
    def decorator(func: Any) -> Any:
        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                try:
                    return await func(*args, **kwargs)
                except Exception as exc:
                    _report(exc, environment)
                    if reraise:
                        raise
                    return None

            return async_wrapper
        else:
            @functools.wraps(func)
            def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
                try:
                    return func(*args, **kwargs)
                except Exception as exc:
                    _report(exc, environment)
                    if reraise:
                        raise
                    return None

            return sync_wrapper

    return decorator


def _report(exc: BaseException, environment: str) -> None:
    import error_explorer

    error_explorer.report_error(exc, environment)
