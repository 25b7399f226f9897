# issuewatch/api/decorators.py
"""
monitored decorator - report failures through whichever monitor is active

    >>> @monitored
    ... def checkout(cart):
    ...     ...
    >>> @monitored(label="billing.charge")
    ... async def charge(card):
    ...     ...

The monitor is looked up on every call, so decorating at import time is
fine. Without an active monitor the function runs as-is.
"""

from __future__ import annotations

import inspect
from functools import wraps
from typing import Any, Callable, Optional

from .registry import MonitorRegistry, default_registry


def monitored(
    fn: Optional[Callable] = None,
    *,
    label: Optional[str] = None,
    registry: Optional[MonitorRegistry] = None,
) -> Callable:
    """
    Args:
        fn: Function to decorate (supports @monitored and @monitored())
        label: event label (defaults to the function's qualified name)
        registry: registry to look the monitor up in (process default when omitted)
    """

    def decorator(func: Callable) -> Callable:
        event = label or getattr(func, "__qualname__", None)

        def active():
            return (registry or default_registry).current

        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs) -> Any:
                monitor = active()
                if monitor is None:
                    return await func(*args, **kwargs)
                return await monitor.wrap_function(func, event)(*args, **kwargs)
            return async_wrapper

        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            monitor = active()
            if monitor is None:
                return func(*args, **kwargs)
            return monitor.wrap_function(func, event)(*args, **kwargs)

        return wrapper

    # Support both @monitored and @monitored() syntax
    if fn is None:
        return decorator
    return decorator(fn)
