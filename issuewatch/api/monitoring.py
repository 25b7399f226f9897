# issuewatch/api/monitoring.py
"""
One-line monitoring API

    >>> import issuewatch
    >>> issuewatch.monitor("my-api-key", notifier="discord")
    >>> ...
    >>> issuewatch.stop_monitoring()
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..core.errors import IssueWatchError, codes
from ..core.monitor import Monitor
from ..core.report import ErrorType
from .registry import MonitorRegistry, default_registry

logger = logging.getLogger(__name__)


def monitor(
    api_key: str,
    options: Optional[Any] = None,
    *,
    registry: Optional[MonitorRegistry] = None,
    **kwargs: Any,
) -> Monitor:
    """
    Start global error monitoring.

    Any monitor started earlier through the same registry is stopped first.

    Args:
        api_key: bearer token for the webhook
        options: MonitorOptions or mapping
        registry: registry to activate in (the process default when omitted)
        **kwargs: option overrides, plus host= / transport= for the Monitor

    Returns:
        The started Monitor
    """
    registry = registry or default_registry
    return registry.activate(Monitor(api_key, options, **kwargs))


def stop_monitoring(*, registry: Optional[MonitorRegistry] = None) -> None:
    """Stop global monitoring and restore every hook"""
    (registry or default_registry).deactivate()


def get_monitor(*, registry: Optional[MonitorRegistry] = None) -> Optional[Monitor]:
    """The active global monitor, or None"""
    return (registry or default_registry).current


async def report(
    event: str,
    error: Any,
    *,
    api_key: Optional[str] = None,
    error_type: Any = ErrorType.MANUAL,
    data: Optional[Dict[str, Any]] = None,
    registry: Optional[MonitorRegistry] = None,
    **options: Any,
) -> Optional[Any]:
    """
    Report an error manually.

    Goes through the active global monitor. Without one, a throwaway Monitor
    is built for api_key from **options (it is not kept as the global
    monitor); without an api_key either, nothing is sent and a warning is
    logged.
    """
    current = get_monitor(registry=registry)
    if current is not None:
        return await current.report_error(event, error, error_type, data)

    if api_key:
        return await Monitor(api_key, **options).report_error(event, error, error_type, data)

    logger.warning("%s", IssueWatchError(
        f"report({event!r}) called before monitor() and without api_key; nothing was sent",
        error_code=codes.NO_ACTIVE_MONITOR,
        phase="deliver",
        details={"event": event},
    ))
    return None


async def issue_update(
    api_key: str,
    event: str,
    error: Any,
    data: Optional[Dict[str, Any]] = None,
    **options: Any,
) -> Optional[Any]:
    """
    Send one report without installing any hook.

    Args:
        api_key: bearer token for the webhook
        event: event label, e.g. "checkout.calculate_totals"
        error: exception or message
        data: extra data for this report, e.g. {"notifier": "discord"}
        **options: option overrides (endpoint=..., transport=...)

    Returns:
        Decoded JSON body of the webhook's response, or None on failure
    """
    return await Monitor(api_key, **options).report_error(event, error, ErrorType.MANUAL, data)
