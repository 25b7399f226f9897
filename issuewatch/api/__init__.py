# issuewatch/api/__init__.py
from .decorators import monitored
from .monitoring import get_monitor, issue_update, monitor, report, stop_monitoring
from .registry import MonitorRegistry, default_registry

__all__ = [
    "MonitorRegistry",
    "default_registry",
    "get_monitor",
    "issue_update",
    "monitor",
    "monitored",
    "report",
    "stop_monitoring",
]
