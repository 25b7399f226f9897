# issuewatch/__init__.py
"""
issuewatch - report uncaught errors, failed awaitables, error logs and failed
HTTP calls to your webhook

User-facing API (recommended):
- monitor(): start global monitoring with one call
- stop_monitoring() / get_monitor(): manage the global monitor
- report(): manual report through the global monitor
- monitored: decorator reporting a function's failures
- issue_update(): one-shot report without hooks

Advanced API (for embedders and tests):
- Monitor: one monitor instance (start/stop, wrap_function, wrap_object)
- MonitorOptions: configuration
- ProcessHost / CustomHost: where hooks are installed
- HttpxTransport: how reports are delivered

Basic usage:

    >>> import issuewatch
    >>> issuewatch.monitor("my-api-key", notifier="discord")
    >>> # uncaught exceptions, logger.exception(...), failed tasks and
    >>> # httpx calls answering 4xx/5xx are now reported
    >>> issuewatch.stop_monitoring()

Manual reporting:

    >>> await issuewatch.report("checkout.calculate_totals", exc)

Wrapping:

    >>> monitor = issuewatch.get_monitor()
    >>> safe_total = monitor.wrap_function(calculate_total, "checkout.total")
    >>> # own attributes only: pass the class to wrap its methods
    >>> monitor.wrap_object(PaymentService, "PaymentService")
    >>> monitor.wrap_object({"on_submit": on_submit}, "CheckoutForm")
"""

__version__ = "0.1.0"

# User-facing API
from .api import (
    MonitorRegistry,
    get_monitor,
    issue_update,
    monitor,
    monitored,
    report,
    stop_monitoring,
)

# Core types
from .config import MonitorOptions, ConfigIssue, validate_options
from .core.errors import IssueWatchError
from .core.hosts import AttributeSlot, AccessorSlot, CustomHost, Host, HookSlot, ProcessHost, detect_host
from .core.monitor import Monitor
from .core.report import ErrorReport, ErrorType, build_report
from .core.stack import StackFrame, parse_stack
from .infra.transport import BaseTransport, HttpxTransport

__all__ = [
    # Version
    "__version__",

    # User-facing API
    "monitor",
    "stop_monitoring",
    "get_monitor",
    "report",
    "issue_update",
    "monitored",

    # Core types
    "Monitor",
    "MonitorOptions",
    "MonitorRegistry",
    "ConfigIssue",
    "validate_options",
    "IssueWatchError",
    "ErrorReport",
    "ErrorType",
    "build_report",
    "StackFrame",
    "parse_stack",

    # Hosts and transports
    "Host",
    "HookSlot",
    "AttributeSlot",
    "AccessorSlot",
    "ProcessHost",
    "CustomHost",
    "detect_host",
    "BaseTransport",
    "HttpxTransport",
]
