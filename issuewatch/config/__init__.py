# issuewatch/config/__init__.py
"""
issuewatch Configuration

Design principles:
1. Code holds every default; options only override them
2. Capture toggles decide which hooks are installed at start()
3. Options are immutable once a Monitor is built (replace the Monitor to change them)
"""

from .options import (
    DEFAULT_ENDPOINT,
    DEFAULT_HTTP_ERROR_CODES,
    MonitorOptions,
    coerce_options,
)
from .validator import ConfigIssue, validate_options

__all__ = [
    "DEFAULT_ENDPOINT",
    "DEFAULT_HTTP_ERROR_CODES",
    "MonitorOptions",
    "coerce_options",
    "ConfigIssue",
    "validate_options",
]
