# issuewatch/infra/transport/__init__.py
from .base import BaseTransport, delivering_report, is_delivering_report
from .http import HttpxTransport

__all__ = [
    "BaseTransport",
    "HttpxTransport",
    "delivering_report",
    "is_delivering_report",
]
