# issuewatch/core/hosts/__init__.py
"""
Hosts: which global error surfaces a runtime exposes.

detect_host() is called once when a Monitor is built.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from .base import (
    ALL_HOOKS,
    AccessorSlot,
    AttributeSlot,
    CONSOLE_ERROR,
    FETCH,
    GLOBAL_EXCEPTION,
    GLOBAL_FETCH,
    Host,
    HostCapabilities,
    HookSlot,
    THREAD_EXCEPTION,
    UNHANDLED_REJECTION,
    WINDOW_ERROR,
)
from .custom import CustomHost
from .process import ProcessHost


def detect_host(loop: Optional[asyncio.AbstractEventLoop] = None) -> Host:
    """Host for the current runtime"""
    return ProcessHost(loop=loop)


__all__ = [
    "ALL_HOOKS",
    "AccessorSlot",
    "AttributeSlot",
    "CONSOLE_ERROR",
    "CustomHost",
    "FETCH",
    "GLOBAL_EXCEPTION",
    "GLOBAL_FETCH",
    "Host",
    "HostCapabilities",
    "HookSlot",
    "ProcessHost",
    "THREAD_EXCEPTION",
    "UNHANDLED_REJECTION",
    "WINDOW_ERROR",
    "detect_host",
]
