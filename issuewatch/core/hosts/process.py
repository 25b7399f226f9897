# issuewatch/core/hosts/process.py
"""
ProcessHost - hooks of a plain CPython process

    global-exception     sys.excepthook
    thread-exception     threading.excepthook
    unhandled-rejection  asyncio default exception handler (or one loop's handler)
    console-error        logging.Logger.handle
    fetch                httpx.AsyncClient.send
    global-fetch         httpx.Client.send

There is no rendering surface in a process, so window-error is absent.
"""

from __future__ import annotations

import asyncio
import logging
import sys
import threading
from typing import Optional

import httpx

from .base import (
    AccessorSlot,
    AttributeSlot,
    CONSOLE_ERROR,
    FETCH,
    GLOBAL_EXCEPTION,
    GLOBAL_FETCH,
    Host,
    HookSlot,
    THREAD_EXCEPTION,
    UNHANDLED_REJECTION,
)


class ProcessHost(Host):
    """
    Host for a CPython process.

    Without a loop, unhandled-rejection replaces
    asyncio.BaseEventLoop.default_exception_handler, which covers every loop
    created before or after start() that has no handler of its own (or whose
    handler delegates to the default one). With a loop, only that loop's
    exception handler is replaced.
    """

    name = "process"

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def slot(self, hook: str) -> Optional[HookSlot]:
        if hook == GLOBAL_EXCEPTION:
            return AttributeSlot(hook, sys, "excepthook")

        if hook == THREAD_EXCEPTION:
            if not hasattr(threading, "excepthook"):
                return None
            return AttributeSlot(hook, threading, "excepthook")

        if hook == UNHANDLED_REJECTION:
            loop = self._loop
            if loop is None:
                return AttributeSlot(hook, asyncio.BaseEventLoop, "default_exception_handler")
            if loop.is_closed():
                return None
            return AccessorSlot(hook, loop.get_exception_handler, loop.set_exception_handler)

        if hook == CONSOLE_ERROR:
            return AttributeSlot(hook, logging.Logger, "handle")

        if hook == FETCH:
            return AttributeSlot(hook, httpx.AsyncClient, "send")

        if hook == GLOBAL_FETCH:
            return AttributeSlot(hook, httpx.Client, "send")

        return None
