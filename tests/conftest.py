"""
Shared fixtures: a recording webhook transport and fake hosts.
"""

import threading
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import httpx
import pytest

from issuewatch import AttributeSlot, CustomHost, HookSlot, Monitor
from issuewatch.core.hosts import (
    CONSOLE_ERROR,
    FETCH,
    GLOBAL_EXCEPTION,
    GLOBAL_FETCH,
    THREAD_EXCEPTION,
    UNHANDLED_REJECTION,
    WINDOW_ERROR,
)
from issuewatch.infra.transport import BaseTransport


@pytest.fixture
def anyio_backend():
    # trio is not a dependency
    return "asyncio"


class RecordingTransport(BaseTransport):
    """Webhook stand-in: records every report, answers with a fixed status"""

    def __init__(
        self,
        status_code: int = 200,
        json_body: Any = None,
        exc: Optional[BaseException] = None,
    ) -> None:
        self.status_code = status_code
        self.json_body = json_body
        self.exc = exc
        self.calls: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    async def post(self, url, *, payload, headers):
        with self._lock:
            self.calls.append({"url": url, "payload": payload, "headers": headers})
        if self.exc is not None:
            raise self.exc
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def payloads(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [c["payload"] for c in self.calls]


class BrokenSlot(HookSlot):
    """Readable, but refuses to be written"""

    def read(self):
        return None

    def write(self, value):
        raise PermissionError("slot is read-only")


def original_excepthook(exc_type, exc_value, exc_tb):
    return ("excepthook", exc_value)


def original_thread_hook(args):
    return ("thread_hook", args.exc_value)


def original_rejection_handler(loop, context):
    return ("rejection", context.get("message"))


def original_onerror(*args, **kwargs):
    return ("onerror", args)


def make_runtime() -> SimpleNamespace:
    """Stand-in globals for a CustomHost; every hook starts with a known original"""
    return SimpleNamespace(
        excepthook=original_excepthook,
        thread_excepthook=original_thread_hook,
        rejection_handler=original_rejection_handler,
        console_handle=lambda logger, record: None,
        onerror=original_onerror,
        fetch=lambda client, request: None,
        global_fetch=lambda client, request: None,
    )


_RUNTIME_ATTRIBUTES = {
    GLOBAL_EXCEPTION: "excepthook",
    THREAD_EXCEPTION: "thread_excepthook",
    UNHANDLED_REJECTION: "rejection_handler",
    CONSOLE_ERROR: "console_handle",
    WINDOW_ERROR: "onerror",
    FETCH: "fetch",
    GLOBAL_FETCH: "global_fetch",
}


def make_host(runtime: SimpleNamespace, hooks=None) -> CustomHost:
    hooks = hooks if hooks is not None else list(_RUNTIME_ATTRIBUTES)
    return CustomHost(
        {name: AttributeSlot(name, runtime, _RUNTIME_ATTRIBUTES[name]) for name in hooks},
        name="fake",
    )


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def runtime():
    return make_runtime()


@pytest.fixture
def make_monitor(transport):
    """Build monitors that are always stopped at teardown"""
    created: List[Monitor] = []

    def factory(host, api_key: str = "test-key", **options) -> Monitor:
        options.setdefault("transport", transport)
        monitor = Monitor(api_key, host=host, **options)
        created.append(monitor)
        return monitor

    yield factory

    for monitor in created:
        monitor.stop()
        monitor.flush(timeout=5)
