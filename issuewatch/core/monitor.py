# issuewatch/core/monitor.py
"""
Monitor - hook lifecycle, report delivery and manual wrapping

    >>> monitor = Monitor("my-api-key", {"notifier": "discord"})
    >>> monitor.start()
    ...
    >>> monitor.stop()

A Monitor can be built many times; the "one active monitor per process"
rule is kept by issuewatch.api.MonitorRegistry, not by this class.
"""

from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import MutableMapping
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

import httpx

from ..config import MonitorOptions, coerce_options, validate_options
from ..infra.transport import BaseTransport, HttpxTransport
from .dispatch import ReportDispatcher
from .errors import IssueWatchError, codes
from .hosts import (
    CONSOLE_ERROR,
    FETCH,
    GLOBAL_EXCEPTION,
    GLOBAL_FETCH,
    Host,
    THREAD_EXCEPTION,
    UNHANDLED_REJECTION,
    WINDOW_ERROR,
    detect_host,
)
from .interceptors import INTERCEPTORS
from .registry import HandlerRegistry
from .report import ErrorType, build_report

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

ANONYMOUS_FUNCTION = "anonymous_function"


def callable_label(fn: Callable, label: Optional[str]) -> str:
    if label:
        return label
    name = getattr(fn, "__name__", "") or ""
    if not name or name == "<lambda>":
        return ANONYMOUS_FUNCTION
    return name


class Monitor:
    """
    Error monitor bound to one API key and one set of options.

    Args:
        api_key: bearer token sent with every report
        options: MonitorOptions or a mapping (snake_case or camelCase keys)
        host: where hooks are installed (detected when omitted)
        transport: report delivery (HttpxTransport when omitted)
        **overrides: individual option overrides
    """

    def __init__(
        self,
        api_key: str,
        options: Optional[Any] = None,
        *,
        host: Optional[Host] = None,
        transport: Optional[BaseTransport] = None,
        **overrides: Any,
    ) -> None:
        self._api_key = api_key
        self._options = coerce_options(options, overrides)
        self._host = host or detect_host()
        self._transport = transport or HttpxTransport()
        self._registry = HandlerRegistry()
        self._dispatcher = ReportDispatcher()
        self._active = False

        for issue in validate_options(self._options, api_key):
            logger.warning("issuewatch config %s", issue)

    # ---- read-only state ----

    @property
    def options(self) -> MonitorOptions:
        return self._options

    @property
    def host(self) -> Host:
        return self._host

    @property
    def active(self) -> bool:
        return self._active

    @property
    def installed_hooks(self) -> List[str]:
        return self._registry.names()

    def __repr__(self) -> str:
        state = "active" if self._active else "inactive"
        return f"Monitor({self._options.endpoint!r}, {state}, hooks={self.installed_hooks})"

    # ---- lifecycle ----

    def _planned_hooks(self) -> List[Tuple[str, bool]]:
        opts = self._options
        return [
            (GLOBAL_EXCEPTION, True),
            (THREAD_EXCEPTION, True),
            (UNHANDLED_REJECTION, opts.enable_promise_rejections),
            (CONSOLE_ERROR, opts.enable_console_errors),
            (WINDOW_ERROR, True),
            (FETCH, opts.enable_fetch_monitoring),
            (GLOBAL_FETCH, opts.enable_fetch_monitoring),
        ]

    def start(self) -> None:
        """
        Install every enabled hook the host exposes. No-op when active.

        All-or-nothing: if one hook cannot be installed, the ones already
        installed are restored and the monitor stays inactive.
        """
        if self._active:
            return

        for name, enabled in self._planned_hooks():
            if not enabled:
                continue
            slot = self._host.slot(name)
            if slot is None:
                logger.debug("Hook %s not available on %s host", name, self._host.name)
                continue

            factory = INTERCEPTORS[name]
            try:
                self._registry.install(slot, functools.partial(factory, self))
            except Exception as e:
                self._registry.restore_all()
                logger.warning("issuewatch start aborted: %s", IssueWatchError.install_failed(name, cause=e))
                return

        self._active = True
        logger.debug("Monitoring started (hooks: %s)", ", ".join(self._registry.names()) or "none")

    def stop(self) -> None:
        """Restore every original hook. No-op when inactive."""
        if not self._active:
            return
        restored = self._registry.restore_all()
        self._active = False
        logger.debug("Monitoring stopped (restored: %s)", ", ".join(restored) or "none")

    def __enter__(self) -> "Monitor":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    # ---- reporting ----

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    def _log_failure(self, message: str, *args: Any) -> None:
        if self._options.silent:
            logger.debug(message, *args)
        else:
            logger.error(message, *args)

    async def report_error(
        self,
        event: str,
        error: Any,
        error_type: Any = ErrorType.MANUAL,
        data: Optional[Dict[str, Any]] = None,
    ) -> Optional[Any]:
        """
        Build and POST one report.

        Never raises: build and delivery failures (including non-2xx
        responses) are logged and swallowed.

        Args:
            event: event label, e.g. "checkout.calculate_totals"
            error: exception, message string, or any value
            error_type: "uncaught" | "promise" | "manual"
            data: per-call metadata merged over the options' metadata

        Returns:
            Decoded JSON body of a successful response, otherwise None
        """
        try:
            metadata = self._options.report_metadata()
            metadata.update(data or {})
            payload = build_report(event, error, error_type, metadata).to_payload()

            if self._options.debug:
                logger.info("Reporting issue: %s", payload)

            response = await self._transport.post(
                self._options.endpoint,
                payload=payload,
                headers=self._headers(),
            )
            if not response.is_success:
                raise IssueWatchError.http_status(response.status_code, url=self._options.endpoint)

            if not response.content:
                return None
            try:
                return response.json()
            except ValueError:
                return None
        except httpx.TransportError as e:
            error = IssueWatchError.delivery_failed(
                f"{type(e).__name__}: {e}",
                error_code=codes.NETWORK_ERROR,
                details={"url": self._options.endpoint},
                cause=e,
            )
            self._log_failure("Issue update failed: %s", error)
            return None
        except Exception as e:
            self._log_failure("Issue update failed: %s", e)
            return None

    def capture_error(
        self,
        event: str,
        error: Any,
        error_type: Any = ErrorType.MANUAL,
        data: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Schedule report_error() without waiting for it.

        Safe to call from any hook, callback or synchronous code.
        """
        try:
            self._dispatcher.submit(lambda: self.report_error(event, error, error_type, data))
        except Exception as e:
            self._log_failure("Could not schedule report for %s: %s", event, e)

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait for reports sent from background threads"""
        return self._dispatcher.flush(timeout)

    async def drain(self) -> None:
        """Wait for reports scheduled on the running loop"""
        await self._dispatcher.drain()

    # ---- manual wrapping ----

    def _watch_awaitable(self, awaitable: Any, event: str) -> Any:
        """Report a failing awaitable; the awaited result and exception are unchanged"""
        if inspect.iscoroutine(awaitable):
            async def watched():
                try:
                    return await awaitable
                except Exception as e:
                    self.capture_error(event, e, ErrorType.MANUAL)
                    raise
            return watched()

        add_done_callback = getattr(awaitable, "add_done_callback", None)
        if callable(add_done_callback):
            def on_done(fut):
                if fut.cancelled():
                    return
                exc = fut.exception()
                if exc is not None:
                    self.capture_error(event, exc, ErrorType.MANUAL)
            add_done_callback(on_done)

        return awaitable

    def wrap_function(self, fn: F, label: Optional[str] = None) -> F:
        """
        Report failures of fn, then let them propagate unchanged.

        - a synchronous raise is reported and re-raised as the same object
        - coroutine functions stay coroutine functions
        - an awaitable returned by a plain function reports if it fails
        - successful calls return the original value and report nothing
        """
        if not self._options.enable_function_wrapping:
            return fn

        event = callable_label(fn, label)

        if inspect.iscoroutinefunction(fn):
            @functools.wraps(fn)
            async def async_wrapper(*args, **kwargs):
                try:
                    return await fn(*args, **kwargs)
                except Exception as e:
                    self.capture_error(event, e, ErrorType.MANUAL)
                    raise
            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                result = fn(*args, **kwargs)
            except Exception as e:
                self.capture_error(event, e, ErrorType.MANUAL)
                raise
            if inspect.isawaitable(result):
                return self._watch_awaitable(result, event)
            return result

        return wrapper  # type: ignore[return-value]

    def wrap_object(self, obj: Any, label: Optional[str] = None) -> Any:
        """
        Wrap every own function-valued attribute of obj in place.

        Own attributes are the entries of obj.__dict__ and its assigned
        __slots__. Methods live on the class, not on instances: pass the
        class to wrap its methods for every instance. Mappings have their
        function-valued items wrapped instead. Returns the same object.
        """
        prefix = label or "Object"

        if isinstance(obj, MutableMapping):
            for key, value in list(obj.items()):
                if _is_function_value(value):
                    obj[key] = self.wrap_function(value, f"{prefix}.{key}")
            return obj

        for name, value in _own_attributes(obj):
            if name.startswith("__") and name.endswith("__"):
                continue
            if _is_function_value(value):
                setattr(obj, name, self.wrap_function(value, f"{prefix}.{name}"))
        return obj


def _own_attributes(obj: Any) -> List[Tuple[str, Any]]:
    """(name, value) of obj.__dict__ entries and assigned __slots__"""
    own: Dict[str, Any] = dict(getattr(obj, "__dict__", {}))
    for klass in type(obj).__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            # unassigned slots raise AttributeError
            if name not in own and hasattr(obj, name):
                own[name] = getattr(obj, name)
    return list(own.items())


def _is_function_value(value: Any) -> bool:
    return inspect.isfunction(value) or inspect.ismethod(value) or inspect.isbuiltin(value)
