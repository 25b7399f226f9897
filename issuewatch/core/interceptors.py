# issuewatch/core/interceptors.py
"""
Interceptor factories

Each factory takes the Monitor and the hook's original value and returns
the replacement to install. Replacements report as a side effect only:
the original is always called (or the original exception re-raised) and
its result returned unchanged. Reports are scheduled, never awaited.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

import httpx

from ..infra.transport import is_delivering_report
from .hosts import (
    CONSOLE_ERROR,
    FETCH,
    GLOBAL_EXCEPTION,
    GLOBAL_FETCH,
    THREAD_EXCEPTION,
    UNHANDLED_REJECTION,
    WINDOW_ERROR,
)
from .report import ErrorType

if TYPE_CHECKING:
    from .monitor import Monitor

logger = logging.getLogger(__name__)

# ---- event labels ----
UNCAUGHT_EXCEPTION_EVENT = "uncaught_exception"
THREAD_EXCEPTION_EVENT = "thread_exception"
UNHANDLED_REJECTION_EVENT = "unhandled_rejection"
CONSOLE_ERROR_EVENT = "console_error"
WINDOW_ERROR_EVENT = "window_error"
FETCH_NETWORK_ERROR_EVENT = "fetch_network_error"

_BODY_EXCERPT = 500

# True while a rejection is handed to the original loop handler; whatever that
# handler logs is the same failure and must not be reported twice
_FORWARDING_REJECTION: ContextVar[bool] = ContextVar("ISSUEWATCH_FORWARDING_REJECTION", default=False)


def _own_logger(name: str) -> bool:
    return name == "issuewatch" or name.startswith("issuewatch.")


# ----------------------------
# Uncaught exceptions
# ----------------------------

def excepthook_interceptor(monitor: "Monitor", original: Callable) -> Callable:
    def issuewatch_excepthook(exc_type, exc_value, exc_tb):
        if not (isinstance(exc_type, type) and issubclass(exc_type, KeyboardInterrupt)):
            monitor.capture_error(UNCAUGHT_EXCEPTION_EVENT, exc_value, ErrorType.UNCAUGHT)
        if original is not None:
            return original(exc_type, exc_value, exc_tb)
        return None

    return issuewatch_excepthook


def thread_excepthook_interceptor(monitor: "Monitor", original: Callable) -> Callable:
    def issuewatch_thread_excepthook(args):
        # threading's default hook ignores SystemExit too
        if args.exc_type is not SystemExit:
            monitor.capture_error(THREAD_EXCEPTION_EVENT, args.exc_value, ErrorType.UNCAUGHT)
        if original is not None:
            return original(args)
        return None

    return issuewatch_thread_excepthook


# ----------------------------
# Unhandled rejections (asyncio)
# ----------------------------

def rejection_interceptor(monitor: "Monitor", original: Optional[Callable]) -> Callable:
    """
    Loop exception handler, installed either as one loop's handler or as
    BaseEventLoop.default_exception_handler (then `loop` is the bound self).

    The loop calls it for failed tasks/futures nobody retrieved, and for
    errors raised in callbacks. A context without an exception is reported
    by its message.
    """
    def issuewatch_exception_handler(loop, context: Dict[str, Any]):
        reason = context.get("exception")
        if reason is None:
            reason = context.get("message") or "Unhandled rejection"
        monitor.capture_error(UNHANDLED_REJECTION_EVENT, reason, ErrorType.PROMISE)

        token = _FORWARDING_REJECTION.set(True)
        try:
            if original is not None:
                return original(loop, context)
            return loop.default_exception_handler(context)
        finally:
            _FORWARDING_REJECTION.reset(token)

    return issuewatch_exception_handler


# ----------------------------
# Console errors (logging)
# ----------------------------

def error_from_log_record(record: logging.LogRecord) -> Optional[BaseException]:
    """
    The exception a log record reports, if it reports one.

    Counted: logger.error(exc), logger.error("label", exc) and
    logger.error("label", exc_info=exc) / logger.exception("label").
    Anything else is ordinary logging and is not reported.
    """
    if record.levelno < logging.ERROR or _own_logger(record.name):
        return None
    if _FORWARDING_REJECTION.get():
        return None

    if isinstance(record.msg, BaseException):
        return record.msg

    if isinstance(record.msg, str):
        if record.exc_info and record.exc_info[1] is not None:
            return record.exc_info[1]
        args = record.args
        if isinstance(args, tuple) and args and isinstance(args[0], BaseException):
            return args[0]

    return None


def console_error_interceptor(monitor: "Monitor", original: Callable) -> Callable:
    def handle(self: logging.Logger, record: logging.LogRecord):
        if not self.disabled:
            error = error_from_log_record(record)
            if error is not None:
                monitor.capture_error(CONSOLE_ERROR_EVENT, error, ErrorType.MANUAL)
        return original(self, record)

    return handle


# ----------------------------
# Rendering-surface errors
# ----------------------------

def window_error_interceptor(monitor: "Monitor", original: Optional[Callable]) -> Callable:
    """
    Error callback of a UI surface, e.g. onerror(message, source, lineno, colno, error).

    The first exception among the arguments is reported; without one, the
    first argument is reported as the message.
    """
    def onerror(*args, **kwargs):
        error = kwargs.get("error")
        if not isinstance(error, BaseException):
            error = next((a for a in args if isinstance(a, BaseException)), None)
        if error is None:
            error = args[0] if args else "Window error"
        monitor.capture_error(WINDOW_ERROR_EVENT, error, ErrorType.UNCAUGHT)

        if callable(original):
            return original(*args, **kwargs)
        return None

    return onerror


# ----------------------------
# Outbound HTTP (httpx)
# ----------------------------

def _status_message(request: httpx.Request, response: httpx.Response) -> str:
    message = f"HTTP {response.status_code} {response.reason_phrase}: {request.method} {request.url}"
    try:
        body = response.text
    except httpx.ResponseNotRead:
        body = ""
    if body:
        message = f"{message} - {body[:_BODY_EXCERPT]}"
    return message


def _check_status(monitor: "Monitor", request: httpx.Request, response: httpx.Response) -> None:
    try:
        if monitor.options.is_error_status(response.status_code):
            monitor.capture_error(
                f"fetch_{response.status_code}",
                _status_message(request, response),
                ErrorType.MANUAL,
            )
    except Exception as e:
        logger.debug("HTTP status check failed: %s", e)


def fetch_interceptor(monitor: "Monitor", original: Callable) -> Callable:
    """Replacement for httpx.AsyncClient.send"""
    async def send(self, request, *args, **kwargs):
        if is_delivering_report():
            return await original(self, request, *args, **kwargs)

        try:
            response = await original(self, request, *args, **kwargs)
        except Exception as exc:
            monitor.capture_error(FETCH_NETWORK_ERROR_EVENT, exc, ErrorType.PROMISE)
            raise

        _check_status(monitor, request, response)
        return response

    return send


def global_fetch_interceptor(monitor: "Monitor", original: Callable) -> Callable:
    """Replacement for httpx.Client.send"""
    def send(self, request, *args, **kwargs):
        if is_delivering_report():
            return original(self, request, *args, **kwargs)

        try:
            response = original(self, request, *args, **kwargs)
        except Exception as exc:
            monitor.capture_error(FETCH_NETWORK_ERROR_EVENT, exc, ErrorType.MANUAL)
            raise

        _check_status(monitor, request, response)
        return response

    return send


# hook name -> factory
INTERCEPTORS: Dict[str, Callable[["Monitor", Any], Any]] = {
    GLOBAL_EXCEPTION: excepthook_interceptor,
    THREAD_EXCEPTION: thread_excepthook_interceptor,
    UNHANDLED_REJECTION: rejection_interceptor,
    CONSOLE_ERROR: console_error_interceptor,
    WINDOW_ERROR: window_error_interceptor,
    FETCH: fetch_interceptor,
    GLOBAL_FETCH: global_fetch_interceptor,
}
