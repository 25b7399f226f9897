# issuewatch/core/report.py
"""
ErrorReport: the JSON document POSTed to the webhook.

Wire field names are stable; optional attribution fields that could not be
extracted are left out of the payload entirely.
"""

from __future__ import annotations

import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .stack import StackFrame, parse_stack


class ErrorType(str, Enum):
    """
    How an error was discovered.

    - UNCAUGHT: reached a top-level exception hook
    - PROMISE: an awaitable failed with nobody handling it
    - MANUAL: reported by a wrapper, an interceptor or the caller
    """
    UNCAUGHT = "uncaught"
    PROMISE = "promise"
    MANUAL = "manual"

    @classmethod
    def coerce(cls, value: Any) -> "ErrorType":
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        if text in ("promise-rejection", "promise_rejection", "rejection"):
            return cls.PROMISE
        return cls(text)


# Omitted from the payload when unset
OPTIONAL_FIELDS = ("stack", "file", "function", "line", "col")


class ErrorReport(BaseModel):
    """One error report, as sent to the webhook"""
    model_config = ConfigDict(populate_by_name=True)

    event: str = Field(description="Event label, e.g. 'checkout.calculate_totals'")
    error: str = Field(description="Human-readable message")
    stack: Optional[str] = Field(default=None, description="Raw stack text")

    file: Optional[str] = None
    function: Optional[str] = None
    line: Optional[str] = None
    col: Optional[str] = None

    data: Dict[str, Any] = Field(default_factory=dict)
    timestamp: str = Field(description="ISO-8601, UTC")
    error_type: ErrorType = Field(default=ErrorType.MANUAL, alias="errorType")

    def to_payload(self) -> Dict[str, Any]:
        payload = self.model_dump(by_alias=True, mode="json")
        for key in OPTIONAL_FIELDS:
            if payload.get(key) is None:
                payload.pop(key, None)
        return payload


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """2024-05-01T12:00:00.000Z"""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def describe_error(error: Any) -> Tuple[str, Optional[str]]:
    """
    Message and stack text for anything a caller may hand over.

    Exceptions carry their formatted traceback; any other value is
    stringified and has no stack.
    """
    if isinstance(error, BaseException):
        message = str(error) or type(error).__name__
        stack = "".join(traceback.format_exception(type(error), error, error.__traceback__)).rstrip("\n")
        return message, stack or None

    if error is None:
        return "Unknown error", None

    return str(error), None


def build_report(
    event: str,
    error: Any,
    error_type: Any = ErrorType.MANUAL,
    data: Optional[Dict[str, Any]] = None,
) -> ErrorReport:
    message, stack = describe_error(error)
    frame = parse_stack(stack) or StackFrame()

    return ErrorReport(
        event=str(event),
        error=message,
        stack=stack,
        file=frame.file,
        function=frame.function,
        line=frame.line,
        col=frame.col,
        data=dict(data or {}),
        timestamp=utc_timestamp(),
        error_type=ErrorType.coerce(error_type),
    )


__all__ = ["ErrorType", "ErrorReport", "build_report", "describe_error", "utc_timestamp"]
