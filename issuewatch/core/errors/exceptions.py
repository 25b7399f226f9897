# issuewatch/core/errors/exceptions.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from . import codes


def _safe_str(x: Any) -> str:
    try:
        return str(x)
    except Exception:
        return "<unstringifiable>"


def _normalize_error_code(code: Any) -> str:
    """
    Keep error_code stable and finite.
    Unknown codes are downgraded instead of leaking into logs and payloads.
    """
    c = _safe_str(code or codes.UNKNOWN).strip() or codes.UNKNOWN
    if c in codes.KNOWN_CODES:
        return c
    return codes.UNKNOWN


@dataclass
class IssueWatchError(Exception):
    """
    The one exception type raised inside the reporting pipeline.

    It never escapes Monitor.report_error(); it exists so that delivery and
    lifecycle failures are logged with a stable code.
    """
    message: str
    error_code: str = codes.UNKNOWN
    phase: str = "unknown"              # build / deliver / install
    details: Dict[str, Any] = field(default_factory=dict)
    cause: Optional[BaseException] = None

    def __post_init__(self) -> None:
        self.error_code = _normalize_error_code(self.error_code)
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    @property
    def is_delivery(self) -> bool:
        return self.error_code in codes.DELIVERY_CODES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "phase": self.phase,
            "details": self.details,
        }

    # -------- factories --------

    @classmethod
    def delivery_failed(
        cls,
        message: str,
        *,
        error_code: str = codes.DELIVERY_FAILED,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> "IssueWatchError":
        return cls(
            message=message,
            error_code=error_code,
            phase="deliver",
            details=details or {},
            cause=cause,
        )

    @classmethod
    def http_status(cls, status_code: int, *, url: str = "") -> "IssueWatchError":
        return cls.delivery_failed(
            f"Request failed with status {status_code}",
            error_code=codes.HTTP_STATUS,
            details={"status": status_code, "url": url},
        )

    @classmethod
    def install_failed(
        cls,
        hook: str,
        *,
        cause: Optional[BaseException] = None,
    ) -> "IssueWatchError":
        return cls(
            message=f"Failed to install hook '{hook}': {_safe_str(cause)}",
            error_code=codes.HOOK_INSTALL_FAILED,
            phase="install",
            details={"hook": hook},
            cause=cause,
        )
