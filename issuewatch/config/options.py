# issuewatch/config/options.py
"""
Monitor Options

Code holds every default; callers override only what they need.
Options are deeply immutable once built (nested containers are frozen).
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional


DEFAULT_ENDPOINT = "https://your-backend.com/webhook"

DEFAULT_HTTP_ERROR_CODES: FrozenSet[int] = frozenset(
    {400, 401, 403, 404, 429, 500, 502, 503, 504}
)

# Keys accepted in the original camelCase spelling
_CAMEL_ALIASES: Dict[str, str] = {
    "enableConsoleErrors": "enable_console_errors",
    "enablePromiseRejections": "enable_promise_rejections",
    "enableFunctionWrapping": "enable_function_wrapping",
    "enableFetchMonitoring": "enable_fetch_monitoring",
    "monitorHttpErrors": "monitor_http_errors",
    "httpErrorCodes": "http_error_codes",
}

# Fields echoed into every report's "data"
PASS_THROUGH_FIELDS = ("notifier", "silent", "debug")


def _freeze(value: Any) -> Any:
    """Recursively freeze mappings and lists"""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    if isinstance(value, set):
        return frozenset(value)
    return value


def _thaw(value: Any) -> Any:
    """Inverse of _freeze, for JSON serialization"""
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, (tuple, frozenset)):
        return [_thaw(item) for item in value]
    return value


@dataclass(frozen=True)
class MonitorOptions:
    """
    Monitor configuration.

    Capture toggles decide which hooks are INSTALLED at start(); they are not
    consulted per event, with one exception: monitor_http_errors is checked
    by the fetch interceptors on every response.
    """

    endpoint: str = DEFAULT_ENDPOINT

    enable_console_errors: bool = True
    enable_promise_rejections: bool = True
    enable_function_wrapping: bool = True
    enable_fetch_monitoring: bool = True
    monitor_http_errors: bool = True
    http_error_codes: FrozenSet[int] = DEFAULT_HTTP_ERROR_CODES

    # Pass-through hints for the webhook
    notifier: Optional[str] = None
    silent: bool = False
    debug: bool = False
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "http_error_codes", frozenset(self.http_error_codes))
        object.__setattr__(self, "metadata", _freeze(dict(self.metadata or {})))

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]] = None, **overrides: Any) -> "MonitorOptions":
        """
        Build options from a plain mapping.

        Accepts snake_case or camelCase keys. Keys that are not options are
        kept as metadata, so {"notifier": "discord", "team": "web"} works.
        """
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}

        merged = dict(data or {})
        merged.update(overrides)

        for key, value in merged.items():
            name = _CAMEL_ALIASES.get(key, key)
            if name == "metadata":
                extra.update(value or {})
            elif name in known:
                kwargs[name] = value
            else:
                extra[key] = value

        if extra:
            kwargs["metadata"] = extra
        return cls(**kwargs)

    def is_error_status(self, status_code: int) -> bool:
        return self.monitor_http_errors and status_code in self.http_error_codes

    def report_metadata(self) -> Dict[str, Any]:
        """
        Metadata attached to every report.

        Only pass-through hints and free-form metadata are included; the
        endpoint, capture toggles and credentials never leave the process.
        """
        data: Dict[str, Any] = {}
        for name in PASS_THROUGH_FIELDS:
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        data.update(_thaw(self.metadata))
        return data

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/debugging"""
        result: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "http_error_codes":
                result[f.name] = sorted(value, key=str)
            else:
                result[f.name] = _thaw(value)
        return result


def coerce_options(
    options: Optional[Any] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> MonitorOptions:
    """Accept MonitorOptions, a mapping, or None"""
    overrides = dict(overrides or {})
    if options is None:
        return MonitorOptions.from_mapping(overrides)
    if isinstance(options, MonitorOptions):
        if not overrides:
            return options
        return MonitorOptions.from_mapping(options.to_dict(), **overrides)
    if isinstance(options, Mapping):
        return MonitorOptions.from_mapping(options, **overrides)
    raise TypeError(f"options must be MonitorOptions or a mapping, got {type(options).__name__}")

