# issuewatch/config/validator.py
"""
Options Validator

Checks MonitorOptions for illegal or misleading combinations.
Returns structured issues with level (warn/error), path, message, hint.
Issues are logged by the Monitor; they never stop it from being built.
"""

from typing import List, Literal
from dataclasses import dataclass
from urllib.parse import urlparse

from .options import MonitorOptions


@dataclass(frozen=True)
class ConfigIssue:
    """
    Configuration validation issue

    Structured output for logging.
    """
    level: Literal["warn", "error"]
    path: str  # e.g., "options.endpoint"
    message: str
    hint: str = ""

    def __str__(self) -> str:
        hint_str = f" (hint: {self.hint})" if self.hint else ""
        return f"[{self.level}] [{self.path}] {self.message}{hint_str}"


def validate_options(options: MonitorOptions, api_key: str = "") -> List[ConfigIssue]:
    """
    Validate options (and the credential token) for illegal/misleading combinations.

    Returns:
        List of issues (warn/error level)
    """
    issues = []

    if not api_key or not str(api_key).strip():
        issues.append(ConfigIssue(
            level="error",
            path="api_key",
            message="api_key is empty; the webhook will reject every report",
            hint="Pass the key issued for your webhook",
        ))

    parsed = urlparse(options.endpoint or "")
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        issues.append(ConfigIssue(
            level="error",
            path="options.endpoint",
            message=f"endpoint {options.endpoint!r} is not an http(s) URL",
            hint="Use e.g. https://example.com/webhook",
        ))

    bad_codes = [
        c for c in options.http_error_codes
        if not isinstance(c, int) or isinstance(c, bool) or not 100 <= c <= 599
    ]
    if bad_codes:
        issues.append(ConfigIssue(
            level="error",
            path="options.http_error_codes",
            message=f"not HTTP status codes: {sorted(map(str, bad_codes))}",
            hint="Use integers between 100 and 599",
        ))

    # monitor_http_errors without fetch monitoring installs nothing to check
    if options.monitor_http_errors and not options.enable_fetch_monitoring:
        issues.append(ConfigIssue(
            level="warn",
            path="options.monitor_http_errors",
            message="monitor_http_errors has no effect when enable_fetch_monitoring=false",
            hint="Set enable_fetch_monitoring=true to inspect response status codes",
        ))

    if options.monitor_http_errors and options.enable_fetch_monitoring and not options.http_error_codes:
        issues.append(ConfigIssue(
            level="warn",
            path="options.http_error_codes",
            message="http_error_codes is empty; no status code will be reported",
        ))

    if options.silent and options.debug:
        issues.append(ConfigIssue(
            level="warn",
            path="options.silent",
            message="silent=true and debug=true: payloads are logged but delivery failures are not",
        ))

    return issues


__all__ = ["ConfigIssue", "validate_options"]
