# issuewatch/core/errors/codes.py
from __future__ import annotations

from typing import Final


# ---- canonical error codes (stable public contract) ----
# generic
UNKNOWN: Final[str] = "UNKNOWN"

# lifecycle
HOOK_INSTALL_FAILED: Final[str] = "HOOK_INSTALL_FAILED"
NO_ACTIVE_MONITOR: Final[str] = "NO_ACTIVE_MONITOR"

# delivery
DELIVERY_FAILED: Final[str] = "DELIVERY_FAILED"
HTTP_STATUS: Final[str] = "HTTP_STATUS"
NETWORK_ERROR: Final[str] = "NETWORK_ERROR"


# ---- semantic groups (internal helpers) ----

DELIVERY_CODES: Final[set[str]] = {
    DELIVERY_FAILED,
    HTTP_STATUS,
    NETWORK_ERROR,
}

LIFECYCLE_CODES: Final[set[str]] = {
    HOOK_INSTALL_FAILED,
    NO_ACTIVE_MONITOR,
}

# Codes an IssueWatchError may carry; anything else is downgraded to UNKNOWN.
KNOWN_CODES: Final[set[str]] = {
    UNKNOWN,
} | DELIVERY_CODES | LIFECYCLE_CODES
