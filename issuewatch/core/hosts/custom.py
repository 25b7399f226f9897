# issuewatch/core/hosts/custom.py
"""
CustomHost - explicit slots supplied by the embedding application

Used where the runtime has no globals worth patching, or where the
application prefers to route its error-producing calls through objects it
owns (a UI toolkit's error callback, an in-house HTTP client, ...).

    >>> class Window:
    ...     onerror = None
    >>> window = Window()
    >>> host = CustomHost({"window-error": AttributeSlot("window-error", window, "onerror")})
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional

from .base import ALL_HOOKS, Host, HookSlot


class CustomHost(Host):
    name = "custom"

    def __init__(self, slots: Mapping[str, HookSlot], *, name: str = "custom") -> None:
        unknown = sorted(set(slots) - set(ALL_HOOKS))
        if unknown:
            raise ValueError(f"unknown hook names: {unknown}; expected one of {list(ALL_HOOKS)}")
        self._slots: Dict[str, HookSlot] = dict(slots)
        self.name = name

    def slot(self, hook: str) -> Optional[HookSlot]:
        return self._slots.get(hook)
