# issuewatch/core/registry.py
"""
HandlerRegistry - originals of every patched hook

Only Monitor.start()/stop() touch it. Each entry is independent, so
restoration order does not matter.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Tuple

from .hosts import HookSlot

logger = logging.getLogger(__name__)


class HandlerRegistry:
    def __init__(self) -> None:
        self._entries: Dict[str, Tuple[HookSlot, Any]] = {}

    def install(self, slot: HookSlot, make_replacement: Callable[[Any], Any]) -> None:
        """
        Replace the slot's value with make_replacement(original).

        The original is recorded before the slot is written, so a failing
        write leaves nothing to restore.
        """
        if slot.name in self._entries:
            return
        original = slot.read()
        replacement = make_replacement(original)
        slot.write(replacement)
        self._entries[slot.name] = (slot, original)
        logger.debug("Installed hook %s", slot.name)

    def restore_all(self) -> List[str]:
        """Put every original back and forget it. Returns restored hook names."""
        restored = []
        for name, (slot, original) in list(self._entries.items()):
            try:
                slot.write(original)
                restored.append(name)
            except Exception as e:
                logger.warning("Failed to restore hook %s: %s", name, e)
        self._entries.clear()
        return restored

    def names(self) -> List[str]:
        return list(self._entries)
