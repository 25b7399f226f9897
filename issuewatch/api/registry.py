# issuewatch/api/registry.py
"""
MonitorRegistry - owner of the one active Monitor

The package keeps a single default registry for the module-level helpers
(monitor(), stop_monitoring(), ...). Tests and embedders can build their
own registry to stay isolated from it.

start/stop are expected from one control thread; nothing here is locked.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..core.monitor import Monitor

logger = logging.getLogger(__name__)


class MonitorRegistry:
    def __init__(self) -> None:
        self._current: Optional[Monitor] = None

    @property
    def current(self) -> Optional[Monitor]:
        return self._current

    def activate(self, monitor: Monitor) -> Monitor:
        """
        Stop the current monitor (if any), then start and keep this one.

        A monitor whose start() was rolled back is not kept; current is
        None afterwards.
        """
        previous = self._current
        if previous is not None and previous is not monitor:
            previous.stop()
            logger.debug("Replaced active monitor %r", previous)
        self._current = None
        monitor.start()
        if monitor.active:
            self._current = monitor
        return monitor

    def deactivate(self) -> Optional[Monitor]:
        """Stop and forget the current monitor. Returns it, or None."""
        monitor = self._current
        if monitor is None:
            return None
        monitor.stop()
        self._current = None
        return monitor


# Process-wide default
default_registry = MonitorRegistry()
