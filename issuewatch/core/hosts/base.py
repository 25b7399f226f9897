# issuewatch/core/hosts/base.py
"""
Host abstraction

A Host describes which global error surfaces the current runtime exposes.
Each surface is a HookSlot: something holding one value (a hook function,
a handler, a method) that can be read and replaced. The Monitor never
branches on the runtime itself; it asks the host for slots by name.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple


# ---- hook names (stable; used as HandlerRegistry keys) ----
GLOBAL_EXCEPTION = "global-exception"
THREAD_EXCEPTION = "thread-exception"
UNHANDLED_REJECTION = "unhandled-rejection"
CONSOLE_ERROR = "console-error"
WINDOW_ERROR = "window-error"
FETCH = "fetch"
GLOBAL_FETCH = "global-fetch"

ALL_HOOKS: Tuple[str, ...] = (
    GLOBAL_EXCEPTION,
    THREAD_EXCEPTION,
    UNHANDLED_REJECTION,
    CONSOLE_ERROR,
    WINDOW_ERROR,
    FETCH,
    GLOBAL_FETCH,
)


class HookSlot(ABC):
    """One replaceable global value"""

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    def read(self) -> Any:
        ...

    @abstractmethod
    def write(self, value: Any) -> None:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class AttributeSlot(HookSlot):
    """Slot backed by an attribute, e.g. sys.excepthook or httpx.Client.send"""

    def __init__(self, name: str, target: Any, attribute: str) -> None:
        super().__init__(name)
        self.target = target
        self.attribute = attribute

    def read(self) -> Any:
        return getattr(self.target, self.attribute)

    def write(self, value: Any) -> None:
        setattr(self.target, self.attribute, value)

    def __repr__(self) -> str:
        owner = getattr(self.target, "__name__", type(self.target).__name__)
        return f"AttributeSlot({self.name!r}, {owner}.{self.attribute})"


class AccessorSlot(HookSlot):
    """Slot backed by a getter/setter pair, e.g. loop.get_exception_handler"""

    def __init__(self, name: str, getter: Callable[[], Any], setter: Callable[[Any], None]) -> None:
        super().__init__(name)
        self._getter = getter
        self._setter = setter

    def read(self) -> Any:
        return self._getter()

    def write(self, value: Any) -> None:
        self._setter(value)


@dataclass(frozen=True)
class HostCapabilities:
    """
    Read-only view of which hooks a host exposes.

    For logging/debugging; the Monitor asks Host.slot() directly.
    """
    host: str
    hooks: Tuple[str, ...]

    def supports(self, hook: str) -> bool:
        return hook in self.hooks

    def to_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "hooks": {name: ("available" if name in self.hooks else "absent") for name in ALL_HOOKS},
        }

    def __str__(self) -> str:
        lines = [f"Host capabilities ({self.host}):"]
        for name in ALL_HOOKS:
            lines.append(f"  {name}: {'available' if name in self.hooks else 'absent'}")
        return "\n".join(lines)


class Host(ABC):
    """Capability provider for one kind of runtime"""

    name: str = "host"

    @abstractmethod
    def slot(self, hook: str) -> Optional[HookSlot]:
        """Slot for a hook name, or None when the runtime has no such facility"""

    def capabilities(self) -> HostCapabilities:
        return HostCapabilities(
            host=self.name,
            hooks=tuple(h for h in ALL_HOOKS if self.slot(h) is not None),
        )
