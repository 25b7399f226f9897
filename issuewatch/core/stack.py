# issuewatch/core/stack.py
"""
Stack-frame extraction

Raw stack text in, optional StackFrame out. This is a best-effort heuristic
over unstructured text, kept behind parse_stack() so it can be replaced or
disabled without touching the Monitor.

Recognized frame lines:
    at <function> (<file>:<line>:<col>)
    at <file>:<line>:<col>
    File "<file>", line <line>, in <function>

The first line of the text is the error summary and is always skipped.
Python traceback frames are listed outermost first, so they are considered
innermost first.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional


# Frames whose file contains one of these are third-party/internal
DEFAULT_INTERNAL_MARKERS = ("node_modules", "site-packages")

_NAMED_FRAME = re.compile(r"^\s*at\s+(?P<function>.*?)\s+\((?P<file>.*):(?P<line>\d+):(?P<col>\d+)\)\s*$")
_ANONYMOUS_FRAME = re.compile(r"^\s*at\s+(?P<file>.*):(?P<line>\d+):(?P<col>\d+)\s*$")
_PYTHON_FRAME = re.compile(r'^\s*File "(?P<file>.+?)", line (?P<line>\d+)(?:, in (?P<function>.+?))?\s*$')

_PYTHON_HEADER = "Traceback (most recent call last):"


@dataclass(frozen=True)
class StackFrame:
    """Attribution extracted from one stack line; all fields are strings"""
    function: Optional[str] = None
    file: Optional[str] = None
    line: Optional[str] = None
    col: Optional[str] = None

    def is_internal(self, markers: Iterable[str] = DEFAULT_INTERNAL_MARKERS) -> bool:
        return bool(self.file) and any(m in self.file for m in markers)


def _match_line(text: str) -> Optional[StackFrame]:
    m = _NAMED_FRAME.match(text)
    if m:
        return StackFrame(m.group("function") or None, m.group("file"), m.group("line"), m.group("col"))

    m = _ANONYMOUS_FRAME.match(text)
    if m:
        return StackFrame(None, m.group("file"), m.group("line"), m.group("col"))

    m = _PYTHON_FRAME.match(text)
    if m:
        return StackFrame(m.group("function"), m.group("file"), m.group("line"), None)

    return None


def iter_frames(stack: Optional[str]) -> List[StackFrame]:
    """All recognized frames, most relevant (innermost) first"""
    if not stack:
        return []

    lines = stack.splitlines()
    frames = [f for f in (_match_line(line) for line in lines[1:]) if f is not None]

    if lines[0].strip() == _PYTHON_HEADER:
        frames.reverse()
    return frames


def parse_stack(
    stack: Optional[str],
    internal_markers: Iterable[str] = DEFAULT_INTERNAL_MARKERS,
) -> Optional[StackFrame]:
    """
    Pick the frame that best attributes an error.

    Returns the first frame whose file carries no internal marker, else the
    first recognized frame, else None. Never raises.
    """
    try:
        frames = iter_frames(stack)
    except Exception:
        return None

    if not frames:
        return None

    markers = tuple(internal_markers)
    for frame in frames:
        if not frame.is_internal(markers):
            return frame
    return frames[0]


__all__ = ["DEFAULT_INTERNAL_MARKERS", "StackFrame", "iter_frames", "parse_stack"]
