# issuewatch/core/errors/__init__.py
"""
Error types for issuewatch's own pipeline.

Errors observed in the host application are never wrapped in these types;
they are reported and re-raised unchanged.
"""

from . import codes
from .exceptions import IssueWatchError

__all__ = ["IssueWatchError", "codes"]
