# issuewatch/core/__init__.py
"""
Core: hooks, report building and the Monitor.

No side effects on import; nothing is patched until Monitor.start().
"""
