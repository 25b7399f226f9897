# issuewatch/infra/__init__.py
"""
Infrastructure: the concrete I/O the core depends on (report delivery).
"""
