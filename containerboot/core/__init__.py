"""Core Layer: pure startup logic (errors, redaction, maintenance plan).

Invariants:
    - No IO in core/: no subprocesses, no sockets, no filesystem
"""
