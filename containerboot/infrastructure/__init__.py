"""Infrastructure Layer: subprocesses, database probes, logging.

Invariants:
    - Infrastructure never imports from services/
    - All external failures mapped to core/errors.py types
"""
