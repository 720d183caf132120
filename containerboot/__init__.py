"""containerboot: startup orchestration and config rendering for the Symfony container.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""

__version__ = "1.0.0"
