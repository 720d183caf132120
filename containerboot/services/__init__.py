"""Services Layer: the startup sequence (wait, maintain, prepare, hand off).

Invariants:
    - Services orchestrate core/ data with infrastructure/ IO
    - Every external collaborator is injectable
"""
