"""Core Layer — error taxonomy and domain constants, no IO.

Invariants:
    - No module in core/ imports from sdk/, services/, api/ or infrastructure/
"""
