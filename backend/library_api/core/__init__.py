"""Core Layer — error types and id generation, no IO.

Invariants:
    - No module in core/ imports from api/ or infrastructure/
"""
