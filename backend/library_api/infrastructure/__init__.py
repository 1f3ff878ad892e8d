"""Infrastructure Layer — persistence, logging, and request middleware.

Invariants:
    - Infrastructure imports from core/ only for error types
    - Storage errors mapped to DocumentStoreError at this boundary
"""
