"""Library API Package — REST API over a JSON-file book collection.

Invariants:
    - Package root holds only the version (import side-effects prohibited)
"""

__version__ = "1.0.0"
