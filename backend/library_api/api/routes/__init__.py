"""Route Modules — one file per resource/concern.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Routes reach the store only through the get_store dependency

Design Decisions:
    - Explicit registration in main.py over auto-discovery
"""
