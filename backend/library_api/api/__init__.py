"""API Layer — FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Book reads answer JSON; confirmations and 404s answer plain text
"""
