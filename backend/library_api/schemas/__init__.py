"""Pydantic Schemas — payload descriptions for the OpenAPI document.

Design Decisions:
    - Schemas document the API contract; the store itself is schemaless
"""
