"""API test fixtures — in-memory document store + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory store seeded with {"books": []}
    - get_store dependency overridden to return the test store

Design Decisions:
    - ASGITransport does not run the lifespan, so no db.json is created
"""

import pytest
from httpx import ASGITransport, AsyncClient

from library_api.infrastructure.document_store import (
    DocumentStore, MemoryStorage, get_store,
)
from library_api.main import app, STORE_DEFAULTS


@pytest.fixture
def store():
    store = DocumentStore(MemoryStorage())
    store.defaults(STORE_DEFAULTS)
    return store


@pytest.fixture
async def client(store):
    """FastAPI test client with the store dependency overridden."""
    app.dependency_overrides[get_store] = lambda: store

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
