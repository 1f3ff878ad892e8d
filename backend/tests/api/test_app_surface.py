"""App Surface — root greeting, interactive docs, OpenAPI document, health checks, CORS."""

import pytest

from library_api.infrastructure.document_store import DocumentStore


async def test_root_returns_plain_text_greeting(client):
    res = await client.get("/")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/plain")
    assert res.text == "Entrada"


async def test_api_docs_serves_swagger_ui(client):
    res = await client.get("/api-docs")
    assert res.status_code == 200
    assert "swagger-ui" in res.text.lower()


async def test_openapi_documents_books_endpoints(client):
    spec = (await client.get("/openapi.json")).json()
    assert spec["info"]["title"] == "Library API"
    assert spec["info"]["version"] == "1.0.0"
    assert set(spec["paths"]["/books"]) == {"get", "post"}
    assert set(spec["paths"]["/books/{book_id}"]) == {"get", "put", "delete"}
    assert "Book" in spec["components"]["schemas"]
    assert {"name": "Books", "description": "books tag api grouping"} in spec["tags"]


@pytest.mark.parametrize(
    ("path", "method"), [("/books", "post"), ("/books/{book_id}", "put")],
)
async def test_openapi_documents_book_input_body(client, path, method):
    spec = (await client.get("/openapi.json")).json()
    schema = spec["paths"][path][method]["requestBody"]["content"]["application/json"]["schema"]
    assert schema["title"] == "BookInput"
    assert set(schema["required"]) == {"title", "author"}
    assert schema["additionalProperties"] is True


async def test_openapi_hides_trailing_slash_aliases(client):
    spec = (await client.get("/openapi.json")).json()
    assert "/books/" not in spec["paths"]


async def test_health_liveness(client):
    res = await client.get("/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_health_ready_when_store_readable(client):
    res = await client.get("/health/ready")
    assert res.status_code == 200
    assert res.json() == {"status": "ready", "checks": {"store": "healthy"}}


async def test_health_not_ready_when_store_unreadable(client, store: DocumentStore):
    class BrokenStorage:
        def read(self):
            raise OSError("permission denied")

        def write(self, data):
            raise OSError("permission denied")

    store.storage = BrokenStorage()
    res = await client.get("/health/ready")
    assert res.status_code == 503
    assert res.json()["reason"] == "store_unavailable"


async def test_cors_headers_present(client):
    res = await client.get("/books", headers={"Origin": "http://example.com"})
    assert res.headers["access-control-allow-origin"] == "*"
