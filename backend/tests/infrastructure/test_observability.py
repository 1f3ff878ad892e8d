"""Observability — tests for the JSON log formatter and request logging."""

import json
import logging

from httpx import ASGITransport, AsyncClient

from library_api.infrastructure.document_store import (
    DocumentStore, MemoryStorage, get_store,
)
from library_api.infrastructure.observability import (
    JSONFormatter, TextFormatter, setup_logging,
)
from library_api.main import app


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("library_api.test", logging.INFO, __file__, 1, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_base_fields():
    log = json.loads(JSONFormatter().format(_record("hello")))
    assert log["level"] == "INFO"
    assert log["logger"] == "library_api.test"
    assert log["message"] == "hello"
    assert "timestamp" in log


def test_json_formatter_includes_known_extras():
    log = json.loads(JSONFormatter().format(
        _record("created", book_id="abc", status_code=200, unrelated="x"),
    ))
    assert log["book_id"] == "abc"
    assert log["status_code"] == 200
    assert "unrelated" not in log


async def test_request_logging_emits_access_line(caplog):
    store = DocumentStore(MemoryStorage({"books": []}))
    app.dependency_overrides[get_store] = lambda: store
    try:
        with caplog.at_level(logging.INFO, logger="library_api.access"):
            async with AsyncClient(
                transport=ASGITransport(app=app), base_url="http://test",
            ) as client:
                await client.get("/books")
    finally:
        app.dependency_overrides.clear()

    records = [r for r in caplog.records if r.name == "library_api.access"]
    assert len(records) == 1
    assert records[0].getMessage().startswith("GET /books 200 ")
    assert records[0].method == "GET"
    assert records[0].status_code == 200


def test_text_formatter_appends_book_context():
    line = TextFormatter().format(_record("Book created", book_id="abc", method="POST"))
    assert line.endswith("library_api.test: Book created book_id=abc")


def test_text_formatter_leaves_plain_records_alone():
    line = TextFormatter().format(_record("GET /books 200 1.000 ms - 2"))
    assert line.endswith("library_api.test: GET /books 200 1.000 ms - 2")


def test_setup_logging_installs_a_single_handler():
    root = logging.getLogger()
    original_level = root.level
    try:
        setup_logging("INFO", "text")
        handler = setup_logging("DEBUG", "json")
        installed = [h for h in root.handlers if h.get_name() == handler.get_name()]
        assert installed == [handler]
        assert isinstance(handler.formatter, JSONFormatter)
        assert root.level == logging.DEBUG
    finally:
        root.removeHandler(handler)
        root.setLevel(original_level)


async def test_error_handler_logs_book_context(caplog):
    class FailingStorage:
        def read(self):
            return {"books": []}

        def write(self, data):
            raise OSError("read-only file system")

    store = DocumentStore(MemoryStorage({"books": [{"id": "abc", "title": "Dune"}]}))
    store.storage = FailingStorage()
    app.dependency_overrides[get_store] = lambda: store
    try:
        with caplog.at_level(logging.INFO, logger="library_api.api.error_handlers"):
            async with AsyncClient(
                transport=ASGITransport(app=app), base_url="http://test",
            ) as client:
                res = await client.delete("/books/abc")
    finally:
        app.dependency_overrides.clear()

    assert res.status_code == 500
    records = [r for r in caplog.records if r.name == "library_api.api.error_handlers"]
    assert len(records) == 1
    assert records[0].levelno == logging.ERROR
    assert records[0].book_id == "abc"
    assert records[0].operation == "write"
    assert records[0].error_code == "DOCUMENT_STORE_ERROR"
