"""Books — CRUD endpoints over the `books` collection of the document store.

Invariants:
    - Store handle injected via Depends(get_store), never imported as a global
    - Bodies must be strict JSON objects (no NaN/Infinity); anything else is 400
    - Generated id always wins over a client-supplied id on create
    - PUT never changes a book's id (an `id` key in the payload is ignored)
    - Unknown ids answer 404 with a short plain-text message
    - Any failure while mutating the store becomes DocumentStoreError (500)
    - /books and /books/ answer directly, without a redirect

Design Decisions:
    - Sync handlers: store calls block, FastAPI runs them in its threadpool
    - Bodies parsed by read_json_object, not a Body() parameter: missing
      title/author are stored as absent, and the documented schema comes from
      BookInput via openapi_extra
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Path, Request, status
from fastapi.responses import PlainTextResponse

from library_api.config import get_settings
from library_api.core.errors import DocumentStoreError, ErrorContext, InvalidBodyError
from library_api.core.identifiers import generate_id
from library_api.infrastructure.document_store import (
    DocumentStore, get_store, where,
)
from library_api.schemas.book import Book, BookInput, request_body

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/books", tags=["Books"])

COLLECTION = "books"

_SERVER_ERROR = {status.HTTP_500_INTERNAL_SERVER_ERROR: {"description": "Some server error"}}
_BAD_BODY = {status.HTTP_400_BAD_REQUEST: {"description": "Body is not a JSON object"}}


def _reject_constant(name: str):
    raise InvalidBodyError(f"{name} is not valid JSON")


async def read_json_object(request: Request) -> dict[str, Any]:
    """Parse the request body as a JSON object; an empty body reads as {}."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw, parse_constant=_reject_constant)
    except ValueError as e:
        raise InvalidBodyError(str(e)) from e
    if not isinstance(body, dict):
        raise InvalidBodyError(f"got {type(body).__name__}")
    return body


def _store_failure(operation: str, book_id: str | None, exc: Exception) -> DocumentStoreError:
    if isinstance(exc, DocumentStoreError):
        exc.context.book_id = book_id
        return exc
    logger.error(
        f"Book {operation} failed: {exc}",
        exc_info=True,
        extra={"operation": operation, "book_id": book_id},
    )
    return DocumentStoreError(operation, exc, ErrorContext(book_id=book_id))


@router.get("/", include_in_schema=False)
@router.get(
    "",
    summary="Returns list of all books",
    responses={200: {"description": "the list of all books", "model": list[Book]}},
)
def list_books(store: DocumentStore = Depends(get_store)):
    return store.collection(COLLECTION)


@router.get(
    "/{book_id}",
    summary="Returns book by id",
    responses={
        200: {"description": "the book description by id", "model": Book},
        404: {"description": "The book was not found"},
    },
)
def get_book(
    book_id: str = Path(..., description="The book id"),
    store: DocumentStore = Depends(get_store),
):
    book = store.find(COLLECTION, where(id=book_id))
    if book is None:
        return PlainTextResponse("Invalid id", status_code=status.HTTP_404_NOT_FOUND)
    return book


@router.post("/", include_in_schema=False)
@router.post(
    "",
    summary="Create a new book",
    openapi_extra=request_body(BookInput, "Book fields; `title` and `author` are expected"),
    responses={
        200: {"description": "The book was successfully added", "model": Book},
        **_BAD_BODY,
        **_SERVER_ERROR,
    },
)
def create_book(
    body: dict[str, Any] = Depends(read_json_object),
    store: DocumentStore = Depends(get_store),
):
    book_id = None
    try:
        book_id = generate_id(get_settings().id_length)
        book = {"id": book_id}
        book.update({k: v for k, v in body.items() if k != "id"})
        store.push(COLLECTION, book)
        store.write()
    except Exception as e:
        raise _store_failure("create", book_id, e) from e
    logger.info(f"Book created: {book_id}", extra={"book_id": book_id})
    return book


@router.put(
    "/{book_id}",
    summary="Edit a book",
    response_class=PlainTextResponse,
    openapi_extra=request_body(BookInput, "Fields to merge into the stored book"),
    responses={
        200: {"description": "The book was successfully edited"},
        404: {"description": "book not found"},
        **_BAD_BODY,
        **_SERVER_ERROR,
    },
)
def update_book(
    book_id: str = Path(..., description="The book id"),
    body: dict[str, Any] = Depends(read_json_object),
    store: DocumentStore = Depends(get_store),
):
    if store.find(COLLECTION, where(id=book_id)) is None:
        return PlainTextResponse("id not found", status_code=status.HTTP_404_NOT_FOUND)
    try:
        fields = {k: v for k, v in body.items() if k != "id"}
        store.assign(COLLECTION, where(id=book_id), fields)
        store.write()
    except Exception as e:
        raise _store_failure("update", book_id, e) from e
    logger.info(f"Book updated: {book_id}", extra={"book_id": book_id})
    return PlainTextResponse("Book updated")


@router.delete(
    "/{book_id}",
    summary="Delete a book",
    response_class=PlainTextResponse,
    responses={
        200: {"description": "The book was successfully deleted"},
        404: {"description": "id not found"},
        **_SERVER_ERROR,
    },
)
def delete_book(
    book_id: str = Path(..., description="The book id"),
    store: DocumentStore = Depends(get_store),
):
    if store.find(COLLECTION, where(id=book_id)) is None:
        return PlainTextResponse("id not found", status_code=status.HTTP_404_NOT_FOUND)
    try:
        store.remove(COLLECTION, where(id=book_id))
        store.write()
    except Exception as e:
        raise _store_failure("delete", book_id, e) from e
    logger.info(f"Book removed: {book_id}", extra={"book_id": book_id})
    return PlainTextResponse("Removed")
