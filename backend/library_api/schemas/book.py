"""Book Schemas — Pydantic models describing Book payloads in the OpenAPI document.

Invariants:
    - Extra fields allowed: clients may store arbitrary attributes on a book
    - Used for documentation only; handlers accept and store raw JSON objects

Design Decisions:
    - Documentation-only models: the store performs no schema enforcement, so
      neither do the routes
"""

from pydantic import BaseModel, ConfigDict, Field

BOOK_EXAMPLE = {
    "id": "zxcvbnmk",
    "title": "a happy book",
    "author": "a happy author",
}


class BookInput(BaseModel):
    """Book fields sent on create and update."""
    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "example": {"title": "a happy book", "author": "a happy author"},
        },
    )

    title: str = Field(description="the book title")
    author: str = Field(description="the book author")


class Book(BookInput):
    """Stored book record."""
    model_config = ConfigDict(
        extra="allow", json_schema_extra={"example": BOOK_EXAMPLE},
    )

    id: str = Field(description="the auto-generated book id")


def request_body(model: type[BaseModel], description: str) -> dict:
    """openapi_extra documenting a JSON request body with ``model``'s schema."""
    return {
        "requestBody": {
            "description": description,
            "content": {
                "application/json": {"schema": model.model_json_schema()},
            },
        },
    }
