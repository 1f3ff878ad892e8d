"""Error Handlers — map Library API failures to HTTP responses.

Invariants:
    - LibraryError → its own http_status with the to_response() envelope;
      store failures therefore carry the raw cause to the client
    - 4xx errors logged at WARNING, 5xx at ERROR, with operation/book_id extras
    - Anything else → sanitised 500 INTERNAL_ERROR, logged with traceback

Design Decisions:
    - Request bodies are parsed by the routes (InvalidBodyError), and path
      parameters are plain strings, so no RequestValidationError handler
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from library_api.core.errors import ErrorCategory, ErrorSeverity, LibraryError

logger = logging.getLogger(__name__)


async def handle_library_error(request: Request, exc: LibraryError):
    level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
    logger.log(
        level,
        f"{request.method} {request.url.path} failed: {exc.message}",
        extra={
            "error_code": exc.code,
            "operation": exc.context.operation,
            "book_id": exc.context.book_id,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.error(
        f"{request.method} {request.url.path} raised {type(exc).__name__}: {exc}",
        exc_info=True,
        extra={"error_code": "INTERNAL_ERROR"},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": ErrorCategory.INTERNAL.value,
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LibraryError, handle_library_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
