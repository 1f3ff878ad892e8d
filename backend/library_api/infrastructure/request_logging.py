"""Request Logging — one log line per HTTP request.

Invariants:
    - Every request is logged after the response is produced, including errors
    - Line format: "<METHOD> <path> <status> <elapsed> ms - <length>"
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("library_api.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status, latency and response size."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.error(
                f"{request.method} {request.url.path} 500 {elapsed_ms:.3f} ms - -",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": 500,
                    "duration_ms": round(elapsed_ms, 3),
                },
            )
            raise

        elapsed_ms = (time.perf_counter() - start) * 1000
        length = response.headers.get("content-length", "-")
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} "
            f"{elapsed_ms:.3f} ms - {length}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(elapsed_ms, 3),
                "content_length": length,
            },
        )
        return response
