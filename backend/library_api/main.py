"""Library API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Middleware order, outermost first: CORS → request logging → routing
    - Document store opened on startup and attached to app.state (never a global)
    - Store initialized with {"books": []} when the file does not exist
    - Interactive docs served at /api-docs from the route annotations

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Starlette applies the last added middleware first, so CORS is added last
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from library_api import __version__
from library_api.api.error_handlers import register_error_handlers
from library_api.api.routes import books, health
from library_api.config import get_settings
from library_api.infrastructure.document_store import DocumentStore
from library_api.infrastructure.observability import setup_logging
from library_api.infrastructure.request_logging import RequestLoggingMiddleware

logger = logging.getLogger(__name__)

STORE_DEFAULTS = {"books": []}

OPENAPI_TAGS = [
    {"name": "Books", "description": "books tag api grouping"},
    {"name": "health", "description": "liveness and readiness checks"},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    store = DocumentStore.open(settings.db_path)
    store.defaults(STORE_DEFAULTS)
    app.state.store = store
    logger.info(f"Server running on port {settings.port}")
    yield
    logger.info("Library API shutting down")


settings = get_settings()
app = FastAPI(
    title="Library API",
    version=__version__,
    description="A simple FastAPI Library API",
    servers=[{"url": settings.public_url}],
    openapi_tags=OPENAPI_TAGS,
    docs_url="/api-docs",
    redoc_url=None,
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(books.router)
app.include_router(health.router)

register_error_handlers(app)


@app.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def root():
    return "Entrada"


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "library_api.main:app", host=settings.host, port=settings.port,
    )
