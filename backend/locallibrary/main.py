"""
LocalLibrary — FastAPI Application Factory
===========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (`uvicorn locallibrary.main:app`) and the test suite.
When:  Once at server startup.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → GZip           │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌────────────────┐ ┌───────────┐  │
    │  │ GET /        │ │ /catalog/...   │ │ /health   │  │
    │  └──────────────┘ └────────────────┘ └───────────┘  │
    │                                                     │
    │  Exception Handlers (error view):                   │
    │  NotFoundError→404 │ StorageError→500 │ HTTP→code   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Configure logging
    2. Open the Database handle (unless one was injected)
    3. Optionally create the schema (DB_CREATE_TABLES)

    Shutdown:
    1. Dispose the Database handle (close all connections)
"""

import logging
import sys
import traceback
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.gzip import GZipMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from locallibrary import __version__
from locallibrary.config import settings
from locallibrary.database import Database
from locallibrary.exceptions import LibraryError, NotFoundError, StorageError
from locallibrary.middleware.logging import RequestLoggingMiddleware
from locallibrary.middleware.request_id import RequestIDMiddleware, request_id_var
from locallibrary.routes import catalog, health
from locallibrary.templating import render

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Third-party libraries log every operation at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the database handle on startup and dispose it on shutdown."""
    setup_logging()
    logger.info("LocalLibrary %s starting up (env=%s)", __version__, settings.app_env)

    database: Optional[Database] = getattr(app.state, "database", None)
    if database is None:
        database = Database()
        app.state.database = database

    if settings.db_create_tables:
        await database.create_all()

    logger.info("Server ready at http://%s:%d/catalog", settings.backend_host, settings.backend_port)

    yield

    logger.info("LocalLibrary shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_page(request: Request, status_code: int, message: str, exc: Optional[Exception] = None):
    """
    Render the error view.

    Exception details (type, context, traceback) are included only when
    APP_ENV=development.
    """
    error = None
    if exc is not None and settings.is_development:
        error = {
            "type": type(exc).__name__,
            "context": getattr(exc, "context", {}),
            "stack": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        }
    return render(
        request,
        "error",
        {
            "title": message,
            "message": message,
            "status": status_code,
            "error": error,
            "request_id": request_id_var.get(""),
        },
        status_code=status_code,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the error view.

    Handler hierarchy:
        NotFoundError            → 404
        StorageError             → 500 (context logged)
        LibraryError (base)      → its status_code
        HTTPException            → its status code (unknown routes → 404)
        Exception (fallback)     → 500
    """

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = request_id_var.get("")
        logger.info("[%s] Not found: %s", rid, exc.message)
        return error_page(request, 404, exc.message, exc)

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        rid = request_id_var.get("")
        logger.error("[%s] Storage error: %s | Context: %s", rid, exc.message, exc.context)
        return error_page(request, 500, exc.message, exc)

    @app.exception_handler(LibraryError)
    async def handle_library_error(request: Request, exc: LibraryError):
        rid = request_id_var.get("")
        logger.error("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return error_page(request, exc.status_code, exc.message, exc)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        message = "Not Found" if exc.status_code == 404 else str(exc.detail)
        return error_page(request, exc.status_code, message, exc)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return error_page(request, 500, "Internal Server Error", exc)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        database: an already opened handle (tests); when omitted the
                  lifespan opens one from settings.
    """
    app = FastAPI(
        title="LocalLibrary",
        description="Library catalog: books, authors, genres and book copies.",
        version=__version__,
        lifespan=lifespan,
    )

    if database is not None:
        app.state.database = database

    # Middleware executes in reverse order of addition:
    # RequestID → Logging → GZip → routes
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(catalog.home_router)
    app.include_router(catalog.router)
    app.include_router(health.router)

    return app


app = create_app()
