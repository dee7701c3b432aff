"""
CanvasBoard — FastAPI Application Factory
===========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (uvicorn canvasboard.main:app) and the test suite.

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Middleware:  Request ID → Logging → GZip → CORS      │
    │                                                      │
    │  Routes:                                             │
    │    /api/boards   /api/sections   /api/cards          │
    │    /api/connections   /api/notes   /health           │
    │                                                      │
    │  Exception Handlers:                                 │
    │    Validation→400  NotFound→404  Conflict→409        │
    │    Database→500    anything else→500                 │
    └──────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from canvasboard import __version__
from canvasboard.config import settings
from canvasboard.database import dispose_engine
from canvasboard.exceptions import (
    CanvasBoardError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from canvasboard.middleware.logging import RequestLoggingMiddleware
from canvasboard.middleware.request_id import RequestIDMiddleware, request_id_var
from canvasboard.routes import boards, cards, connections, health, notes, sections

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout.
    Called once during app startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries log every operation at INFO/DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("=" * 60)
    logger.info("CanvasBoard API %s starting up...", __version__)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("CanvasBoard API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(status_code: int, error: str, message: str, details=None) -> JSONResponse:
    content = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP responses.

    Handler hierarchy:
        ValidationError         → 400 Bad Request
        NotFoundError           → 404 Not Found
        ConflictError           → 409 Conflict
        DatabaseError           → 500 (generic message)
        CanvasBoardError (base) → 500
        Exception (fallback)    → 500 (stack trace logged, never returned)
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error(400, "validation_error", exc.message, exc.context)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error(404, "not_found", exc.message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        logger.warning("[%s] Conflict: %s", request_id_var.get(""), exc.message)
        return _error(409, "conflict", exc.message, exc.context)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error(500, "server_error", "An internal error occurred. Please try again later.")

    @app.exception_handler(CanvasBoardError)
    async def handle_app_error(request: Request, exc: CanvasBoardError):
        logger.error("[%s] %s: %s", request_id_var.get(""), type(exc).__name__, exc.message)
        return _error(500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True
        )
        return _error(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="CanvasBoard API",
        description=(
            "Boards of cards, sections and connections on a pannable, zoomable canvas."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in reverse order of addition: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(boards.router)
    app.include_router(sections.router)
    app.include_router(cards.router)
    app.include_router(connections.router)
    app.include_router(notes.router)
    app.include_router(health.router)

    return app


app = create_app()
