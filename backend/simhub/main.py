"""
SimHub Backend — FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes logging setup, middleware, exception mapping, route
       mounting and lifecycle in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn imports `simhub.main:app`; tests call create_app() directly.

Application Architecture:
    ┌──────────────────────────────────────────────────────────────┐
    │                        FastAPI App                           │
    │                                                              │
    │  Middleware:  Request ID → Logging → GZip → CORS             │
    │                                                              │
    │  Routes:      /api/simulations  /api/preferences             │
    │               /api/projects     /api/recent-projects         │
    │               /health                                        │
    │                                                              │
    │  Exception Handlers:                                         │
    │    InputValidationError → 400   NotFoundError → 404          │
    │    RecordNotFoundError → 404    DomainError → 422            │
    │    ResponseValidationError, SQLAlchemyError, Exception → 500 │
    └──────────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, optional create_all (DB_CREATE_ALL=true)
    Shutdown: dispose the engine's connection pool
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from simhub import __version__
from simhub.config import settings
from simhub.database import dispose_engine, init_models
from simhub.exceptions import (
    DomainError,
    InputValidationError,
    NotFoundError,
    RecordNotFoundError,
    ResponseValidationError,
    SimHubError,
)
from simhub.middleware.logging import RequestLoggingMiddleware
from simhub.middleware.request_id import RequestIDMiddleware, request_id_var
from simhub.routes import health, preferences, projects, recent_projects, simulations

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "An internal error occurred. Please try again later."


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once, before anything else logs.

    Format: 2024-01-15T12:00:00 [INFO] simhub.access: GET /api/simulations 200 ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("=" * 60)
    logger.info("SimHub Backend %s starting up (storage=%s)", __version__, settings.storage_backend)

    if settings.storage_backend == "database" and settings.db_create_all:
        await init_models()
        logger.info("Database tables ensured (DB_CREATE_ALL=true)")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("SimHub Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details: Optional[Any] = None) -> dict:
    body = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details is not None:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the exception taxonomy in simhub.exceptions to HTTP responses.

    Only InputValidationError itemizes anything back to the client. Every 5xx
    answers with a generic message; the detail goes to the server log.
    """

    @app.exception_handler(InputValidationError)
    async def handle_input_validation(request: Request, exc: InputValidationError):
        # Client error, not a fault: DEBUG only
        logger.debug("[%s] Input validation failed: %d error(s)", request_id_var.get(""), len(exc.errors))
        return JSONResponse(
            status_code=400,
            content=_error_body(
                "validation_error",
                exc.message,
                [error.model_dump() for error in exc.errors],
            ),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=_error_body("not_found", exc.message))

    @app.exception_handler(RecordNotFoundError)
    async def handle_record_not_found(request: Request, exc: RecordNotFoundError):
        return JSONResponse(status_code=404, content=_error_body("not_found", exc.message))

    @app.exception_handler(DomainError)
    async def handle_domain_error(request: Request, exc: DomainError):
        logger.info("[%s] Business rule violated: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=422,
            content=_error_body("domain_error", exc.message, exc.context or None),
        )

    @app.exception_handler(ResponseValidationError)
    async def handle_response_validation(request: Request, exc: ResponseValidationError):
        # Offending data was already logged by validate_response()
        return JSONResponse(status_code=500, content=_error_body("server_error", GENERIC_SERVER_ERROR))

    @app.exception_handler(SQLAlchemyError)
    async def handle_database_error(request: Request, exc: SQLAlchemyError):
        logger.error("[%s] Database error: %s", request_id_var.get(""), exc, exc_info=exc)
        return JSONResponse(status_code=500, content=_error_body("server_error", GENERIC_SERVER_ERROR))

    @app.exception_handler(SimHubError)
    async def handle_simhub_error(request: Request, exc: SimHubError):
        logger.error("[%s] %s: %s | Context: %s", request_id_var.get(""), type(exc).__name__, exc.message, exc.context)
        return JSONResponse(status_code=500, content=_error_body("server_error", GENERIC_SERVER_ERROR))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), exc, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=_error_body("internal_server_error", "An unexpected error occurred."),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="SimHub API",
        description=(
            "Simulation history, project registry and user preferences for the "
            "SimHub desktop shell."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in reverse order of addition:
    # RequestID → Logging → GZip → CORS → route
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

    app.include_router(simulations.router)
    app.include_router(preferences.router)
    app.include_router(projects.router)
    app.include_router(recent_projects.router)
    app.include_router(health.router)

    return app


app = create_app()
