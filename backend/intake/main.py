"""
Adoption Intake Backend: FastAPI Application Factory
=======================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() registers middleware, exception handlers and routers.
Who:   uvicorn intake.main:app

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                       FastAPI App                        │
    │                                                          │
    │  Middleware:   Request ID → Logging → GZip → CORS        │
    │                                                          │
    │  Routes:       /api/users      /api/services             │
    │                /api/applications  /api/documents         │
    │                /health                                   │
    │                                                          │
    │  Exception Handlers:                                     │
    │    Validation/UnsupportedDocumentType → 400              │
    │    NotFound → 404    Conflict/InvalidTransition → 409    │
    │    MissingDocuments → 422    Database/other → 500        │
    └──────────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from intake import __version__
from intake.config import settings
from intake.database import dispose_engine
from intake.exceptions import (
    ConflictError,
    DatabaseError,
    IntakeError,
    InvalidTransitionError,
    MissingDocumentsError,
    NotFoundError,
    UnsupportedDocumentTypeError,
    ValidationError,
)
from intake.middleware.logging import RequestLoggingMiddleware
from intake.middleware.request_id import RequestIDMiddleware, request_id_var
from intake.routes import applications, documents, health, services, users

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """Configure the root logger once, at startup, writing to stdout."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:  logging, configuration check, storage directory.
    Shutdown: dispose the database engine.
    """
    setup_logging()
    logger.info("Adoption intake backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving so /health can report the problem.
        logger.error("Configuration error: %s", str(e))

    storage = Path(settings.storage_root)
    storage.mkdir(parents=True, exist_ok=True)
    logger.info("Storage root: %s", storage.resolve())
    logger.info(
        "Workflow: require_active_service=%s validate_adoption_data=%s",
        settings.require_active_service,
        settings.validate_adoption_data,
    )
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Adoption intake backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, exc: IntakeError, include_details: bool = True) -> dict:
    body = {
        "error": error,
        "message": exc.message,
        "request_id": request_id_var.get(""),
    }
    if include_details and exc.context:
        body["details"] = exc.context
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the intake exception hierarchy onto JSON error responses.

    Client errors carry their context as `details`; server errors return a
    generic message and keep the context in the log.
    """

    @app.exception_handler(UnsupportedDocumentTypeError)
    async def handle_unsupported_document(request: Request, exc: UnsupportedDocumentTypeError):
        logger.info("[%s] Rejected upload: %s", request_id_var.get(""), exc.message)
        return JSONResponse(status_code=400, content=_error_body("unsupported_document_type", exc))

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(status_code=400, content=_error_body("validation_error", exc))

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=_error_body("not_found", exc, include_details=False))

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return JSONResponse(status_code=409, content=_error_body("conflict", exc))

    @app.exception_handler(InvalidTransitionError)
    async def handle_invalid_transition(request: Request, exc: InvalidTransitionError):
        logger.info("[%s] Invalid transition: %s", request_id_var.get(""), exc.message)
        return JSONResponse(status_code=409, content=_error_body("invalid_transition", exc))

    @app.exception_handler(MissingDocumentsError)
    async def handle_missing_documents(request: Request, exc: MissingDocumentsError):
        return JSONResponse(status_code=422, content=_error_body("missing_documents", exc))

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again or contact support.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Adoption Intake API",
        description=(
            "Intake backend for adoption-recommendation applications: drafts, "
            "supporting documents, submission and staff review."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Last added runs first: RequestID → Logging → GZip → CORS.
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

    app.include_router(users.router)
    app.include_router(services.router)
    app.include_router(applications.router)
    app.include_router(documents.router)
    app.include_router(health.router)

    return app


app = create_app()
