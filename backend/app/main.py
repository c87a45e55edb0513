"""
Species Catalog Backend — FastAPI Application Factory
=====================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn app.main:app).
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐             │
    │  │  Req ID  │→│ Logging  │→│ GZip │→│ CORS │             │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘             │
    │                                                          │
    │  Routes:                                                 │
    │  /api/species  /api/species/{id}/comments                │
    │  /api/profiles/me  /health                               │
    │                                                          │
    │  Exception Handlers:                                     │
    │  Validation→400 │ Schema→422 │ Auth→401 │ Redirect→303   │
    │  Permission→403 │ NotFound→404 │ Database→500            │
    └──────────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from app import __version__
from app.config import settings
from app.database import dispose_engine
from app.exceptions import (
    AuthenticationError,
    DatabaseError,
    LoginRequiredError,
    NotFoundError,
    PermissionDeniedError,
    SpeciesCatalogError,
    ValidationError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import comments, health, profiles, species

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Third-party libraries that log every operation at INFO/DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: configure logging, validate critical settings.
    Shutdown: dispose the database engine.
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("Species Catalog backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: /health still answers and every protected route
        # reports the problem as a 401 through decode_session_token()
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Species Catalog backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    return request_id_var.get("") or getattr(request.state, "request_id", "")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP responses.

    Every JSON error body has the ErrorResponse shape. Handlers never expose
    stack traces or SQL; DatabaseError and unexpected errors are logged in
    full and answered with a generic message.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = _request_id(request)
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Schema failures (wrong type, unknown kingdom, bad image URL) in the ErrorResponse shape."""
        rid = _request_id(request)
        errors = exc.errors()
        # Drop the "body"/"path" prefix so the field reads like the form's
        fields = [".".join(str(part) for part in e.get("loc", ())[1:]) or "request" for e in errors]
        message = "Request validation failed"
        if errors:
            message = f"{fields[0]}: {errors[0].get('msg', 'invalid value')}"
        logger.warning("[%s] Request validation error: %s", rid, message)
        return JSONResponse(
            status_code=422,
            content={
                "error": "validation_error",
                "message": message,
                "details": {"fields": fields},
                "request_id": rid,
            },
        )

    # LoginRequiredError subclasses AuthenticationError; FastAPI picks the
    # most specific handler by walking the exception's MRO
    @app.exception_handler(LoginRequiredError)
    async def handle_login_required(request: Request, exc: LoginRequiredError):
        return RedirectResponse(url=exc.redirect_to, status_code=303)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        rid = _request_id(request)
        return JSONResponse(
            status_code=401,
            content={
                "error": "not_authenticated",
                "message": exc.message,
                "request_id": rid,
            },
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(PermissionDeniedError)
    async def handle_permission_denied(request: Request, exc: PermissionDeniedError):
        rid = _request_id(request)
        return JSONResponse(
            status_code=403,
            content={
                "error": "permission_denied",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = _request_id(request)
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = _request_id(request)
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(SpeciesCatalogError)
    async def handle_catalog_error(request: Request, exc: SpeciesCatalogError):
        rid = _request_id(request)
        logger.error("[%s] Unhandled application error: %s", rid, exc.message)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: full trace in the log, generic message to the client."""
        rid = _request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Assemble middleware, exception handlers and routers into a FastAPI app."""
    app = FastAPI(
        title="Species Catalog API",
        description=(
            "Catalog of species records with author-owned editing and "
            "per-species comments. Sessions are issued by an external auth "
            "service and verified here."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,  # session cookie
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(species.router)
    app.include_router(comments.router)
    app.include_router(profiles.router)
    app.include_router(health.router)

    return app


# uvicorn expects `app.main:app` to be importable
app = create_app()
