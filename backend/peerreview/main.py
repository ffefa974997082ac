"""
PeerReview Backend — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes app configuration, middleware registration, route mounting,
       and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn peerreview.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐        │
    │  │  Req ID  │→│ Logging  │→│ GZip │→│ CORS │        │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘        │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────────┐ ┌───────────┐ ┌──────────┐ ┌──────┐ │
    │  │ /api/auth  │ │ /api/code │ │ feedback │ │health│ │
    │  └────────────┘ └───────────┘ └──────────┘ └──────┘ │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌───────────────────────────────────────────────┐  │
    │  │ 400 │ 401 │ 403 │ 404 │ 409 │ Repository→500  │  │
    │  └───────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Authentication is not middleware: protected routes depend on
`routes.deps.require_identity`, which runs before the handler body.

Lifecycle:
    Startup:   logging setup, configuration check, ready banner
    Shutdown:  dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from peerreview import __version__
from peerreview.config import settings
from peerreview.database import dispose_engine
from peerreview.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    PeerReviewError,
    RepositoryError,
    UnauthorizedError,
    UnknownIdentityError,
    ValidationError,
)
from peerreview.middleware.logging import RequestLoggingMiddleware
from peerreview.middleware.request_id import RequestIDMiddleware, request_id_var
from peerreview.routes import auth, feedback, health, snippets

logger = logging.getLogger(__name__)

# A missing or empty required field reuses the message the service raises for
# it, so clients see one wording per endpoint. Anything else (an over-long
# value, an unknown optional field) gets the generic message.
_REQUIRED_FIELD_MESSAGES = {
    "/api/auth/register": ("Email and password are required", {"email", "password"}),
    "/api/auth/login": ("Email and password are required", {"email", "password"}),
    "/api/code": ("Code is required", {"code"}),
    "/api/feedback": (
        "Code snippet ID and feedback text are required",
        {"code_snippet_id", "feedback_text"},
    ),
}

_GENERIC_VALIDATION_MESSAGE = "Invalid request"

# Error types that mean "field too long" rather than "field absent"
_LENGTH_ERRORS = {"string_too_long", "too_long"}

_BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Called once from the lifespan before anything else logs.
    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-statement and per-request noise
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("PeerReview Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        logger.error("Tokens signed with the development secret are forgeable.")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("PeerReview Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    content: Dict[str, Any] = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _error_field(err: Dict[str, Any]) -> str:
    return ".".join(str(part) for part in err.get("loc", ()) if part != "body")


def _body_validation_message(path: str, errors: List[Dict[str, Any]]) -> str:
    """
    Endpoint wording when a required field is missing, empty or unparseable;
    the generic message for every other body error.

    An empty field name means the body itself was absent or not an object.
    """
    message, required = _REQUIRED_FIELD_MESSAGES.get(path, (_GENERIC_VALIDATION_MESSAGE, set()))
    for err in errors:
        field = _error_field(err)
        if (field == "" or field in required) and err.get("type") not in _LENGTH_ERRORS:
            return message
    return _GENERIC_VALIDATION_MESSAGE


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the shared error envelope.

    Handler hierarchy:
        ValidationError / RequestValidationError → 400
        UnauthorizedError (and subclasses)       → 401 + WWW-Authenticate
        UnknownIdentityError                     → 401 + WWW-Authenticate
        ForbiddenError                           → 403
        NotFoundError                            → 404
        ConflictError                            → 409
        RepositoryError                          → 500 (generic message)
        PeerReviewError (base)                   → 500
        Exception (fallback)                     → 500

    Security: 401 bodies never say which of email or password was wrong,
    and 500 bodies never carry driver errors or stack traces.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "validation_error", exc.message, exc.context)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        fields = [_error_field(err) for err in errors]
        message = _body_validation_message(request.url.path, errors)
        logger.warning("[%s] Request validation failed on %s", request_id_var.get(""), fields)
        return _error_response(400, "validation_error", message, {"fields": fields})

    @app.exception_handler(UnauthorizedError)
    async def handle_unauthorized(request: Request, exc: UnauthorizedError):
        return _error_response(401, "unauthorized", exc.message, headers=_BEARER_CHALLENGE)

    @app.exception_handler(UnknownIdentityError)
    async def handle_unknown_identity(request: Request, exc: UnknownIdentityError):
        logger.warning("[%s] Token for missing identity: %s", request_id_var.get(""), exc.context)
        return _error_response(401, "unauthorized", exc.message, headers=_BEARER_CHALLENGE)

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(request: Request, exc: ForbiddenError):
        return _error_response(403, "forbidden", exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc.message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return _error_response(409, "conflict", exc.message, exc.context)

    @app.exception_handler(RepositoryError)
    async def handle_repository_error(request: Request, exc: RepositoryError):
        logger.error(
            "[%s] Repository error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return _error_response(500, "server_error", exc.message)

    @app.exception_handler(PeerReviewError)
    async def handle_application_error(request: Request, exc: PeerReviewError):
        logger.error("[%s] Unhandled application error: %s", request_id_var.get(""), exc.message)
        return _error_response(500, "server_error", "An internal error occurred. Please try again later.")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="PeerReview API",
        description=(
            "Peer code review: submit snippets, review code written by others, "
            "and read the feedback your own submissions received."
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
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "WWW-Authenticate"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(snippets.router)
    app.include_router(feedback.router)
    app.include_router(health.router)

    return app


app = create_app()
