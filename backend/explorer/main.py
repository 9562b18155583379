"""
NASA Explorer Backend — FastAPI Application Factory
====================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn explorer.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │  Rate Limit  │→│ Req ID   │→│  Logging        │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌────────────┐ ┌───────────────┐  │
    │  │ GET /api/apod│ │GET /api/img│ │ GET /health   │  │
    │  └──────────────┘ └────────────┘ └───────────────┘  │
    │                                                     │
    │  Exception Handlers → {ok: false, error, code}      │
    │  ┌───────────────────────────────────────────────┐  │
    │  │ Validation→400 │ Config→500 │ Upstream→502    │  │
    │  └───────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from explorer import __version__
from explorer.config import settings
from explorer.exceptions import (
    ConfigurationError,
    ExplorerError,
    TransportError,
    UpstreamError,
    ValidationError,
)
from explorer.middleware.logging import RequestLoggingMiddleware
from explorer.middleware.rate_limit import RateLimitMiddleware
from explorer.middleware.request_id import RequestIDMiddleware, request_id_var
from explorer.routes import apod, health, images

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s

    httpx/httpcore stay at WARNING: at INFO they log full request URLs,
    and APOD URLs carry the api_key query parameter.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: configure logging and report configuration problems.
    Shutdown: log only; the service holds no connections between requests.
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("NASA Explorer Backend %s starting up...", __version__)

    # A missing key is reported, not fatal: image search still works and
    # /api/apod answers 500 with a clear message.
    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    logger.info("APOD upstream: %s", settings.nasa_api_base)
    logger.info("Image library upstream: %s", settings.nasa_images_api_base)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("NASA Explorer Backend shutting down...")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(exc: ExplorerError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "ok": False,
            "error": exc.message,
            "code": exc.code,
            "request_id": request_id_var.get(""),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the exception hierarchy onto the `{ok: false, error}` envelope.

    Handler hierarchy:
        ValidationError      → 400 Bad Request
        ConfigurationError   → 500 Internal Server Error
        UpstreamError        → 502 Bad Gateway
        TransportError       → 502 Bad Gateway
        ExplorerError (base) → its own status_code
        Exception (fallback) → 500, generic message

    Context dicts are logged server-side only.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(exc)

    @app.exception_handler(ConfigurationError)
    async def handle_configuration_error(request: Request, exc: ConfigurationError):
        logger.error("[%s] Configuration error: %s", request_id_var.get(""), exc.message)
        return _error_response(exc)

    @app.exception_handler(UpstreamError)
    async def handle_upstream_error(request: Request, exc: UpstreamError):
        logger.error(
            "[%s] Upstream error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(exc)

    @app.exception_handler(TransportError)
    async def handle_transport_error(request: Request, exc: TransportError):
        logger.error(
            "[%s] Transport error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(exc)

    @app.exception_handler(ExplorerError)
    async def handle_explorer_error(request: Request, exc: ExplorerError):
        logger.error("[%s] %s: %s", request_id_var.get(""), type(exc).__name__, exc.message)
        return _error_response(exc)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "ok": False,
                "error": "An unexpected error occurred. Please try again later.",
                "code": "internal_server_error",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Middleware executes in REVERSE order of addition:
    added CORS → GZip → Logging → RequestID → RateLimit,
    executed RateLimit → RequestID → Logging → GZip → CORS.
    """
    app = FastAPI(
        title="NASA Explorer API",
        description=(
            "Proxy for NASA's Astronomy Picture of the Day and the NASA Image and "
            "Video Library. Keeps the NASA API key on the server and normalizes errors."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    app.include_router(apod.router)
    app.include_router(images.router)
    app.include_router(health.router)

    return app


# uvicorn expects `explorer.main:app`
app = create_app()
