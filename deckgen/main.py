"""
FastAPI application entry point.

This module initializes the FastAPI application with:
- Lifespan management (startup/shutdown)
- Middleware configuration (CORS, rate limiting)
- Exception handlers mapping the error hierarchy to HTTP responses
- Route registration

Usage:
    Run with uvicorn:
        uvicorn deckgen.main:app --host 127.0.0.1 --port 8080

    Or with the server.py entry point:
        python server.py
"""
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from deckgen import __version__
from deckgen.config import get_logger, settings
from deckgen.dependencies import get_client_ip
from deckgen.exceptions import DeckgenException
from deckgen.routes import adapted, candidates, health, job_ads
from deckgen.state import AppState

logger = get_logger("main")


# =============================================================================
# FastAPI Application
# =============================================================================

def create_app(state: AppState | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        state: Prebuilt application state; built from settings at startup if None

    Returns:
        Configured FastAPI application instance
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Build the stores and provider registry, and report shutdown."""
        logger.info("=" * 60)
        logger.info("deckgen server starting...")
        logger.info("=" * 60)

        try:
            app.state.app_state = state if state is not None else AppState.create(settings)
        except Exception as exc:
            logger.critical("Startup failed: %s", exc, exc_info=True)
            raise

        logger.info("Server ready to accept requests")
        yield

        # In-memory stores are discarded with the process
        logger.info("Shutdown complete")

    application = FastAPI(
        title="deckgen API",
        description=(
            "Extracts job ads and candidate resumes from documents with "
            "pluggable LLM providers and adapts resumes to job ads."
        ),
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    configure_rate_limiting(application)
    configure_cors(application)
    configure_exception_handlers(application)
    configure_routes(application)

    return application


# =============================================================================
# Rate Limiting
# =============================================================================

def configure_rate_limiting(application: FastAPI) -> None:
    """Configure rate limiting middleware."""
    limiter = Limiter(key_func=get_client_ip, default_limits=[settings.RATE_LIMIT])
    application.state.limiter = limiter
    application.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    application.add_middleware(SlowAPIMiddleware)
    logger.debug("Rate limiting configured: %s", settings.RATE_LIMIT)


# =============================================================================
# CORS Configuration
# =============================================================================

def configure_cors(application: FastAPI) -> None:
    """Configure CORS middleware."""
    cors_origins = settings.CORS_ORIGINS_LIST
    allow_credentials = cors_origins != ["*"]

    if not allow_credentials:
        logger.warning(
            "CORS: Wildcard origin '*' configured. "
            "This disables credentials and is NOT recommended for production."
        )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=allow_credentials,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )


# =============================================================================
# Exception Handlers
# =============================================================================

def configure_exception_handlers(application: FastAPI) -> None:
    """Configure exception handlers."""

    @application.exception_handler(DeckgenException)
    async def deckgen_exception_handler(
        request: Request,
        exc: DeckgenException,
    ) -> JSONResponse:
        """Handle custom deckgen exceptions."""
        logger.warning(
            "DeckgenException | path=%s | type=%s | message=%s",
            request.url.path,
            exc.__class__.__name__,
            exc.message,
        )

        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @application.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unhandled exceptions."""
        logger.error(
            "Unhandled exception | path=%s | type=%s | error=%s",
            request.url.path,
            type(exc).__name__,
            exc,
            exc_info=True,
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "Internal server error",
                "error_type": "InternalError",
            },
        )


# =============================================================================
# Route Configuration
# =============================================================================

def configure_routes(application: FastAPI) -> None:
    """Configure application routes."""
    application.include_router(health.router)
    application.include_router(job_ads.router)
    application.include_router(candidates.router)
    application.include_router(adapted.router)


# =============================================================================
# Application Instance
# =============================================================================

app = create_app()
