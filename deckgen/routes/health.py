"""
Health check endpoints.

This module provides health monitoring endpoints for:
- Liveness probes (ping)
- Readiness probes (ready)
- Health summary with provider and store status

Usage:
    GET /           - Health summary
    GET /health     - Health summary (alias)
    GET /ping       - Simple liveness probe
    GET /ready      - Readiness probe
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from deckgen import __version__
from deckgen.config import get_logger
from deckgen.dependencies import get_app_state
from deckgen.models import HealthResponse, PingResponse, ReadinessResponse
from deckgen.state import AppState

logger = get_logger("routes.health")

router = APIRouter(tags=["Health"])


@router.get(
    "/",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns provider availability and live entity counts.",
)
@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check (alias)",
    description="Alias for root health check endpoint.",
)
async def health_check(state: AppState = Depends(get_app_state)) -> HealthResponse:
    """
    Returns the health summary.

    The health check reports status as:
    - **healthy**: At least one provider is available
    - **degraded**: No provider is available; only CRUD endpoints work
    """
    providers: dict[str, Any] = {}
    for name in state.registry.names():
        provider = state.registry.get(name)
        providers[name] = {
            "model": provider.get_model_name(),
            "available": provider.is_available(),
            "status": "healthy" if provider.is_available() else "unavailable",
        }
    for name in state.registry.disabled_names():
        providers[name] = {"available": False, "status": "disabled"}

    any_available = any(p["available"] for p in providers.values())

    return HealthResponse(
        status="healthy" if any_available else "degraded",
        providers=providers,
        stores={
            "job_ads": len(state.job_ads),
            "candidates": len(state.candidates),
            "adapted_resumes": len(state.adapted_resumes),
        },
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=__version__,
    )


@router.get(
    "/ping",
    response_model=PingResponse,
    summary="Liveness probe",
    description="Simple ping endpoint for keepalive checks. Does not verify service health.",
)
async def ping() -> PingResponse:
    """Always returns 200 as long as the server is running."""
    return PingResponse(status="ok")


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    responses={503: {"description": "Service is not ready"}},
)
async def readiness_check(
    state: AppState = Depends(get_app_state),
) -> ReadinessResponse | JSONResponse:
    """
    Kubernetes-style readiness probe.

    Returns 200 when at least one provider is enabled, 503 otherwise.
    """
    checks = {name: state.registry.get(name).is_available() for name in state.registry.names()}
    is_ready = state.is_ready() and any(checks.values())

    response = ReadinessResponse(ready=is_ready, checks=checks)

    if not is_ready:
        logger.warning("Readiness check failed: providers=%s", checks or "none")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=response.model_dump(),
        )

    return response
