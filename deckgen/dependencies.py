"""
FastAPI dependencies for dependency injection.

This module centralizes all FastAPI dependencies for:
- Application state and service injection
- Per-request deadlines
- Upload validation

Usage:
    from deckgen.dependencies import ServiceDep, DeadlineDep

    @router.post("/endpoint")
    async def endpoint(service: ServiceDep, deadline: DeadlineDep):
        ...
"""
from __future__ import annotations

from pathlib import Path
from typing import Annotated

from fastapi import Depends, Request, UploadFile

from deckgen.config import get_logger, settings
from deckgen.exceptions import UnsupportedDocumentError, ValidationError
from deckgen.services.synthesizer import SynthesizerService
from deckgen.state import AppState
from deckgen.utils import Deadline

logger = get_logger("dependencies")


# =============================================================================
# Application State
# =============================================================================

def get_app_state(request: Request) -> AppState:
    """
    FastAPI dependency to get application state.

    Raises:
        RuntimeError: If application state is not initialized
    """
    if not hasattr(request.app.state, "app_state"):
        logger.error("Application state not initialized")
        raise RuntimeError("Application state not initialized")
    return request.app.state.app_state


def get_service(request: Request) -> SynthesizerService:
    """FastAPI dependency to get the synthesizer service."""
    return get_app_state(request).service


def get_deadline() -> Deadline:
    """Create the deadline for the current request."""
    return Deadline.after(settings.REQUEST_TIMEOUT_SECONDS)


# =============================================================================
# Client Information
# =============================================================================

def get_client_ip(request: Request) -> str:
    """
    Get the real client IP address.

    Checks X-Forwarded-For and X-Real-IP headers before falling
    back to the direct client IP.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    if request.client:
        return request.client.host

    return "unknown"


# =============================================================================
# Upload Validation
# =============================================================================

async def read_upload(file: UploadFile) -> bytes:
    """
    Read an uploaded document after checking its extension and size.

    Raises:
        UnsupportedDocumentError: If the extension is not allowed
        ValidationError: If the file is empty or too large
    """
    ext = Path(file.filename or "").suffix.lower()
    if ext not in settings.ALLOWED_EXTENSIONS_SET:
        raise UnsupportedDocumentError(f"File type {ext or '(none)'} not supported")

    chunks: list[bytes] = []
    total_size = 0
    chunk_size = 1024 * 1024
    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        total_size += len(chunk)
        if total_size > settings.MAX_UPLOAD_SIZE:
            raise ValidationError(
                f"File exceeds maximum size of {settings.MAX_UPLOAD_SIZE} bytes",
                status_code=413,
            )
        chunks.append(chunk)

    if total_size == 0:
        raise ValidationError(f"File '{file.filename}' is empty")
    return b"".join(chunks)


# =============================================================================
# Type Aliases for Common Dependencies
# =============================================================================

ServiceDep = Annotated[SynthesizerService, Depends(get_service)]
DeadlineDep = Annotated[Deadline, Depends(get_deadline)]
