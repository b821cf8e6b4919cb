"""
Pydantic models for entities, request/response validation and OpenAPI documentation.

This module defines:
- Entity models kept by the in-memory stores (JobAd, Candidate, AdaptedResume)
- Request models for the workflow endpoints
- Response models for errors and health probes

Usage:
    from deckgen.models import JobAd, Candidate, AdaptedResume
"""
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Entity Models
# =============================================================================

class Entity(BaseModel):
    """
    Base class for every stored entity.

    ``id`` is 0 until a store assigns one on create.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: int = Field(default=0, ge=0, description="Store-assigned identifier")


class JobAd(Entity):
    """A job advertisement extracted from a document."""

    title: str = ""
    company_name: str = ""
    location: str = ""
    key_responsibilities: list[str] = Field(default_factory=list)
    required_qualifications: list[str] = Field(default_factory=list)
    preferred_qualifications: list[str] = Field(default_factory=list)
    raw_text: str = ""


class Experience(BaseModel):
    """One work-experience record of a candidate."""

    company_name: str = ""
    dates: str = ""
    job_title: str = ""
    description: str = ""
    tools: str = ""


class Candidate(Entity):
    """A candidate resume extracted from a document."""

    full_name: str = ""
    description: str = ""
    short_description: str = ""
    experiences: list[Experience] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    location: str = ""
    availability: str = ""
    invoicing: str = ""
    average_daily_rate: str = ""
    billing_mode: str = ""


class AdaptedResume(Entity):
    """
    A resume tailored to one job ad.

    Holds value copies of the job ad and candidate it was built from;
    later edits to those entities are not reflected here.
    """

    job_ad: JobAd = Field(default_factory=JobAd)
    candidate: Candidate = Field(default_factory=Candidate)


# =============================================================================
# Request Models
# =============================================================================

class AdaptRequest(BaseModel):
    """
    Request payload for the adaptation workflow.

    Example:
        >>> AdaptRequest(job_ad_id=1, candidate_ids=[1, 2], provider="groq")
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "examples": [
                {"job_ad_id": 1, "candidate_ids": [1], "provider": "groq"},
            ]
        },
    )

    job_ad_id: int = Field(..., ge=1, description="Job ad to adapt the resume for")
    candidate_ids: list[int] = Field(
        default_factory=list,
        description="Candidate resumes to combine, in order",
    )
    provider: str = Field(..., min_length=1, description="Provider name")


class TextExtractionRequest(BaseModel):
    """Request payload for extracting an entity from raw text."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(default="text", min_length=1, description="Descriptive source name")
    text: str = Field(..., min_length=1, description="Raw document text")
    provider: str = Field(..., min_length=1, description="Provider name")

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        """Validate text is not just whitespace."""
        if not v.strip():
            raise ValueError("Text cannot be empty or whitespace only")
        return v


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """
    Standard error response format.

    All API errors return this format for consistency.
    """

    model_config = ConfigDict(frozen=True)

    detail: str = Field(..., description="Error message")
    error_type: str = Field(
        ...,
        description="Error classification",
        examples=["NotFoundError", "ValidationError", "UpstreamError"],
    )
    error_code: str | None = Field(default=None, description="Machine-readable error code")
    details: str | None = Field(default=None, description="Additional error details")
    context: dict[str, Any] | None = Field(
        default=None,
        description="Workflow and step where the error surfaced",
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(),
        description="When the error occurred",
    )


class HealthResponse(BaseModel):
    """Health check response with provider and store statuses."""

    status: str = Field(..., examples=["healthy", "degraded"])
    providers: dict[str, Any] = Field(..., description="Registered provider statuses")
    stores: dict[str, int] = Field(..., description="Live entity count per store")
    timestamp: str = Field(..., description="ISO 8601 timestamp")
    version: str = Field(default="1.0.0", description="API version")


class ReadinessResponse(BaseModel):
    """Readiness probe response for container orchestration."""

    model_config = ConfigDict(frozen=True)

    ready: bool = Field(..., description="Whether the service is ready to accept requests")
    checks: dict[str, bool] = Field(default_factory=dict)


class PingResponse(BaseModel):
    """Simple ping response."""

    model_config = ConfigDict(frozen=True)

    status: str = Field(default="ok")
