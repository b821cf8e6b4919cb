"""
Adapted resume endpoints.

Usage:
    POST   /adapted-resumes   {"job_ad_id": 1, "candidate_ids": [1, 2], "provider": "groq"}
    GET    /adapted-resumes
    GET    /adapted-resumes/{adapted_id}
    PUT    /adapted-resumes/{adapted_id}
    DELETE /adapted-resumes/{adapted_id}
"""
from __future__ import annotations

from fastapi import APIRouter, Response, status

from deckgen.config import get_logger
from deckgen.dependencies import DeadlineDep, ServiceDep
from deckgen.models import AdaptedResume, AdaptRequest, ErrorResponse
from deckgen.routes.job_ads import ERROR_RESPONSES

logger = get_logger("routes.adapted")

router = APIRouter(prefix="/adapted-resumes", tags=["Adapted resumes"])


@router.post(
    "",
    response_model=AdaptedResume,
    status_code=status.HTTP_201_CREATED,
    summary="Adapt candidate resumes to a job ad",
    description=(
        "Resolves the job ad and every candidate, asks the provider for a "
        "tailored resume and stores it. Nothing is stored if any step fails."
    ),
    responses=ERROR_RESPONSES,
)
async def adapt_candidates(
    payload: AdaptRequest,
    service: ServiceDep,
    deadline: DeadlineDep,
) -> AdaptedResume:
    logger.info(
        "Adapt request | job_ad_id=%d | candidates=%d | provider=%s",
        payload.job_ad_id,
        len(payload.candidate_ids),
        payload.provider,
    )
    return await service.adapt_candidates(
        payload.job_ad_id,
        payload.candidate_ids,
        payload.provider,
        deadline,
    )


@router.get("", response_model=list[AdaptedResume], summary="List adapted resumes")
async def list_adapted_resumes(service: ServiceDep) -> list[AdaptedResume]:
    return service.list_adapted_resumes()


@router.get(
    "/{adapted_id}",
    response_model=AdaptedResume,
    summary="Get an adapted resume",
    responses={404: {"model": ErrorResponse}},
)
async def get_adapted_resume(adapted_id: int, service: ServiceDep) -> AdaptedResume:
    return service.get_adapted_resume(adapted_id)


@router.put(
    "/{adapted_id}",
    response_model=AdaptedResume,
    summary="Replace an adapted resume",
    responses={404: {"model": ErrorResponse}},
)
async def update_adapted_resume(
    adapted_id: int,
    adapted: AdaptedResume,
    service: ServiceDep,
) -> AdaptedResume:
    return service.update_adapted_resume(adapted.model_copy(update={"id": adapted_id}))


@router.delete(
    "/{adapted_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an adapted resume",
    responses={404: {"model": ErrorResponse}},
)
async def delete_adapted_resume(adapted_id: int, service: ServiceDep) -> Response:
    service.delete_adapted_resume(adapted_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
