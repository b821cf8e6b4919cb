"""
Job ad endpoints.

Usage:
    POST   /job-ads/extract        (multipart: file, provider)
    POST   /job-ads/extract-text   {"name": ..., "text": ..., "provider": ...}
    GET    /job-ads
    GET    /job-ads/{job_ad_id}
    PUT    /job-ads/{job_ad_id}
    DELETE /job-ads/{job_ad_id}
"""
from __future__ import annotations

from fastapi import APIRouter, File, Form, Response, UploadFile, status

from deckgen.config import get_logger
from deckgen.dependencies import DeadlineDep, ServiceDep, read_upload
from deckgen.documents import TextDocument, document_from_upload
from deckgen.models import ErrorResponse, JobAd, TextExtractionRequest

logger = get_logger("routes.job_ads")

router = APIRouter(prefix="/job-ads", tags=["Job ads"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request or disabled provider"},
    404: {"model": ErrorResponse, "description": "Unknown job ad or provider"},
    502: {"model": ErrorResponse, "description": "Provider failure"},
    504: {"model": ErrorResponse, "description": "Provider timeout"},
}


@router.post(
    "/extract",
    response_model=JobAd,
    status_code=status.HTTP_201_CREATED,
    summary="Extract a job ad from an uploaded document",
    responses={**ERROR_RESPONSES, 415: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def extract_job_ad(
    service: ServiceDep,
    deadline: DeadlineDep,
    file: UploadFile = File(..., description="PDF or text document"),
    provider: str = Form(..., description="Provider name"),
) -> JobAd:
    """Parse the uploaded document, extract a job ad with the provider and store it."""
    content = await read_upload(file)
    document = document_from_upload(file.filename or "job_ad", content)
    return await service.extract_and_store_job_ad(document, provider, deadline)


@router.post(
    "/extract-text",
    response_model=JobAd,
    status_code=status.HTTP_201_CREATED,
    summary="Extract a job ad from raw text",
    responses=ERROR_RESPONSES,
)
async def extract_job_ad_from_text(
    payload: TextExtractionRequest,
    service: ServiceDep,
    deadline: DeadlineDep,
) -> JobAd:
    document = TextDocument(payload.name, payload.text)
    return await service.extract_and_store_job_ad(document, payload.provider, deadline)


@router.get("", response_model=list[JobAd], summary="List job ads")
async def list_job_ads(service: ServiceDep) -> list[JobAd]:
    return service.list_job_ads()


@router.get(
    "/{job_ad_id}",
    response_model=JobAd,
    summary="Get a job ad",
    responses={404: {"model": ErrorResponse}},
)
async def get_job_ad(job_ad_id: int, service: ServiceDep) -> JobAd:
    return service.get_job_ad(job_ad_id)


@router.put(
    "/{job_ad_id}",
    response_model=JobAd,
    summary="Replace a job ad",
    responses={404: {"model": ErrorResponse}},
)
async def update_job_ad(job_ad_id: int, job_ad: JobAd, service: ServiceDep) -> JobAd:
    """Replace a job ad. The id in the path wins over any id in the body."""
    return service.update_job_ad(job_ad.model_copy(update={"id": job_ad_id}))


@router.delete(
    "/{job_ad_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a job ad",
    responses={404: {"model": ErrorResponse}},
)
async def delete_job_ad(job_ad_id: int, service: ServiceDep) -> Response:
    service.delete_job_ad(job_ad_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
