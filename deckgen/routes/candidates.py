"""
Candidate resume endpoints.

Usage:
    POST   /candidates/extract        (multipart: file, provider)
    POST   /candidates/extract-text   {"name": ..., "text": ..., "provider": ...}
    GET    /candidates
    GET    /candidates/{candidate_id}
    PUT    /candidates/{candidate_id}
    DELETE /candidates/{candidate_id}
"""
from __future__ import annotations

from fastapi import APIRouter, File, Form, Response, UploadFile, status

from deckgen.config import get_logger
from deckgen.dependencies import DeadlineDep, ServiceDep, read_upload
from deckgen.documents import TextDocument, document_from_upload
from deckgen.models import Candidate, ErrorResponse, TextExtractionRequest
from deckgen.routes.job_ads import ERROR_RESPONSES

logger = get_logger("routes.candidates")

router = APIRouter(prefix="/candidates", tags=["Candidates"])


@router.post(
    "/extract",
    response_model=Candidate,
    status_code=status.HTTP_201_CREATED,
    summary="Extract a candidate resume from an uploaded document",
    responses={**ERROR_RESPONSES, 415: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def extract_candidate(
    service: ServiceDep,
    deadline: DeadlineDep,
    file: UploadFile = File(..., description="PDF or text resume"),
    provider: str = Form(..., description="Provider name"),
) -> Candidate:
    """Parse the uploaded resume, extract it with the provider and store it."""
    content = await read_upload(file)
    document = document_from_upload(file.filename or "resume", content)
    return await service.extract_and_store_candidate(document, provider, deadline)


@router.post(
    "/extract-text",
    response_model=Candidate,
    status_code=status.HTTP_201_CREATED,
    summary="Extract a candidate resume from raw text",
    responses=ERROR_RESPONSES,
)
async def extract_candidate_from_text(
    payload: TextExtractionRequest,
    service: ServiceDep,
    deadline: DeadlineDep,
) -> Candidate:
    document = TextDocument(payload.name, payload.text)
    return await service.extract_and_store_candidate(document, payload.provider, deadline)


@router.get("", response_model=list[Candidate], summary="List candidates")
async def list_candidates(service: ServiceDep) -> list[Candidate]:
    return service.list_candidates()


@router.get(
    "/{candidate_id}",
    response_model=Candidate,
    summary="Get a candidate",
    responses={404: {"model": ErrorResponse}},
)
async def get_candidate(candidate_id: int, service: ServiceDep) -> Candidate:
    return service.get_candidate(candidate_id)


@router.put(
    "/{candidate_id}",
    response_model=Candidate,
    summary="Replace a candidate",
    responses={404: {"model": ErrorResponse}},
)
async def update_candidate(candidate_id: int, candidate: Candidate, service: ServiceDep) -> Candidate:
    return service.update_candidate(candidate.model_copy(update={"id": candidate_id}))


@router.delete(
    "/{candidate_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a candidate",
    responses={404: {"model": ErrorResponse}},
)
async def delete_candidate(candidate_id: int, service: ServiceDep) -> Response:
    service.delete_candidate(candidate_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
