"""
Synthesizer service.

This module composes the entity stores and the provider registry into
the application workflows:
- Extract a candidate or job ad from a document and store it
- Adapt stored candidate resumes to a stored job ad and store the result
- Plain CRUD passthroughs for every entity kind

Every workflow runs as a straight pipeline (resolve, validate, invoke
provider, persist). Only the last phase writes, so a failure anywhere
leaves the stores untouched. Provider calls are awaited outside every
store lock.

Usage:
    from deckgen.services.synthesizer import SynthesizerService

    service = SynthesizerService(registry, job_ads, candidates, adapted)
    adapted = await service.adapt_candidates(1, [1, 2], "groq")
"""
from __future__ import annotations

import asyncio
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Iterator, Sequence, TypeVar

from fastapi.concurrency import run_in_threadpool

from deckgen.config import get_logger
from deckgen.documents import Document, ParsedDocument
from deckgen.exceptions import (
    DeckgenException,
    UpstreamError,
    UpstreamTimeoutError,
    ValidationError,
)
from deckgen.models import AdaptedResume, Candidate, JobAd
from deckgen.repository import EntityStore
from deckgen.utils import Deadline

if TYPE_CHECKING:
    from deckgen.providers.llm import ExtractionProviderInterface, ProviderRegistry

logger = get_logger("services.synthesizer")

T = TypeVar("T")


class SynthesizerService:
    """
    Workflows over the job ad, candidate and adapted resume stores.

    Example:
        >>> service = SynthesizerService(registry, job_ads, candidates, adapted)
        >>> candidate = await service.extract_and_store_candidate(doc, "gemini")
    """

    def __init__(
        self,
        registry: "ProviderRegistry",
        job_ads: EntityStore[JobAd],
        candidates: EntityStore[Candidate],
        adapted_resumes: EntityStore[AdaptedResume],
    ) -> None:
        self._registry = registry
        self._job_ads = job_ads
        self._candidates = candidates
        self._adapted = adapted_resumes

    # =========================================================================
    # Workflow plumbing
    # =========================================================================

    @staticmethod
    @contextmanager
    def _step(workflow: str, step: str, **fields: Any) -> Iterator[None]:
        """Annotate any project error raised inside the block, keeping its class."""
        try:
            yield
        except DeckgenException as e:
            e.add_context(workflow, step, **fields)
            raise

    @staticmethod
    @contextmanager
    def _track(workflow: str, **fields: Any) -> Iterator[None]:
        """Log the outcome and duration of a workflow."""
        logger.info("%s started | %s", workflow, fields)
        start = time.perf_counter()
        try:
            yield
        except DeckgenException as e:
            logger.warning(
                "%s failed | %s | type=%s | elapsed_ms=%.1f | error=%s",
                workflow,
                fields,
                e.__class__.__name__,
                (time.perf_counter() - start) * 1000,
                e.message,
            )
            raise
        except asyncio.CancelledError:
            logger.warning(
                "%s cancelled | %s | elapsed_ms=%.1f",
                workflow,
                fields,
                (time.perf_counter() - start) * 1000,
            )
            raise
        logger.info(
            "%s complete | %s | elapsed_ms=%.1f",
            workflow,
            fields,
            (time.perf_counter() - start) * 1000,
        )

    def _resolve_provider(self, workflow: str, provider_name: str) -> "ExtractionProviderInterface":
        with self._step(workflow, "resolve_provider", provider=provider_name):
            return self._registry.get(provider_name)

    async def _parse_document(self, workflow: str, document: Document) -> ParsedDocument:
        with self._step(workflow, "parse_document", document=document.name):
            return await run_in_threadpool(document.parse)

    async def _invoke_provider(
        self,
        workflow: str,
        provider_name: str,
        call: Callable[[], Awaitable[T]],
        deadline: Deadline | None,
    ) -> T:
        """
        Await one provider call under the request deadline.

        The deadline is checked first so an expired or cancelled request
        never starts an external call.
        """
        with self._step(workflow, "invoke_provider", provider=provider_name):
            if deadline is not None:
                deadline.check("invoke_provider")
            timeout = deadline.remaining() if deadline is not None else None
            try:
                return await asyncio.wait_for(call(), timeout=timeout)
            except asyncio.TimeoutError as e:
                raise UpstreamTimeoutError(
                    f"Provider '{provider_name}' did not answer before the request deadline",
                    cause=e,
                ) from e
            except DeckgenException:
                raise
            except Exception as e:
                logger.error("Unexpected error from provider %s: %s", provider_name, e)
                raise UpstreamError(
                    f"Provider '{provider_name}' failed",
                    details=str(e),
                    cause=e,
                ) from e

    # =========================================================================
    # Extraction workflows
    # =========================================================================

    async def extract_and_store_candidate(
        self,
        document: Document,
        provider_name: str,
        deadline: Deadline | None = None,
    ) -> Candidate:
        """
        Extract a candidate resume from ``document`` and store it.

        Raises:
            ProviderNotFoundError / ProviderDisabledError: Unknown or disabled provider
            DocumentParseError: Document could not be read
            UpstreamError: Provider failure, timeout or expired deadline
        """
        workflow = "extract_candidate"
        with self._track(workflow, document=document.name, provider=provider_name):
            provider = self._resolve_provider(workflow, provider_name)
            parsed = await self._parse_document(workflow, document)
            candidate = await self._invoke_provider(
                workflow,
                provider_name,
                lambda: provider.extract_candidate(parsed),
                deadline,
            )
            return self._candidates.create(candidate)

    async def extract_and_store_job_ad(
        self,
        document: Document,
        provider_name: str,
        deadline: Deadline | None = None,
    ) -> JobAd:
        """
        Extract a job ad from ``document`` and store it.

        The parsed document text is kept as ``raw_text`` when the provider
        leaves it empty.

        Raises:
            ProviderNotFoundError / ProviderDisabledError: Unknown or disabled provider
            DocumentParseError: Document could not be read
            UpstreamError: Provider failure, timeout or expired deadline
        """
        workflow = "extract_job_ad"
        with self._track(workflow, document=document.name, provider=provider_name):
            provider = self._resolve_provider(workflow, provider_name)
            parsed = await self._parse_document(workflow, document)
            job_ad = await self._invoke_provider(
                workflow,
                provider_name,
                lambda: provider.extract_job_ad(parsed),
                deadline,
            )
            if not job_ad.raw_text:
                job_ad = job_ad.model_copy(update={"raw_text": parsed.text})
            return self._job_ads.create(job_ad)

    # =========================================================================
    # Adaptation workflow
    # =========================================================================

    async def adapt_candidates(
        self,
        job_ad_id: int,
        candidate_ids: Sequence[int],
        provider_name: str,
        deadline: Deadline | None = None,
    ) -> AdaptedResume:
        """
        Adapt stored candidate resumes to a stored job ad.

        Phases: validate input, resolve the job ad, resolve each candidate
        in order (stopping at the first missing one), resolve the provider,
        invoke it, then persist the result.

        Raises:
            ValidationError: ``candidate_ids`` is empty
            NotFoundError: Job ad or a candidate does not exist
            ProviderNotFoundError / ProviderDisabledError: Unknown or disabled provider
            UpstreamError: Provider failure, timeout or expired deadline
        """
        workflow = "adapt_candidates"
        with self._track(workflow, job_ad_id=job_ad_id, candidate_ids=list(candidate_ids), provider=provider_name):
            if not candidate_ids:
                raise ValidationError(
                    "At least one candidate must be provided for adaptation"
                ).add_context(workflow, "validate")

            with self._step(workflow, "resolve_job_ad", job_ad_id=job_ad_id):
                job_ad = self._job_ads.get(job_ad_id)

            candidates: list[Candidate] = []
            for candidate_id in candidate_ids:
                with self._step(workflow, "resolve_candidate", candidate_id=candidate_id):
                    candidates.append(self._candidates.get(candidate_id))

            provider = self._resolve_provider(workflow, provider_name)
            adapted = await self._invoke_provider(
                workflow,
                provider_name,
                lambda: provider.adapt(job_ad, candidates),
                deadline,
            )
            return self._adapted.create(adapted)

    # =========================================================================
    # Job ad CRUD
    # =========================================================================

    def get_job_ad(self, job_ad_id: int) -> JobAd:
        return self._job_ads.get(job_ad_id)

    def list_job_ads(self) -> list[JobAd]:
        return self._job_ads.list()

    def update_job_ad(self, job_ad: JobAd) -> JobAd:
        return self._job_ads.update(job_ad)

    def delete_job_ad(self, job_ad_id: int) -> None:
        self._job_ads.delete(job_ad_id)

    # =========================================================================
    # Candidate CRUD
    # =========================================================================

    def get_candidate(self, candidate_id: int) -> Candidate:
        return self._candidates.get(candidate_id)

    def list_candidates(self) -> list[Candidate]:
        return self._candidates.list()

    def update_candidate(self, candidate: Candidate) -> Candidate:
        return self._candidates.update(candidate)

    def delete_candidate(self, candidate_id: int) -> None:
        self._candidates.delete(candidate_id)

    # =========================================================================
    # Adapted resume CRUD
    # =========================================================================

    def get_adapted_resume(self, adapted_id: int) -> AdaptedResume:
        return self._adapted.get(adapted_id)

    def list_adapted_resumes(self) -> list[AdaptedResume]:
        return self._adapted.list()

    def update_adapted_resume(self, adapted: AdaptedResume) -> AdaptedResume:
        return self._adapted.update(adapted)

    def delete_adapted_resume(self, adapted_id: int) -> None:
        self._adapted.delete(adapted_id)
