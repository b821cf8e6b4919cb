"""
Abstract interface for extraction providers.

All providers must implement this interface so the registry can
hand any of them to the synthesizer service.
"""
from __future__ import annotations

import asyncio
import json
import time
from abc import ABC, abstractmethod
from typing import ClassVar, Sequence, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ...config import ProviderConfig, get_logger
from ...documents import ParsedDocument
from ...exceptions import UpstreamError, UpstreamTimeoutError
from ...models import AdaptedResume, Candidate, JobAd
from . import prompts

logger = get_logger("llm.provider")

M = TypeVar("M", bound=BaseModel)


class ExtractionProviderInterface(ABC):
    """
    Abstract interface for extraction providers.

    All implementations must provide:
    - Candidate extraction from a parsed document
    - Job ad extraction from a parsed document
    - Adaptation of candidate resumes to a job ad
    - Provider information

    Every operation raises ``UpstreamError`` (or a subclass) on failure
    and is never retried by the provider.
    """

    @abstractmethod
    async def extract_candidate(self, document: ParsedDocument) -> Candidate:
        """
        Extract a candidate resume from a document.

        Raises:
            UpstreamError: On provider failure
        """
        pass

    @abstractmethod
    async def extract_job_ad(self, document: ParsedDocument) -> JobAd:
        """
        Extract a job ad from a document.

        Raises:
            UpstreamError: On provider failure
        """
        pass

    @abstractmethod
    async def adapt(self, job_ad: JobAd, candidates: Sequence[Candidate]) -> AdaptedResume:
        """
        Build a resume tailored to ``job_ad`` from one or more candidate resumes.

        Args:
            job_ad: Target job ad
            candidates: Non-empty, ordered candidate resumes

        Raises:
            UpstreamError: On provider failure
        """
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        """Get the model identifier."""
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """Get the provider name (e.g., 'groq', 'gemini')."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is available (has a configured client)."""
        pass


class JSONCompletionProvider(ExtractionProviderInterface):
    """
    Base class for LLM providers answering with JSON.

    Subclasses only implement ``_complete_json``; prompt construction,
    timeouts and response validation are shared here.
    """

    provider_name: ClassVar[str] = ""

    def __init__(self, config: ProviderConfig) -> None:
        self._config = config

    @abstractmethod
    async def _complete_json(
        self,
        prompt: str,
        schema_name: str,
        response_model: type[BaseModel],
    ) -> str:
        """
        Send one prompt and return the raw JSON text of the answer.

        Raises:
            UpstreamError: On API failure
        """
        pass

    async def _generate(
        self,
        prompt: str,
        schema_name: str,
        response_model: type[M],
    ) -> M:
        """Run one completion under the provider timeout and validate the result."""
        timeout = self._config.timeout_seconds
        start = time.perf_counter()
        try:
            raw = await asyncio.wait_for(
                self._complete_json(prompt, schema_name, response_model),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            logger.warning("%s %s timed out after %.1fs", self.provider_name, schema_name, timeout)
            raise UpstreamTimeoutError(
                f"{self.provider_name} call timed out",
                details=f"Timeout after {timeout}s",
                cause=e,
            ) from e

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s complete | model=%s | chars=%d | elapsed_ms=%.1f",
            self.provider_name,
            schema_name,
            self._config.model,
            len(raw),
            elapsed_ms,
        )

        try:
            return response_model.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.error(
                "Failed to validate JSON from %s for %s. Raw response:\n%s",
                self.provider_name,
                schema_name,
                raw,
            )
            raise UpstreamError(
                f"{self.provider_name} returned JSON that does not match {schema_name}",
                details=str(e),
                cause=e,
            ) from e

    @staticmethod
    def _schema_for(model: type[BaseModel]) -> str:
        return json.dumps(model.model_json_schema(), indent=2)

    async def extract_candidate(self, document: ParsedDocument) -> Candidate:
        prompt = prompts.EXTRACT_CANDIDATE_TEMPLATE.format(
            schema=self._schema_for(Candidate),
            name=document.name,
            text=document.text,
        )
        return await self._generate(prompt, "candidate", Candidate)

    async def extract_job_ad(self, document: ParsedDocument) -> JobAd:
        prompt = prompts.EXTRACT_JOB_AD_TEMPLATE.format(
            schema=self._schema_for(JobAd),
            name=document.name,
            text=document.text,
        )
        return await self._generate(prompt, "job_ad", JobAd)

    async def adapt(self, job_ad: JobAd, candidates: Sequence[Candidate]) -> AdaptedResume:
        blocks = "".join(
            prompts.CANDIDATE_BLOCK_TEMPLATE.format(index=i, resume=c.model_dump_json())
            for i, c in enumerate(candidates, start=1)
        )
        prompt = prompts.ADAPT_TEMPLATE.format(
            schema=self._schema_for(Candidate),
            job_ad=job_ad.model_dump_json(),
            candidates=blocks,
        )
        tailored = await self._generate(prompt, "adapted_resume", Candidate)
        return AdaptedResume(job_ad=job_ad, candidate=tailored)

    def get_model_name(self) -> str:
        return self._config.model

    def get_provider_name(self) -> str:
        return self.provider_name
