"""
Pytest configuration and shared fixtures.
"""
from __future__ import annotations

import asyncio
from typing import Sequence

import pytest

from deckgen.documents import ParsedDocument
from deckgen.models import AdaptedResume, Candidate, Experience, JobAd
from deckgen.providers.llm import ExtractionProviderInterface, ProviderRegistry
from deckgen.state import AppState


class StubProvider(ExtractionProviderInterface):
    """
    In-process provider that records every call.

    ``fail_with`` makes every call raise that exception; ``delay`` makes
    every call sleep first.
    """

    def __init__(
        self,
        name: str = "stub",
        fail_with: BaseException | None = None,
        delay: float = 0.0,
    ) -> None:
        self.name = name
        self.fail_with = fail_with
        self.delay = delay
        self.calls: list[str] = []

    async def _run(self, operation: str) -> None:
        self.calls.append(operation)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with

    async def extract_candidate(self, document: ParsedDocument) -> Candidate:
        await self._run("extract_candidate")
        return Candidate(
            full_name="A. Dupont",
            description=document.text,
            skills=["Go", "Python"],
            experiences=[Experience(company_name="Acme", job_title="Developer")],
        )

    async def extract_job_ad(self, document: ParsedDocument) -> JobAd:
        await self._run("extract_job_ad")
        return JobAd(title="Backend Engineer", company_name="Acme")

    async def adapt(self, job_ad: JobAd, candidates: Sequence[Candidate]) -> AdaptedResume:
        await self._run("adapt")
        tailored = candidates[0].model_copy(
            update={"id": 0, "short_description": f"Tailored for {job_ad.title}"}
        )
        return AdaptedResume(job_ad=job_ad, candidate=tailored)

    def get_model_name(self) -> str:
        return "stub-model"

    def get_provider_name(self) -> str:
        return self.name

    def is_available(self) -> bool:
        return True


@pytest.fixture
def stub_provider() -> StubProvider:
    """Provider that answers immediately."""
    return StubProvider()


@pytest.fixture
def registry(stub_provider) -> ProviderRegistry:
    """Registry with the stub enabled and 'gemini' configured but disabled."""
    return ProviderRegistry({"stub": stub_provider}, disabled=["gemini"])


@pytest.fixture
def app_state(registry) -> AppState:
    """Fresh stores wired to the stub registry."""
    return AppState.build(registry)


@pytest.fixture
def service(app_state):
    return app_state.service


@pytest.fixture
def job_ad() -> JobAd:
    """Sample job ad."""
    return JobAd(
        title="Backend Engineer",
        company_name="Acme",
        location="Paris",
        key_responsibilities=["Build APIs"],
        required_qualifications=["Go"],
    )


@pytest.fixture
def candidate() -> Candidate:
    """Sample candidate resume."""
    return Candidate(
        full_name="A. Dupont",
        short_description="Backend developer",
        skills=["Go", "PostgreSQL"],
        experiences=[
            Experience(
                company_name="Acme",
                dates="2020-2023",
                job_title="Developer",
                tools="Go, Docker",
            )
        ],
        location="Lyon",
    )
