"""
Tests for services/synthesizer.py - extraction and adaptation workflows.
"""
from __future__ import annotations

import asyncio
import logging
import time

import pytest

from deckgen.documents import PDFDocument, TextDocument
from deckgen.exceptions import (
    DeadlineExceededError,
    DocumentParseError,
    NotFoundError,
    ProviderDisabledError,
    ProviderNotFoundError,
    UpstreamError,
    UpstreamTimeoutError,
    ValidationError,
)
from deckgen.providers.llm import ProviderRegistry
from deckgen.state import AppState
from deckgen.utils import Deadline

from .conftest import StubProvider


def state_with(provider: StubProvider) -> AppState:
    return AppState.build(ProviderRegistry({"stub": provider}))


class TestExtraction:
    """Test document extraction workflows."""

    async def test_extract_candidate_stores_result(self, service, app_state, stub_provider):
        document = TextDocument("resume.txt", "A. Dupont, Go developer")

        candidate = await service.extract_and_store_candidate(document, "stub")

        assert candidate.id == 1
        assert candidate.full_name == "A. Dupont"
        assert app_state.candidates.get(1) == candidate
        assert stub_provider.calls == ["extract_candidate"]

    async def test_extract_job_ad_keeps_document_text(self, service):
        document = TextDocument("ad.txt", "  Backend Engineer at Acme  ")

        job_ad = await service.extract_and_store_job_ad(document, "stub")

        assert job_ad.title == "Backend Engineer"
        assert job_ad.raw_text == "Backend Engineer at Acme"

    async def test_unreadable_pdf_never_reaches_provider(self, service, app_state, stub_provider):
        document = PDFDocument("broken.pdf", b"this is not a pdf")

        with pytest.raises(DocumentParseError) as exc_info:
            await service.extract_and_store_candidate(document, "stub")

        assert stub_provider.calls == []
        assert len(app_state.candidates) == 0
        assert exc_info.value.context["step"] == "parse_document"

    async def test_empty_text_never_reaches_provider(self, service, stub_provider):
        with pytest.raises(DocumentParseError):
            await service.extract_and_store_job_ad(TextDocument("blank", " \n "), "stub")
        assert stub_provider.calls == []

    async def test_unknown_provider(self, service):
        with pytest.raises(ProviderNotFoundError):
            await service.extract_and_store_candidate(TextDocument("r", "text"), "openai")

    async def test_disabled_provider(self, service):
        with pytest.raises(ProviderDisabledError):
            await service.extract_and_store_candidate(TextDocument("r", "text"), "gemini")

    async def test_provider_failure_stores_nothing(self):
        provider = StubProvider(fail_with=UpstreamError("quota exhausted"))
        state = state_with(provider)

        with pytest.raises(UpstreamError, match="quota exhausted"):
            await state.service.extract_and_store_job_ad(TextDocument("ad", "text"), "stub")

        assert len(state.job_ads) == 0


class TestAdaptValidation:
    """Test the checks that run before any provider call."""

    async def test_empty_candidate_list_is_rejected_first(self, service, stub_provider):
        """Even a missing job ad and unknown provider are not looked at."""
        with pytest.raises(ValidationError) as exc_info:
            await service.adapt_candidates(99, [], "nope")

        assert type(exc_info.value) is ValidationError
        assert stub_provider.calls == []

    async def test_missing_job_ad(self, service, app_state, candidate, stub_provider):
        app_state.candidates.create(candidate)

        with pytest.raises(NotFoundError) as exc_info:
            await service.adapt_candidates(5, [1], "stub")

        assert type(exc_info.value) is NotFoundError
        assert exc_info.value.context == {
            "workflow": "adapt_candidates",
            "step": "resolve_job_ad",
            "job_ad_id": 5,
        }
        assert stub_provider.calls == []

    async def test_missing_candidate_stops_before_provider(
        self, service, app_state, job_ad, candidate, stub_provider, monkeypatch
    ):
        app_state.job_ads.create(job_ad)
        app_state.candidates.create(candidate)

        looked_up: list[int] = []
        real_get = app_state.candidates.get

        def recording_get(candidate_id):
            looked_up.append(candidate_id)
            return real_get(candidate_id)

        monkeypatch.setattr(app_state.candidates, "get", recording_get)

        with pytest.raises(NotFoundError) as exc_info:
            await service.adapt_candidates(1, [1, 99, 100], "stub")

        error = exc_info.value
        assert error.context["candidate_id"] == 99
        assert error.message.startswith("adapt_candidates: resolve_candidate failed:")
        assert "candidate with ID 99 not found" in error.message
        assert looked_up == [1, 99]
        assert stub_provider.calls == []
        assert len(app_state.adapted_resumes) == 0

    async def test_entities_are_resolved_before_provider(self, service, app_state, candidate):
        """A missing job ad wins over an unknown provider."""
        app_state.candidates.create(candidate)

        with pytest.raises(NotFoundError) as exc_info:
            await service.adapt_candidates(1, [1], "openai")

        assert not isinstance(exc_info.value, ProviderNotFoundError)


class TestAdaptInvocation:
    """Test provider invocation and persistence."""

    async def test_end_to_end(self, service, app_state, job_ad, candidate, stub_provider):
        assert app_state.job_ads.create(job_ad).id == 1
        assert app_state.candidates.create(candidate).id == 1

        adapted = await service.adapt_candidates(1, [1], "stub")

        assert adapted.id == 1
        assert adapted.job_ad.title == "Backend Engineer"
        assert adapted.job_ad == service.get_job_ad(1)
        assert adapted.candidate.full_name == "A. Dupont"
        assert adapted.candidate.short_description == "Tailored for Backend Engineer"
        assert app_state.adapted_resumes.get(1) == adapted
        assert stub_provider.calls == ["adapt"]

    async def test_adapted_resume_is_a_snapshot(self, service, app_state, job_ad, candidate):
        app_state.job_ads.create(job_ad)
        app_state.candidates.create(candidate)
        await service.adapt_candidates(1, [1], "stub")

        service.update_job_ad(service.get_job_ad(1).model_copy(update={"title": "Changed"}))

        assert service.get_adapted_resume(1).job_ad.title == "Backend Engineer"

    async def test_provider_error_keeps_its_class(self, job_ad, candidate):
        original = UpstreamTimeoutError("model took too long")
        state = state_with(StubProvider(fail_with=original))
        state.job_ads.create(job_ad)
        state.candidates.create(candidate)

        with pytest.raises(UpstreamTimeoutError) as exc_info:
            await state.service.adapt_candidates(1, [1], "stub")

        assert exc_info.value is original
        assert exc_info.value.context["step"] == "invoke_provider"
        assert len(state.adapted_resumes) == 0

    async def test_unexpected_exception_is_wrapped(self, job_ad, candidate):
        boom = RuntimeError("socket closed")
        state = state_with(StubProvider(fail_with=boom))
        state.job_ads.create(job_ad)
        state.candidates.create(candidate)

        with pytest.raises(UpstreamError) as exc_info:
            await state.service.adapt_candidates(1, [1], "stub")

        assert exc_info.value.cause is boom
        assert len(state.adapted_resumes) == 0


class TestDeadlines:
    """Test request deadlines and cancellation."""

    @pytest.fixture
    def seeded(self, app_state, job_ad, candidate):
        app_state.job_ads.create(job_ad)
        app_state.candidates.create(candidate)
        return app_state

    async def test_expired_deadline_skips_provider(self, seeded, stub_provider):
        deadline = Deadline(time.monotonic() - 1)

        with pytest.raises(DeadlineExceededError):
            await seeded.service.adapt_candidates(1, [1], "stub", deadline)

        assert stub_provider.calls == []
        assert len(seeded.adapted_resumes) == 0

    async def test_cancelled_deadline_skips_provider(self, seeded, stub_provider):
        deadline = Deadline.after(30)
        deadline.cancel()

        with pytest.raises(DeadlineExceededError, match="cancelled"):
            await seeded.service.adapt_candidates(1, [1], "stub", deadline)

        assert stub_provider.calls == []

    async def test_slow_provider_times_out(self, job_ad, candidate):
        provider = StubProvider(delay=5.0)
        state = state_with(provider)
        state.job_ads.create(job_ad)
        state.candidates.create(candidate)

        start = time.monotonic()
        with pytest.raises(UpstreamTimeoutError):
            await state.service.adapt_candidates(1, [1], "stub", Deadline.after(0.05))

        assert time.monotonic() - start < 2
        assert len(state.adapted_resumes) == 0

    async def test_unbounded_deadline(self, seeded):
        adapted = await seeded.service.adapt_candidates(1, [1], "stub", Deadline.after(None))
        assert adapted.id == 1

    async def test_task_cancellation_is_logged_and_stores_nothing(self, job_ad, candidate, caplog):
        provider = StubProvider(delay=5.0)
        state = state_with(provider)
        state.job_ads.create(job_ad)
        state.candidates.create(candidate)
        caplog.set_level(logging.INFO, logger="deckgen")

        task = asyncio.create_task(state.service.adapt_candidates(1, [1], "stub"))
        for _ in range(200):
            if provider.calls:
                break
            await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert provider.calls == ["adapt"]
        assert "adapt_candidates cancelled" in caplog.text
        assert len(state.adapted_resumes) == 0


class TestDeadline:
    """Test the Deadline helper."""

    def test_remaining_is_clamped(self):
        assert Deadline(time.monotonic() - 10).remaining() == 0.0

    def test_unbounded(self):
        deadline = Deadline.after(None)
        assert deadline.remaining() is None
        assert not deadline.expired
        deadline.check("anything")

    def test_check_names_the_step(self):
        with pytest.raises(DeadlineExceededError, match="before invoke_provider"):
            Deadline(time.monotonic() - 1).check("invoke_provider")
