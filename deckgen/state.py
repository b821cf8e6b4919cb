"""
Application state management.

Stores, provider registry and service are built once per process and
handed to request handlers through FastAPI dependencies; nothing here is
a module-level singleton, so tests can build isolated instances.
"""
from __future__ import annotations

from dataclasses import dataclass

from deckgen.config import Settings, get_logger
from deckgen.models import AdaptedResume, Candidate, JobAd
from deckgen.providers.llm import ProviderRegistry
from deckgen.repository import EntityStore
from deckgen.services.synthesizer import SynthesizerService

logger = get_logger("state")


@dataclass
class AppState:
    """
    Central container for shared application resources.

    One store per entity kind, each with its own lock.
    """
    registry: ProviderRegistry
    job_ads: EntityStore[JobAd]
    candidates: EntityStore[Candidate]
    adapted_resumes: EntityStore[AdaptedResume]
    service: SynthesizerService

    @classmethod
    def build(cls, registry: ProviderRegistry) -> "AppState":
        """Create empty stores and wire them to the service."""
        job_ads: EntityStore[JobAd] = EntityStore("job ad")
        candidates: EntityStore[Candidate] = EntityStore("candidate")
        adapted_resumes: EntityStore[AdaptedResume] = EntityStore("adapted resume")
        return cls(
            registry=registry,
            job_ads=job_ads,
            candidates=candidates,
            adapted_resumes=adapted_resumes,
            service=SynthesizerService(registry, job_ads, candidates, adapted_resumes),
        )

    @classmethod
    def create(cls, settings: Settings) -> "AppState":
        """
        Create application state from settings.

        Raises:
            ConfigurationError: If an enabled provider is misconfigured
        """
        registry = ProviderRegistry.from_config(settings.PROVIDER_CONFIGS)
        state = cls.build(registry)
        logger.info(
            "Providers: enabled=%s | disabled=%s",
            registry.names() or "none",
            registry.disabled_names() or "none",
        )
        return state

    def is_ready(self) -> bool:
        """Check if the application can serve extraction requests."""
        return len(self.registry) > 0
