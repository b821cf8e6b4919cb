"""
LLM Provider - Factory module for extraction providers.

Builds the provider registry once at startup from the per-provider
configuration blocks. The registry is read-only afterwards.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Iterable, Mapping

from ...config import ProviderConfig, get_logger
from ...exceptions import ConfigurationError, ProviderDisabledError, ProviderNotFoundError
from .interface import ExtractionProviderInterface, JSONCompletionProvider

logger = get_logger("llm.registry")

ProviderFactory = Callable[[ProviderConfig], ExtractionProviderInterface]


def _build_groq(config: ProviderConfig) -> ExtractionProviderInterface:
    from .groq_impl import GroqExtractionProvider
    return GroqExtractionProvider(config)


def _build_gemini(config: ProviderConfig) -> ExtractionProviderInterface:
    from .gemini_impl import GeminiExtractionProvider
    return GeminiExtractionProvider(config)


PROVIDER_FACTORIES: Mapping[str, ProviderFactory] = MappingProxyType({
    "groq": _build_groq,
    "gemini": _build_gemini,
})


class ProviderRegistry:
    """
    Immutable lookup from provider name to provider instance.

    Example:
        >>> registry = ProviderRegistry.from_config(settings.PROVIDER_CONFIGS)
        >>> provider = registry.get("groq")
    """

    def __init__(
        self,
        providers: Mapping[str, ExtractionProviderInterface],
        disabled: Iterable[str] = (),
    ) -> None:
        self._providers: Mapping[str, ExtractionProviderInterface] = MappingProxyType(dict(providers))
        self._disabled: frozenset[str] = frozenset(disabled) - set(self._providers)

    @classmethod
    def from_config(
        cls,
        configs: Mapping[str, ProviderConfig],
        factories: Mapping[str, ProviderFactory] = PROVIDER_FACTORIES,
    ) -> "ProviderRegistry":
        """
        Validate and instantiate every enabled provider.

        Args:
            configs: Provider configuration keyed by provider name
            factories: Constructors keyed by provider name

        Raises:
            ConfigurationError: If an enabled provider is misconfigured or unsupported
        """
        providers: dict[str, ExtractionProviderInterface] = {}
        disabled: list[str] = []

        for name, config in configs.items():
            if not config.enabled:
                disabled.append(name)
                continue

            config.validate_enabled(name)
            factory = factories.get(name)
            if factory is None:
                raise ConfigurationError(
                    f"Failed to initialize {name} provider",
                    details="provider is not supported",
                )
            providers[name] = factory(config)
            logger.info("LLM Provider: %s (model: %s)", name, config.model)

        if not providers:
            logger.warning("No LLM provider enabled; extraction endpoints will reject requests")

        return cls(providers, disabled)

    def get(self, name: str) -> ExtractionProviderInterface:
        """
        Get the provider registered under ``name``.

        Raises:
            ProviderDisabledError: If the provider is configured but disabled
            ProviderNotFoundError: If no provider has this name
        """
        provider = self._providers.get(name)
        if provider is not None:
            return provider
        if name in self._disabled:
            raise ProviderDisabledError(f"Provider '{name}' is disabled in config")
        raise ProviderNotFoundError(f"Provider '{name}' is not supported or not enabled in config")

    def names(self) -> list[str]:
        """Get the sorted names of the enabled providers."""
        return sorted(self._providers)

    def disabled_names(self) -> list[str]:
        return sorted(self._disabled)

    def __contains__(self, name: object) -> bool:
        return name in self._providers

    def __len__(self) -> int:
        return len(self._providers)


__all__ = [
    "ExtractionProviderInterface",
    "JSONCompletionProvider",
    "PROVIDER_FACTORIES",
    "ProviderRegistry",
]
