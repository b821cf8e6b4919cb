"""
Groq extraction provider implementation.

Uses Groq's OpenAI-compatible chat completions API in JSON mode.
Failed calls are reported, never retried.
"""
from __future__ import annotations

import groq
from pydantic import BaseModel

from ...config import ProviderConfig, get_logger
from ...exceptions import ConfigurationError, UpstreamError, UpstreamTimeoutError
from . import prompts
from .interface import JSONCompletionProvider

logger = get_logger("llm.groq")


class GroqExtractionProvider(JSONCompletionProvider):
    """
    Groq extraction provider.

    Groq's JSON mode does not enforce a schema, so the schema travels
    inside the prompt and the answer is validated by the base class.
    """

    provider_name = "groq"

    def __init__(self, config: ProviderConfig) -> None:
        super().__init__(config)
        if config.api_key is None:
            raise ConfigurationError("Failed to initialize groq provider", details="api_key is required")
        # max_retries=0: failed calls surface unchanged
        self._client = groq.AsyncGroq(
            api_key=config.api_key.get_secret_value(),
            max_retries=0,
        )
        logger.info("Initialized Groq client (model: %s)", config.model)

    async def _complete_json(
        self,
        prompt: str,
        schema_name: str,
        response_model: type[BaseModel],
    ) -> str:
        """Run one JSON-mode chat completion."""
        try:
            response = await self._client.chat.completions.create(
                model=self._config.model,
                messages=[
                    {"role": "system", "content": prompts.SYSTEM_INSTRUCTION},
                    {"role": "user", "content": prompt},
                ],
                temperature=self._config.temperature,
                max_tokens=self._config.max_tokens,
                response_format={"type": "json_object"},
            )
        except groq.APITimeoutError as e:
            raise UpstreamTimeoutError("Groq request timed out", details=str(e), cause=e) from e
        except groq.RateLimitError as e:
            logger.warning("Groq rate limit hit for %s: %s", schema_name, e)
            raise UpstreamError("Groq rate limit exceeded", details=str(e), cause=e) from e
        except groq.APIStatusError as e:
            logger.error("Groq API error %d for %s: %s", e.status_code, schema_name, e)
            raise UpstreamError(f"Groq API error {e.status_code}", details=str(e), cause=e) from e
        except groq.APIError as e:
            logger.error("Groq API error for %s: %s", schema_name, e)
            raise UpstreamError("Groq API error", details=str(e), cause=e) from e

        if not response.choices or not response.choices[0].message.content:
            raise UpstreamError("Groq returned an empty response", details=f"schema={schema_name}")
        return response.choices[0].message.content

    def is_available(self) -> bool:
        """Check if Groq provider is available."""
        return self._client is not None
