"""
Gemini extraction provider implementation.

Uses Google's genai library with structured JSON output.
Failed calls are reported, never retried.
"""
from __future__ import annotations

from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import BaseModel

from ...config import ProviderConfig, get_logger
from ...exceptions import ConfigurationError, UpstreamError
from . import prompts
from .interface import JSONCompletionProvider

logger = get_logger("llm.gemini")


class GeminiExtractionProvider(JSONCompletionProvider):
    """
    Gemini extraction provider.

    The response schema is enforced server-side from the pydantic model.
    """

    provider_name = "gemini"

    def __init__(self, config: ProviderConfig) -> None:
        super().__init__(config)
        if config.api_key is None:
            raise ConfigurationError("Failed to initialize gemini provider", details="api_key is required")
        self._client = genai.Client(api_key=config.api_key.get_secret_value())
        logger.info("Initialized Gemini client (model: %s)", config.model)

    async def _complete_json(
        self,
        prompt: str,
        schema_name: str,
        response_model: type[BaseModel],
    ) -> str:
        """Run one structured-output generation."""
        gen_config = types.GenerateContentConfig(
            system_instruction=prompts.SYSTEM_INSTRUCTION,
            temperature=self._config.temperature,
            max_output_tokens=self._config.max_tokens,
            response_mime_type="application/json",
            response_schema=response_model,
        )
        try:
            response = await self._client.aio.models.generate_content(
                model=self._config.model,
                contents=prompt,
                config=gen_config,
            )
        except genai_errors.APIError as e:
            logger.error("Gemini API error %s for %s: %s", e.code, schema_name, e)
            raise UpstreamError(f"Gemini API error {e.code}", details=str(e), cause=e) from e

        if not response.text:
            raise UpstreamError("Gemini returned an empty response", details=f"schema={schema_name}")
        return response.text

    def is_available(self) -> bool:
        """Check if Gemini provider is available."""
        return self._client is not None
