"""
Tests for config.py - settings, provider blocks and logging.
"""
from __future__ import annotations

import logging

import pydantic
import pytest

from deckgen.config import (
    ProviderConfig,
    SanitizingFormatter,
    Settings,
    dump_default_config,
    get_logger,
)
from deckgen.exceptions import ConfigurationError


class TestSettings:
    """Test settings loading and computed properties."""

    def test_provider_configs(self):
        settings = Settings(
            _env_file=None,
            GROQ_ENABLED=True,
            GROQ_API_KEY="gsk-test",
            PROVIDER_TIMEOUT_SECONDS=12,
        )

        configs = settings.PROVIDER_CONFIGS

        assert set(configs) == {"groq", "gemini"}
        assert configs["groq"].enabled
        assert configs["groq"].api_key.get_secret_value() == "gsk-test"
        assert configs["groq"].model == "llama-3.3-70b-versatile"
        assert configs["groq"].timeout_seconds == 12
        assert not configs["gemini"].enabled

    def test_list_properties(self):
        settings = Settings(
            _env_file=None,
            CORS_ORIGINS="http://a.test, http://b.test",
            ALLOWED_EXTENSIONS=".PDF, .txt",
        )
        assert settings.CORS_ORIGINS_LIST == ["http://a.test", "http://b.test"]
        assert settings.ALLOWED_EXTENSIONS_SET == frozenset({".pdf", ".txt"})

    def test_log_level_is_uppercased(self):
        assert Settings(_env_file=None, LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"

    def test_invalid_rate_limit_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            Settings(_env_file=None, RATE_LIMIT="lots")

    def test_invalid_port_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            Settings(_env_file=None, PORT=0)


class TestProviderConfig:
    """Test enabled-provider validation."""

    def test_disabled_provider_is_not_validated(self):
        ProviderConfig(enabled=False).validate_enabled("groq")

    def test_whitespace_api_key_rejected(self):
        with pytest.raises(ConfigurationError, match="gemini"):
            ProviderConfig(enabled=True, api_key="  ", model="m").validate_enabled("gemini")

    def test_api_key_is_hidden_in_repr(self):
        config = ProviderConfig(enabled=True, api_key="gsk-secret", model="m")
        assert "gsk-secret" not in repr(config)


class TestDumpDefaultConfig:
    """Test rendering of the default configuration."""

    def test_contains_every_setting(self):
        dumped = dump_default_config()
        for name in Settings.model_fields:
            assert f"\n{name}=" in f"\n{dumped}"

    def test_renders_defaults(self):
        lines = dump_default_config().splitlines()
        assert "PORT=8080" in lines
        assert "GROQ_ENABLED=false" in lines
        assert "GROQ_API_KEY=" in lines
        assert "# Server port number" in lines


class TestLogging:
    """Test log formatting."""

    def format(self, message: str) -> str:
        formatter = SanitizingFormatter("%(message)s")
        record = logging.LogRecord("deckgen.test", logging.INFO, __file__, 1, message, None, None)
        return formatter.format(record)

    def test_redacts_api_key(self):
        assert self.format("api_key=gsk-123") == "api_key=[REDACTED]"

    def test_redacts_bearer_token(self):
        assert self.format("Authorization: Bearer abc.def") == "Authorization: Bearer [REDACTED]"

    def test_plain_message_unchanged(self):
        assert self.format("Created job ad 1") == "Created job ad 1"

    def test_loggers_are_namespaced(self):
        assert get_logger("store").name == "deckgen.store"
