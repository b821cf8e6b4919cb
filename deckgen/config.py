"""
Centralized configuration using Pydantic BaseSettings.

Settings are loaded once, validated at startup and shared through the
cached ``settings`` instance:
- Pydantic BaseSettings for type-safe environment variable loading
- Environment file support (.env)
- Per-provider configuration blocks consumed by the provider registry

Configuration Philosophy:
    - .env: Only sensitive data (API keys)
    - config.py: All application settings with sensible defaults

Usage:
    from deckgen.config import settings, get_logger

    print(settings.PORT)
"""
from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from deckgen.exceptions import ConfigurationError


# =============================================================================
# Provider Configuration
# =============================================================================

class ProviderConfig(BaseModel):
    """
    Configuration block for a single extraction provider.

    Disabled providers are never validated nor instantiated.
    """

    enabled: bool = False
    api_key: SecretStr | None = None
    model: str = ""
    timeout_seconds: float = Field(default=60.0, gt=0)
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    max_tokens: int = Field(default=8192, ge=1)

    def validate_enabled(self, name: str) -> None:
        """
        Check the fields an enabled provider cannot run without.

        Raises:
            ConfigurationError: If the API key or model is missing
        """
        if not self.enabled:
            return
        if self.api_key is None or not self.api_key.get_secret_value().strip():
            raise ConfigurationError(
                f"Failed to initialize {name} provider",
                details="api_key is required",
            )
        if not self.model.strip():
            raise ConfigurationError(
                f"Failed to initialize {name} provider",
                details="model name is required",
            )


# =============================================================================
# Application Settings
# =============================================================================

class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Configuration Sources:
        1. Environment variables
        2. .env file (if present)
        3. Default values (defined below)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    # =========================================================================
    # Server Configuration
    # =========================================================================

    HOST: str = Field(
        default="127.0.0.1",
        description="Server host (0.0.0.0 for external access, 127.0.0.1 for local only)",
    )
    PORT: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Server port number",
    )
    DEBUG: bool = Field(
        default=False,
        description="Debug mode - enables auto-reload",
    )
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )

    # =========================================================================
    # Request Handling
    # =========================================================================

    REQUEST_TIMEOUT_SECONDS: float = Field(
        default=60.0,
        gt=0,
        description="Deadline applied to every workflow request",
    )
    MAX_UPLOAD_SIZE: int = Field(
        default=10_000_000,
        ge=1,
        description="Maximum uploaded document size in bytes",
    )
    ALLOWED_EXTENSIONS: str = Field(
        default=".pdf,.txt,.md",
        description="Comma-separated document extensions accepted for upload",
    )

    # =========================================================================
    # LLM Provider Configuration
    # =========================================================================
    # Sensitive: API keys loaded from .env

    # Groq Configuration (https://console.groq.com)
    GROQ_ENABLED: bool = Field(default=False, description="Register the Groq provider")
    GROQ_API_KEY: str | None = Field(default=None, description="Groq API key")
    GROQ_MODEL_ID: str = Field(
        default="llama-3.3-70b-versatile",
        description="Groq model identifier",
    )

    # Gemini Configuration (https://aistudio.google.com/app/apikey)
    GEMINI_ENABLED: bool = Field(default=False, description="Register the Gemini provider")
    GEMINI_API_KEY: str | None = Field(default=None, description="Gemini API key")
    GEMINI_MODEL_ID: str = Field(
        default="gemini-2.0-flash",
        description="Gemini model identifier",
    )

    # =========================================================================
    # Generation Configuration
    # =========================================================================

    GENERATION_TEMPERATURE: float = Field(
        default=0.2,
        ge=0.0,
        le=2.0,
        description="LLM sampling temperature (low values keep extraction faithful)",
    )
    MAX_COMPLETION_TOKENS: int = Field(
        default=8192,
        ge=1,
        description="Maximum tokens in an LLM response",
    )
    PROVIDER_TIMEOUT_SECONDS: float = Field(
        default=60.0,
        gt=0,
        description="Maximum time to wait for a single provider call",
    )

    # =========================================================================
    # Rate Limiting
    # =========================================================================

    RATE_LIMIT: str = Field(
        default="100/minute",
        pattern=r"^\d+/(second|minute|hour|day)$",
        description="Default rate limit per client (format: 'count/period')",
    )

    # =========================================================================
    # CORS Configuration
    # =========================================================================

    CORS_ORIGINS: str = Field(
        default="*",
        description="Comma-separated allowed origins ('*' for all, restrict in production)",
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str) -> str:
        """Ensure LOG_LEVEL is uppercase."""
        return v.upper() if isinstance(v, str) else v

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def CORS_ORIGINS_LIST(self) -> list[str]:
        """Get list of CORS origins."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def ALLOWED_EXTENSIONS_SET(self) -> frozenset[str]:
        """Get the normalized set of accepted upload extensions."""
        return frozenset(
            e.strip().lower() for e in self.ALLOWED_EXTENSIONS.split(",") if e.strip()
        )

    @property
    def PROVIDER_CONFIGS(self) -> dict[str, ProviderConfig]:
        """Per-provider configuration blocks keyed by provider name."""
        shared: dict[str, Any] = {
            "timeout_seconds": self.PROVIDER_TIMEOUT_SECONDS,
            "temperature": self.GENERATION_TEMPERATURE,
            "max_tokens": self.MAX_COMPLETION_TOKENS,
        }
        return {
            "groq": ProviderConfig(
                enabled=self.GROQ_ENABLED,
                api_key=self.GROQ_API_KEY,
                model=self.GROQ_MODEL_ID,
                **shared,
            ),
            "gemini": ProviderConfig(
                enabled=self.GEMINI_ENABLED,
                api_key=self.GEMINI_API_KEY,
                model=self.GEMINI_MODEL_ID,
                **shared,
            ),
        }


# =============================================================================
# Settings Factory with Caching
# =============================================================================

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache for singleton behavior while allowing
    cache invalidation in tests.
    """
    return Settings()


# Convenience alias for direct access
settings = get_settings()


def dump_default_config() -> str:
    """
    Render the default settings as ``.env`` lines.

    Secrets have no default and are rendered empty.
    """
    lines: list[str] = []
    for name, field in Settings.model_fields.items():
        default = field.default
        if default is None:
            default = ""
        elif isinstance(default, bool):
            default = str(default).lower()
        if field.description:
            lines.append(f"# {field.description}")
        lines.append(f"{name}={default}")
    return "\n".join(lines) + "\n"


# =============================================================================
# Logging Configuration
# =============================================================================

class SanitizingFormatter(logging.Formatter):
    """
    Logging formatter that redacts sensitive information.

    Automatically redacts:
    - Bearer tokens
    - API keys
    - Tokens
    - Passwords
    """

    SENSITIVE_PATTERNS: ClassVar[list[tuple[re.Pattern[str], str]]] = [
        (re.compile(r'(Bearer\s+)[^\s]+', re.I), r'\1[REDACTED]'),
        (re.compile(r'(api[_-]?key["\']?\s*[:=]\s*["\']?)[^"\'\s]+', re.I), r'\1[REDACTED]'),
        (re.compile(r'(token["\']?\s*[:=]\s*["\']?)[^"\'\s]+', re.I), r'\1[REDACTED]'),
        (re.compile(r'(password["\']?\s*[:=]\s*["\']?)[^"\'\s]+', re.I), r'\1[REDACTED]'),
    ]

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with sensitive data redaction."""
        message = super().format(record)
        for pattern, replacement in self.SENSITIVE_PATTERNS:
            message = pattern.sub(replacement, message)
        return message


def configure_logging(log_level: str = "INFO") -> None:
    """
    Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    log_format = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

    handler = logging.StreamHandler()
    handler.setFormatter(SanitizingFormatter(log_format))

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        handlers=[handler],
        force=True,
    )

    # Suppress noisy third-party loggers
    for logger_name in ("httpx", "httpcore", "google", "groq", "urllib3"):
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically module name)

    Returns:
        Configured logging.Logger instance
    """
    return logging.getLogger(f"deckgen.{name}")


# Initialize logging on module load
configure_logging(settings.LOG_LEVEL)
