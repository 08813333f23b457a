"""
Application Configuration

Pydantic-based settings management using environment variables.
Supports nested configuration, validation, and caching.

Usage:
    from cardiochat.config import get_settings

    settings = get_settings()
    print(settings.gemini.model)
    print(settings.conversations.storage_dir)
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiSettings(BaseSettings):
    """Completion service configuration."""

    api_key: str | None = Field(None, description="Google AI API key")
    base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta/models",
        description="Base URL of the generateContent endpoint",
    )
    model: str = Field(default="gemini-2.0-flash", description="Gemini model identifier")

    # Generation parameters
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature",
    )
    max_output_tokens: int = Field(
        default=800,
        gt=0,
        le=8192,
        description="Maximum tokens per reply",
    )
    top_p: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        description="Nucleus sampling bound",
    )
    top_k: int = Field(
        default=10,
        gt=0,
        description="Top-k sampling bound",
    )

    # Content safety
    safety_category: str = Field(
        default="HARM_CATEGORY_DANGEROUS_CONTENT",
        description="Safety category sent with every request",
    )
    safety_threshold: str = Field(
        default="BLOCK_ONLY_HIGH",
        description="Blocking threshold for the safety category",
    )

    timeout: int = Field(
        default=30,
        gt=0,
        description="Request timeout in seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("api_key", mode="before")
    @classmethod
    def normalize_api_key(cls, v: str | None) -> str | None:
        """Treat empty strings as missing."""
        if v == "":
            return None
        return v

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("Gemini base URL must start with http:// or https://")
        return v.rstrip("/")


class ConversationSettings(BaseSettings):
    """Conversation persistence and pipeline configuration."""

    storage_dir: Path = Field(
        default=Path.home() / ".cardiochat",
        description="Directory holding the persisted session state",
    )
    storage_key: str = Field(
        default="conversations",
        description="Key under which the conversation list is stored",
    )
    max_questions: int = Field(
        default=6,
        ge=0,
        le=50,
        description="Upper bound of the follow-up question counter",
    )
    system_prompt: str = Field(
        default="system/cardiologist.md",
        description="Prompt template used as the system instruction",
    )

    model_config = SettingsConfigDict(
        env_prefix="CONVERSATIONS_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("storage_key")
    @classmethod
    def validate_storage_key(cls, v: str) -> str:
        if not v or "/" in v or "\\" in v:
            raise ValueError("storage_key must be a non-empty name without path separators")
        return v


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Application log level",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    date_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Log timestamp format",
    )
    file: Path | None = Field(
        default=None,
        description="Optional log file path (None = stdout only)",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        extra="ignore",
    )

    def configure(self) -> None:
        """Configure Python logging with these settings."""
        handlers: list[logging.Handler] = [logging.StreamHandler()]

        if self.file:
            self.file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(self.file))

        logging.basicConfig(
            level=getattr(logging, self.level),
            format=self.format,
            datefmt=self.date_format,
            handlers=handlers,
            force=True,  # Override any existing configuration
        )
        # httpx logs full request URLs at INFO, and those carry the API key.
        logging.getLogger("httpx").setLevel(logging.WARNING)


class Settings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    Settings are nested by domain (gemini, conversations, logging).

    Environment Variables:
        ENVIRONMENT: Deployment environment (development, staging, production)
        APP_NAME: Application name for logging
        DEBUG: Enable debug mode
        API_HOST: API server host
        API_PORT: API server port
        CORS_ORIGINS: Comma separated list of allowed origins
        GEMINI_*: Completion service configuration (see GeminiSettings)
        CONVERSATIONS_*: Persistence configuration (see ConversationSettings)
        LOG_*: Logging configuration (see LoggingSettings)

    Example:
        >>> settings = get_settings()
        >>> settings.gemini.model
        'gemini-2.0-flash'
        >>> settings.conversations.max_questions
        6
    """

    # Application settings
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    app_name: str = Field(
        default="CardioChat",
        description="Application name",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    api_host: str = Field(
        default="127.0.0.1",
        description="API server host",
    )
    api_port: int = Field(
        default=8000,
        gt=0,
        le=65535,
        description="API server port",
    )
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:8081",
        description="Comma separated origins allowed by CORS",
    )

    # Nested settings
    gemini: GeminiSettings = Field(default_factory=GeminiSettings)
    conversations: ConversationSettings = Field(default_factory=ConversationSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def model_post_init(self, __context) -> None:
        """Configure logging and log the loaded configuration."""
        self.logging.configure()
        logger = logging.getLogger(__name__)
        logger.info(
            f"Settings loaded for {self.app_name} ({self.environment})",
            extra={
                "environment": self.environment,
                "debug": self.debug,
                "gemini_model": self.gemini.model,
                "storage_dir": str(self.conversations.storage_dir),
            },
        )


_DOTENV_PATH = Path(__file__).resolve().parents[1] / ".env"


def _apply_dotenv_precedence() -> None:
    env_source = os.getenv("CARDIOCHAT_ENV_SOURCE", "environment").lower()
    if env_source not in {"dotenv", "envfile", "file"}:
        return
    if _DOTENV_PATH.exists():
        load_dotenv(_DOTENV_PATH, override=True)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses functools.lru_cache to ensure settings are loaded only once.

    Returns:
        Settings: Singleton settings instance
    """
    _apply_dotenv_precedence()
    return Settings()


def clear_settings_cache() -> None:
    """
    Clear the settings cache.

    Useful for testing when you need to reload settings with different
    environment variables.
    """
    get_settings.cache_clear()
