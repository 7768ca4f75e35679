"""Central configuration for the committee matching service.

This module uses Pydantic Settings for validation and env management.
"""
from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class OpenAISettings(BaseSettings):
    """Completion service configuration."""
    model_config = SettingsConfigDict(
        env_prefix="OPENAI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key: SecretStr | None = Field(default=None, description="OpenAI API key")
    model: str = Field(default="gpt-4.1-mini", description="Model with structured output support")
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    base_url: str | None = Field(default=None, description="Override for proxies or compatible APIs")

    @field_validator("api_key", mode="before")
    @classmethod
    def blank_key_is_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class CORSSettings(BaseSettings):
    """CORS headers sent with every response."""
    model_config = SettingsConfigDict(env_prefix="CORS_", extra="ignore")

    allow_origin: str = Field(default="*")
    allow_headers: str = Field(default="Content-Type")
    allow_methods: str = Field(default="POST, OPTIONS")


class LoggingSettings(BaseSettings):
    """Logging configuration."""
    model_config = SettingsConfigDict(env_prefix="LOG_", extra="ignore")

    level: str = Field(default="INFO")
    format: str = Field(default="json")
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Environment = Field(default=Environment.DEVELOPMENT)
    debug: bool = Field(default=False)
    app_name: str = Field(default="Committee Match")
    version: str = Field(default="0.1.0")

    # Sub-configs
    openai: OpenAISettings = Field(default_factory=OpenAISettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("openai", mode="before")
    @classmethod
    def validate_openai(cls, v):
        if isinstance(v, dict):
            return OpenAISettings(**v)
        return v if isinstance(v, OpenAISettings) else OpenAISettings()

    @property
    def openai_api_key(self) -> str | None:
        """Plain-text credential, or None when unset."""
        if self.openai.api_key is None:
            return None
        return self.openai.api_key.get_secret_value()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()


settings = get_settings()
