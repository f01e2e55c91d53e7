"""Runtime settings loaded from the environment and ``.env``."""

from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

DEFAULT_MODEL = "google/gemini-2.5-flash"
DEFAULT_MAX_UPLOAD_BYTES = 20 * 1024 * 1024


class Settings(BaseSettings):
    """Application settings.

    Every field can be overridden through an environment variable.  The
    Gemini key is accepted as either ``GEMINI_API_KEY`` or
    ``GOOGLE_API_KEY``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    google_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY", "google_api_key"),
    )
    model: str = Field(default=DEFAULT_MODEL, validation_alias=AliasChoices("HUBSUMMARY_MODEL", "model"))
    temperature: float = Field(
        default=0.9, validation_alias=AliasChoices("HUBSUMMARY_TEMPERATURE", "temperature")
    )

    host: str = Field(default="127.0.0.1", validation_alias=AliasChoices("HOST", "host"))
    port: int = Field(default=3000, validation_alias=AliasChoices("PORT", "port"))
    cors_origins: list[str] = Field(
        default_factory=lambda: ["https://learn.bcit.ca"],
        validation_alias=AliasChoices("HUBSUMMARY_CORS_ORIGINS", "cors_origins"),
    )
    cors_origin_regex: str | None = Field(
        default=r"chrome-extension://.*",
        validation_alias=AliasChoices("HUBSUMMARY_CORS_ORIGIN_REGEX", "cors_origin_regex"),
    )

    max_upload_bytes: int = Field(
        default=DEFAULT_MAX_UPLOAD_BYTES,
        gt=0,
        validation_alias=AliasChoices("HUBSUMMARY_MAX_UPLOAD_BYTES", "max_upload_bytes"),
    )
    request_timeout: float = Field(
        default=120.0,
        gt=0,
        validation_alias=AliasChoices("HUBSUMMARY_REQUEST_TIMEOUT", "request_timeout"),
    )
    server_url: str = Field(
        default="http://localhost:3000",
        validation_alias=AliasChoices("HUBSUMMARY_SERVER_URL", "server_url"),
    )

    log_level: str = Field(default="INFO", validation_alias=AliasChoices("HUBSUMMARY_LOG_LEVEL", "log_level"))
    log_json: bool = Field(default=False, validation_alias=AliasChoices("HUBSUMMARY_LOG_JSON", "log_json"))

    def require_api_key(self) -> str:
        """Return the backend API key or raise :class:`ConfigurationError`."""
        if not self.google_api_key:
            raise ConfigurationError("Missing GEMINI_API_KEY in environment variables")
        return self.google_api_key


settings = Settings()
