"""Application configuration using Pydantic BaseSettings."""

import logging

import structlog
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_VEO_MODEL = "veo-3.1-generate-preview"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Application Environment
    app_env: str = Field(default="development", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # CORS Configuration
    cors_origins: str = Field(default="http://localhost:5173", alias="CORS_ORIGINS")

    # Server Configuration
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")

    # Gemini API credential. Empty means "no key selected yet"; the key gate
    # reports it and generation is refused until one is selected.
    api_key: str = Field(default="", alias="API_KEY")

    # Veo video generation
    veo_model: str = Field(default=DEFAULT_VEO_MODEL, alias="VEO_MODEL")
    poll_interval_seconds: float = Field(default=5.0, ge=0, alias="POLL_INTERVAL_SECONDS")
    # None keeps the poll loop unbounded
    poll_timeout_seconds: float | None = Field(default=None, alias="POLL_TIMEOUT_SECONDS")

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @model_validator(mode="after")
    def validate_poll_timeout(self) -> "Settings":
        """Reject a poll timeout that could never be reached.

        A timeout shorter than one poll interval would fail every job before the
        first status refresh, which is always a configuration mistake.
        """
        if self.poll_timeout_seconds is None:
            return self

        if self.poll_timeout_seconds <= 0:
            raise ValueError("POLL_TIMEOUT_SECONDS must be positive when set")

        if self.poll_timeout_seconds < self.poll_interval_seconds:
            raise ValueError(
                f"POLL_TIMEOUT_SECONDS ({self.poll_timeout_seconds}) is shorter than "
                f"POLL_INTERVAL_SECONDS ({self.poll_interval_seconds})"
            )

        return self


def configure_logging(settings: Settings) -> None:
    """Configure structlog based on application environment.

    - Production: JSON output for log aggregation
    - Development: Console output for human readability

    Events below ``settings.log_level`` are dropped.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    wrapper_class = structlog.make_filtering_bound_logger(level)

    if settings.app_env == "production":
        # JSON output for production (log aggregation)
        structlog.configure(
            processors=[
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=wrapper_class,
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(),
            cache_logger_on_first_use=True,
        )
    else:
        # Console output for development (human-readable)
        structlog.configure(
            processors=[
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.dev.ConsoleRenderer(),
            ],
            wrapper_class=wrapper_class,
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(),
            cache_logger_on_first_use=True,
        )
