"""
NASA Explorer Backend — Application Configuration
==================================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; checked again during app startup.
"""

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import List


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults except the NASA API key, which
    must be supplied for the APOD endpoint to work. The image library
    does not require a key.
    """

    # ── NASA Upstream ─────────────────────────────────────────────────────
    # What: Credential for api.nasa.gov (APOD). Never sent to clients.
    # How to obtain: https://api.nasa.gov/ (DEMO_KEY works with a tiny quota)
    nasa_api_key: str = Field(
        default="",
        description="api.nasa.gov key used for the APOD endpoint",
    )

    nasa_api_base: str = Field(default="https://api.nasa.gov")
    nasa_images_api_base: str = Field(default="https://images-api.nasa.gov")

    # What: Seconds before an upstream call is abandoned
    upstream_timeout: float = Field(default=30.0, gt=0, le=120)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Retry Configuration ───────────────────────────────────────────────
    # What: Tenacity settings for upstream transport failures only.
    # HTTP error statuses from NASA are never retried.
    retry_max_attempts: int = Field(default=3, ge=1, le=10)
    retry_min_wait: float = Field(default=1, ge=0, le=30)
    retry_max_wait: float = Field(default=8, ge=0, le=120)

    # ── Rate Limiting ─────────────────────────────────────────────────────
    # What: Per-IP sliding window on /api/* so one client cannot burn the
    # shared NASA quota (1000 req/hour for a registered key).
    rate_limit_requests: int = Field(default=300, ge=1, le=10000)
    rate_limit_window: int = Field(default=3600, ge=1, le=86400)  # seconds

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @property
    def has_nasa_api_key(self) -> bool:
        return bool(self.nasa_api_key) and self.nasa_api_key != "your_nasa_api_key_here"

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that critical settings are configured.
        When:  Called during app startup (lifespan).
        How:   Collects problems and raises one ValueError listing them.
        """
        errors = []
        if not self.has_nasa_api_key:
            errors.append(
                "NASA_API_KEY is not set. "
                "Get a free key at https://api.nasa.gov/"
            )
        if self.retry_min_wait > self.retry_max_wait:
            errors.append("RETRY_MIN_WAIT must not exceed RETRY_MAX_WAIT.")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance, imported throughout the application
settings = Settings()
