"""
Configuration — typed, validated settings loaded from environment/.env.

Uses pydantic-settings to:
  - Load from environment variables (12-factor app)
  - Fall back to a .env file in the working directory
  - Validate types and constraints at startup

Every setting has a default, so the service starts with no configuration:
it lists ./certs, renders ./templates/certs.html and listens on 0.0.0.0:2002
with DEBUG logging.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class AppSettings(BaseSettings):
    """
    Root application settings.

    Load order (highest priority first):
      1. Environment variables (CERTS_DIR, PORT, LOG_LEVEL, ...)
      2. .env file
      3. Default values

    Relative directories resolve against the process working directory.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    certs_dir: Path = Field(default=Path("certs"), description="Directory of PEM certificate files")
    templates_dir: Path = Field(default=Path("templates"), description="Jinja2 template directory")
    template_name: str = Field(default="certs.html", description="Listing page template")

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=2002, ge=1, le=65535, description="Bind port")

    log_level: str = Field(default="DEBUG", description="Log level for the service and uvicorn")
    strict_parsing: bool = Field(
        default=False,
        description="Fail the whole listing on the first unreadable certificate",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Accept standard level names in any case; store them upper-case."""
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {', '.join(_LOG_LEVELS)}, got {value!r}"
            )
        return level
