"""
Configuration — typed, validated settings for the command-line wrapper.

Uses pydantic-settings to:
  - Load from environment variables prefixed HCERT_ (HCERT_LOG_LEVEL, ...)
  - Fall back to a .env file in the working directory
  - Validate types and choices at startup

The decoding core takes no configuration at all; these settings only
shape how the CLI logs and prints.
"""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Root application settings.

    Load order (highest priority first):
      1. Environment variables
      2. .env file
      3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="HCERT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="WARNING", description="Minimum level for structlog output on stderr")
    log_json: bool = Field(default=False, description="Render log lines as JSON instead of console text")
    output_format: Literal["pretty", "json"] = Field(
        default="pretty",
        description="How the decoded certificate is printed on stdout",
    )
    include_claims: bool = Field(
        default=False,
        description="Print issuer, issued-at and expiry alongside the certificate",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Reject names the logging module does not know."""
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level
