"""Tool settings loaded from ENVSURE_* environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class EnvsureSettings(BaseSettings):
    """Defaults for the command line, overridable from the environment.

    Only the process environment is consulted. The .env file being checked
    is data, never configuration.
    """

    env_file: str = Field(default=".env")
    example_file: str = Field(default=".env.example")
    strict: bool = Field(default=False)
    color: bool = Field(default=True)
    log_level: LogLevel = Field(default="WARNING")

    model_config = SettingsConfigDict(
        env_prefix="ENVSURE_",
        case_sensitive=False,
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value


def get_settings() -> EnvsureSettings:
    """Return settings read from the current environment.

    Raises:
        pydantic.ValidationError: an ENVSURE_* variable holds an invalid value.
    """
    return EnvsureSettings()
