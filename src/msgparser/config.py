"""Parser configuration.

Settings are read from environment variables with the ``MSGPARSER_``
prefix (e.g. ``MSGPARSER_MISSING_STREAM_POLICY=skip``) or from a ``.env``
file in the working directory.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Options controlling how property streams are decoded."""

    model_config = SettingsConfigDict(
        env_prefix="MSGPARSER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    missing_stream_policy: Literal["raise", "skip"] = Field(
        default="raise",
        description=(
            "What to do when a variable-length value's stream is absent: "
            "'raise' aborts the parse, 'skip' logs and drops that property."
        ),
    )
    max_nesting_depth: int = Field(
        default=32,
        ge=0,
        description="Maximum depth of embedded messages inside attachments",
    )
    fallback_encoding: str = Field(
        default="cp1252",
        description="Codec used for 8-bit strings when no code page decodes them",
    )
    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = Field(
        default="INFO",
        description="Logging level for the command line tool",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_case_level(cls, value):
        if isinstance(value, str):
            return value.upper()
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached parser settings.

    Returns:
        Settings: Parser settings instance.
    """
    return Settings()
