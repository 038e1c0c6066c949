"""Runtime settings loaded from the environment.

Settings use the ``OAPI_CODEC_`` prefix, e.g. ``OAPI_CODEC_LOG_LEVEL=DEBUG``.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CodecSettings(BaseSettings):
    """Settings shared by the CLI, the client and the dispatcher."""

    model_config = SettingsConfigDict(
        env_prefix="OAPI_CODEC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Minimum level emitted once logging is set up",
    )
    log_json: bool = Field(
        default=False,
        description="Emit serialized JSON log records instead of console text",
    )
    body_preview_bytes: int = Field(
        default=256,
        ge=0,
        description="Bytes of an undecodable body kept in PayloadDecodeError context",
    )
    request_timeout: float | None = Field(
        default=30.0,
        gt=0,
        description="Default client timeout in seconds; None waits forever",
    )


@lru_cache
def get_settings() -> CodecSettings:
    """Get cached settings instance."""
    return CodecSettings()
