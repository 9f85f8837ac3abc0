"""
Application configuration models and helpers.

Centralizes settings management so the Lambda entrypoint and the operator
scripts share a consistent configuration surface.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STATUS_TABLE_NAME = "transcribe-sentiment-poc-table"


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class AWSSettings(BaseSettings):
    """Settings for the AWS services the pipeline reads from and writes to."""

    model_config = SettingsConfigDict(populate_by_name=True)

    region_name: str = Field("us-east-1", validation_alias="AWS_REGION")
    endpoint_url: Optional[str] = Field(
        None,
        validation_alias="AWS_ENDPOINT_URL",
        description="Optional endpoint override for local AWS stacks.",
    )
    status_table_name: str = Field(
        DEFAULT_STATUS_TABLE_NAME,
        validation_alias="TABLE_NAME",
        description="DynamoDB table holding one status row per job.",
    )


class PipelineSettings(BaseSettings):
    """Where and how the CSV artifacts are written."""

    model_config = SettingsConfigDict(populate_by_name=True)

    output_prefix: str = Field("analytics", validation_alias="ANALYTICS_OUTPUT_PREFIX")
    output_bucket: Optional[str] = Field(
        None,
        validation_alias="ANALYTICS_OUTPUT_BUCKET",
        description=(
            "Bucket receiving CSV artifacts. Defaults to the bucket of the "
            "notification when omitted."
        ),
    )
    temp_dir: Optional[str] = Field(
        None,
        validation_alias="ANALYTICS_TMP_DIR",
        description="Scratch directory for downloaded archives.",
    )

    @field_validator("output_prefix")
    @classmethod
    def _strip_slashes(cls, value: str) -> str:
        return value.strip("/")


class AppSettings(BaseSettings):
    """Root settings object for the results pipeline."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    aws: AWSSettings = Field(default_factory=AWSSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        """Reject level names the logging module would not understand."""
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level {value!r}")
        return level


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()


__all__ = [
    "AppSettings",
    "AWSSettings",
    "DEFAULT_STATUS_TABLE_NAME",
    "PipelineSettings",
    "get_settings",
]
