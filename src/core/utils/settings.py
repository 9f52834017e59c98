"""
Runtime configuration read from the Lambda environment.

Values are validated once per cold start. Required settings (bucket and
table names) are checked by the adapters that need them so that a function
only fails for the configuration it actually uses.
"""

import os
from functools import lru_cache

from pydantic import BaseModel, Field, field_validator

from core.utils.constants import (
    CORS_ORIGIN,
    DEFAULT_AWS_REGION,
    DEFAULT_QUERY_BATCH_SIZE,
    DEFAULT_REPOSITORY_PAGE_SIZE,
    ENV_AWS_CONNECT_TIMEOUT_SECONDS,
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_MAX_ATTEMPTS,
    ENV_AWS_READ_TIMEOUT_SECONDS,
    ENV_AWS_REGION,
    ENV_CORS_ALLOWED_ORIGIN,
    ENV_IMAGE_METADATA_TABLE_NAME,
    ENV_IMAGE_PUBLIC_BASE_URL,
    ENV_IMAGE_S3_BUCKET_NAME,
    ENV_MAX_PAGE_SIZE,
    ENV_QUERY_BATCH_SIZE,
    ENV_UPLOAD_ITEM_TIMEOUT_SECONDS,
    ENV_UPLOAD_WORKERS,
    REPOSITORY_PAGE_SIZE_HARD_CAP,
)


class Settings(BaseModel):
    """Validated service configuration."""

    bucket_name: str | None = None
    table_name: str | None = None
    endpoint_url: str | None = None
    region: str = DEFAULT_AWS_REGION
    public_base_url: str | None = None

    max_page_size: int = Field(DEFAULT_REPOSITORY_PAGE_SIZE, ge=1)
    query_batch_size: int = Field(DEFAULT_QUERY_BATCH_SIZE, ge=1, le=1000)

    upload_workers: int = Field(4, ge=1, le=10)
    upload_item_timeout_seconds: float = Field(20.0, gt=0)

    connect_timeout_seconds: float = Field(5.0, gt=0)
    read_timeout_seconds: float = Field(10.0, gt=0)
    max_attempts: int = Field(3, ge=1, le=10)

    cors_origin: str = CORS_ORIGIN

    @field_validator("max_page_size")
    @classmethod
    def clamp_max_page_size(cls, value: int) -> int:
        """Never exceed the hard cap, whatever the environment says."""
        return min(value, REPOSITORY_PAGE_SIZE_HARD_CAP)

    @field_validator("public_base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str | None) -> str | None:
        return value.rstrip("/") if value else None

    @classmethod
    def from_env(cls) -> "Settings":
        env = os.environ
        raw: dict[str, str | None] = {
            "bucket_name": env.get(ENV_IMAGE_S3_BUCKET_NAME),
            "table_name": env.get(ENV_IMAGE_METADATA_TABLE_NAME),
            "endpoint_url": env.get(ENV_AWS_ENDPOINT_URL),
            "region": env.get(ENV_AWS_REGION),
            "public_base_url": env.get(ENV_IMAGE_PUBLIC_BASE_URL),
            "max_page_size": env.get(ENV_MAX_PAGE_SIZE),
            "query_batch_size": env.get(ENV_QUERY_BATCH_SIZE),
            "upload_workers": env.get(ENV_UPLOAD_WORKERS),
            "upload_item_timeout_seconds": env.get(ENV_UPLOAD_ITEM_TIMEOUT_SECONDS),
            "connect_timeout_seconds": env.get(ENV_AWS_CONNECT_TIMEOUT_SECONDS),
            "read_timeout_seconds": env.get(ENV_AWS_READ_TIMEOUT_SECONDS),
            "max_attempts": env.get(ENV_AWS_MAX_ATTEMPTS),
            "cors_origin": env.get(ENV_CORS_ALLOWED_ORIGIN),
        }

        # Unset variables fall back to model defaults
        return cls.model_validate({k: v for k, v in raw.items() if v})


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return settings for this execution environment."""
    return Settings.from_env()
