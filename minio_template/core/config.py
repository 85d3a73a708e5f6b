"""Storage configuration."""

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MIN_PART_SIZE = 5 * 1024 * 1024
MAX_PART_SIZE = 5 * 1024 * 1024 * 1024


class StorageSettings(BaseSettings):
    """Object store settings loaded from ``MINIO_*`` environment variables."""

    # Connection
    HOST: str
    ACCESS_KEY: str
    SECRET_KEY: str
    REGION: Optional[str] = None

    # Defaults applied by the templates
    BUCKET_NAME: Optional[str] = None
    PART_SIZE: int = MIN_PART_SIZE  # checked against the store bounds per upload
    PREFIX_LINK: str = ""

    # Async template switch and its client worker pool size
    ASYNC_ENABLE: bool = False
    ASYNC_WORKERS: Optional[int] = None

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="MINIO_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @field_validator("PREFIX_LINK")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


@lru_cache
def get_settings() -> StorageSettings:
    """Return the process-wide settings instance."""
    return StorageSettings()
