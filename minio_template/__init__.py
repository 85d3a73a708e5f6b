"""Synchronous and asynchronous operation templates over a MinIO/S3 store."""

from minio_template.core.config import StorageSettings, get_settings
from minio_template.storage import (
    AsyncMinioStorage,
    MinioStorage,
    StorageError,
)
from minio_template.storage.factory import build_templates

__all__ = [
    "AsyncMinioStorage",
    "MinioStorage",
    "StorageError",
    "StorageSettings",
    "build_templates",
    "get_settings",
]
