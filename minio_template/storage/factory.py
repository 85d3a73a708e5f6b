"""Factory for building storage templates from configuration."""

from __future__ import annotations

from concurrent.futures import Executor
from typing import NamedTuple
from urllib.parse import urlparse

from minio import Minio

from minio_template.core.config import StorageSettings, get_settings
from minio_template.storage.async_client import AsyncMinioClient
from minio_template.storage.async_impl import AsyncMinioStorage
from minio_template.storage.minio_impl import MinioStorage


class StorageTemplates(NamedTuple):
    """Both templates, built around one shared client handle."""

    sync: MinioStorage
    async_: AsyncMinioStorage | None


def normalize_endpoint(endpoint: str) -> tuple[str, bool]:
    """Extract host:port from endpoint URL and determine if secure (https).

    Returns:
        Tuple of (host:port, secure_flag)
    """
    parsed = urlparse(endpoint)
    secure = parsed.scheme == "https"
    host = parsed.netloc or parsed.path.rstrip("/")
    return host, secure


def build_client(settings: StorageSettings) -> Minio:
    """Create the authenticated MinIO client handle."""
    host, secure = normalize_endpoint(settings.HOST)
    return Minio(
        host,
        access_key=settings.ACCESS_KEY,
        secret_key=settings.SECRET_KEY,
        secure=secure,
        region=settings.REGION,
    )


def build_storage(settings: StorageSettings | None = None, client: Minio | None = None) -> MinioStorage:
    settings = settings or get_settings()
    return MinioStorage(client or build_client(settings), settings)


def build_async_client(
    settings: StorageSettings,
    client: Minio | None = None,
    executor: Executor | None = None,
) -> AsyncMinioClient:
    """Wrap a blocking handle in the awaitable client that owns the worker pool."""
    return AsyncMinioClient(
        client or build_client(settings),
        executor=executor,
        max_workers=settings.ASYNC_WORKERS,
    )


def build_async_storage(
    settings: StorageSettings | None = None,
    client: Minio | None = None,
    executor: Executor | None = None,
) -> AsyncMinioStorage | None:
    """Build the async template, or ``None`` when ``ASYNC_ENABLE`` is off."""
    settings = settings or get_settings()
    if not settings.ASYNC_ENABLE:
        return None
    return AsyncMinioStorage(build_async_client(settings, client, executor), settings)


def build_templates(settings: StorageSettings | None = None, executor: Executor | None = None) -> StorageTemplates:
    """Build the sync template and, if enabled, the async one over one client.

    Buckets are not created here; call ``create_bucket`` explicitly.
    """
    settings = settings or get_settings()
    client = build_client(settings)
    return StorageTemplates(
        sync=build_storage(settings, client),
        async_=build_async_storage(settings, client, executor),
    )


__all__ = [
    "StorageTemplates",
    "normalize_endpoint",
    "build_client",
    "build_async_client",
    "build_storage",
    "build_async_storage",
    "build_templates",
]
