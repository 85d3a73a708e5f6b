"""Storage package: object storage templates."""

from minio_template.storage.async_client import AsyncMinioClient
from minio_template.storage.async_impl import AsyncMinioStorage
from minio_template.storage.contracts import (
    AlreadyExistsError,
    AsyncStorageOperations,
    ConfigurationError,
    IncompleteTransferError,
    NotEmptyError,
    NotFoundError,
    StorageConnectionError,
    StorageError,
    StorageOperations,
    StoreRejectedError,
)
from minio_template.storage.minio_impl import MinioStorage
from minio_template.storage.models import Bucket, ObjectInfo, ObjectItem, WriteResult

__all__ = [
    "AlreadyExistsError",
    "AsyncMinioClient",
    "AsyncMinioStorage",
    "AsyncStorageOperations",
    "Bucket",
    "ConfigurationError",
    "IncompleteTransferError",
    "MinioStorage",
    "NotEmptyError",
    "NotFoundError",
    "ObjectInfo",
    "ObjectItem",
    "StorageConnectionError",
    "StorageError",
    "StorageOperations",
    "StoreRejectedError",
    "WriteResult",
]
