"""Storage interfaces and error types."""

from __future__ import annotations

from typing import Any, AsyncIterator, BinaryIO, Protocol, Sequence, runtime_checkable

from minio.error import S3Error, ServerError
from urllib3.exceptions import HTTPError as TransportError

from minio_template.storage.models import Bucket, ObjectInfo, ObjectItem, WriteResult


class StorageError(Exception):
    """Wraps underlying storage exceptions with operation context."""

    def __init__(
        self,
        op: str,
        bucket: str | None,
        key: str | None,
        message: str,
        *,
        code: str | None = None,
    ):
        self.op = op
        self.bucket = bucket
        self.key = key
        self.message = message
        self.code = code
        super().__init__(self.__str__())

    def __str__(self) -> str:  # pragma: no cover - trivial string formatting
        bucket_repr = self.bucket or "<unknown>"
        key_repr = self.key or "<unknown>"
        return f"{self.op} failed for bucket={bucket_repr} key={key_repr}: {self.message}"


class StorageConnectionError(StorageError):
    """Store unreachable or credentials rejected."""


class NotFoundError(StorageError):
    """Bucket or object does not exist."""


class AlreadyExistsError(StorageError):
    """Bucket name already taken."""


class NotEmptyError(StorageError):
    """Bucket still holds objects."""


class ConfigurationError(StorageError):
    """Part size or another argument is out of bounds."""


class IncompleteTransferError(StorageError):
    """Upload stream ended before the declared size."""


class StoreRejectedError(StorageError):
    """Any other failure reported by the store."""


_CODE_MAP: dict[str, type[StorageError]] = {
    "NoSuchBucket": NotFoundError,
    "NoSuchKey": NotFoundError,
    "NoSuchObject": NotFoundError,
    "ResourceNotFound": NotFoundError,
    "BucketAlreadyOwnedByYou": AlreadyExistsError,
    "BucketAlreadyExists": AlreadyExistsError,
    "BucketNotEmpty": NotEmptyError,
    "AccessDenied": StorageConnectionError,
    "InvalidAccessKeyId": StorageConnectionError,
    "SignatureDoesNotMatch": StorageConnectionError,
    "EntityTooSmall": ConfigurationError,
    "EntityTooLarge": ConfigurationError,
    "InvalidPartSize": ConfigurationError,
}


def wrap_error(op: str, bucket: str | None, key: str | None, exc: Exception) -> StorageError:
    """Translate an SDK or transport exception into the storage taxonomy."""
    if isinstance(exc, StorageError):
        return exc
    if isinstance(exc, S3Error):
        error_cls = _CODE_MAP.get(exc.code or "", StoreRejectedError)
        return error_cls(op, bucket, key, exc.message or str(exc), code=exc.code)
    if isinstance(exc, TransportError):
        return StorageConnectionError(op, bucket, key, str(exc))
    if isinstance(exc, ServerError):
        return StoreRejectedError(op, bucket, key, str(exc))
    if isinstance(exc, ValueError):
        return ConfigurationError(op, bucket, key, str(exc))
    return StoreRejectedError(op, bucket, key, str(exc))


@runtime_checkable
class StorageOperations(Protocol):
    """Blocking operation set."""

    def create_bucket(self, bucket_name: str | None = None) -> None:
        ...

    def list_buckets(self) -> list[Bucket]:
        ...

    def bucket_exists(self, bucket_name: str | None = None) -> bool:
        ...

    def delete_bucket(self, bucket_name: str | None = None) -> None:
        ...

    def upload_file(
        self,
        object_name: str,
        stream: BinaryIO,
        size: int | None,
        content_type: str | None = None,
        *,
        bucket_name: str | None = None,
    ) -> str:
        ...

    def upload_file_with_part(
        self,
        bucket_name: str,
        object_name: str,
        stream: BinaryIO,
        size: int | None,
        content_type: str | None = None,
    ) -> str:
        ...

    def get_file_info(self, object_name: str, *, bucket_name: str | None = None) -> ObjectInfo:
        ...

    def list_objects_by_prefix(
        self,
        prefix: str = "",
        recursive: bool = False,
        *,
        bucket_name: str | None = None,
    ) -> list[ObjectItem]:
        ...

    def get_object(self, object_name: str, *, bucket_name: str | None = None) -> Any:
        ...

    def remove_object(self, object_name: str, *, bucket_name: str | None = None) -> None:
        ...

    def compose_object(
        self,
        chunk_names: Sequence[str],
        target_object_name: str,
        *,
        bucket_name: str | None = None,
    ) -> WriteResult:
        ...


@runtime_checkable
class AsyncStorageOperations(Protocol):
    """Non-blocking operation set; every call returns an awaitable.

    Differs from :class:`StorageOperations` in two places: uploads resolve to
    a :class:`WriteResult` instead of a link and leave the stream open, and
    prefix listing is a lazy ``iter_objects_by_prefix`` async iterator.
    """

    async def create_bucket(self, bucket_name: str | None = None) -> None:
        ...

    async def list_buckets(self) -> list[Bucket]:
        ...

    async def bucket_exists(self, bucket_name: str | None = None) -> bool:
        ...

    async def delete_bucket(self, bucket_name: str | None = None) -> None:
        ...

    async def upload_file(
        self,
        object_name: str,
        stream: BinaryIO,
        size: int | None,
        content_type: str | None = None,
        *,
        bucket_name: str | None = None,
    ) -> WriteResult:
        ...

    async def upload_file_with_part(
        self,
        bucket_name: str,
        object_name: str,
        stream: BinaryIO,
        size: int | None,
        content_type: str | None = None,
    ) -> WriteResult:
        ...

    async def get_file_info(
        self, object_name: str, *, bucket_name: str | None = None
    ) -> ObjectInfo:
        ...

    def iter_objects_by_prefix(
        self,
        prefix: str = "",
        recursive: bool = False,
        *,
        bucket_name: str | None = None,
    ) -> AsyncIterator[ObjectItem]:
        ...

    async def get_object(self, object_name: str, *, bucket_name: str | None = None) -> Any:
        ...

    async def remove_object(self, object_name: str, *, bucket_name: str | None = None) -> None:
        ...

    async def compose_object(
        self,
        chunk_names: Sequence[str],
        target_object_name: str,
        *,
        bucket_name: str | None = None,
    ) -> WriteResult:
        ...


__all__ = [
    "StorageError",
    "StorageConnectionError",
    "NotFoundError",
    "AlreadyExistsError",
    "NotEmptyError",
    "ConfigurationError",
    "IncompleteTransferError",
    "StoreRejectedError",
    "StorageOperations",
    "AsyncStorageOperations",
    "wrap_error",
]
