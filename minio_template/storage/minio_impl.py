"""MinIO-backed blocking implementation of the storage operations."""

from __future__ import annotations

import logging
from typing import Any, BinaryIO, Callable, Sequence, TypeVar

from minio import Minio

from minio_template.core.config import StorageSettings
from minio_template.storage.contracts import (
    ConfigurationError,
    IncompleteTransferError,
    StorageError,
    StorageOperations,
    wrap_error,
)
from minio_template.storage.links import build_link
from minio_template.storage.models import Bucket, ObjectInfo, ObjectItem, WriteResult
from minio_template.storage.requests import (
    BucketRequest,
    ComposeRequest,
    ListObjectsRequest,
    ObjectRequest,
    PutObjectRequest,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CountingReader:
    """File-like wrapper that records how many bytes the client pulled."""

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self.bytes_read = 0
        self.exhausted = False

    def read(self, size: int = -1) -> bytes:
        data = self._stream.read(size)
        self.bytes_read += len(data)
        if not data and size != 0:
            self.exhausted = True
        return data


def resolve_bucket(op: str, bucket_name: str | None, settings: StorageSettings, key: str | None = None) -> str:
    """Return ``bucket_name``, or the configured default bucket when it is ``None``."""
    bucket = bucket_name if bucket_name is not None else settings.BUCKET_NAME
    if bucket is None:
        raise ConfigurationError(op, None, key, "no bucket given and no default bucket configured")
    return bucket


def incomplete_transfer(request: PutObjectRequest, reader: CountingReader) -> IncompleteTransferError | None:
    """Return an error if the stream ran dry before the declared size."""
    if request.size >= 0 and reader.exhausted and reader.bytes_read < request.size:
        return IncompleteTransferError(
            "upload",
            request.bucket,
            request.key,
            f"stream ended after {reader.bytes_read} of {request.size} bytes",
        )
    return None


def put_object(client: Minio, request: PutObjectRequest) -> WriteResult:
    """Run one multipart put, telling a short stream apart from store failures."""
    reader = CountingReader(request.stream)
    try:
        result = client.put_object(
            bucket_name=request.bucket,
            object_name=request.key,
            data=reader,
            length=request.size,
            content_type=request.content_type,
            part_size=request.part_size,
        )
    except Exception as exc:
        short = incomplete_transfer(request, reader)
        if short is not None:
            raise short from exc
        raise
    return WriteResult.from_minio(result)


class MinioStorage(StorageOperations):
    """Blocking operation template backed by the MinIO SDK.

    Every call runs on the caller's thread. The client handle and settings
    are shared read-only and may be used from any number of threads.
    """

    def __init__(self, client: Minio, settings: StorageSettings):
        self._client = client
        self._settings = settings

    def _call(self, op: str, bucket: str | None, key: str | None, fn: Callable[[], T]) -> T:
        try:
            return fn()
        except StorageError as exc:
            logger.warning("%s", exc)
            raise
        except Exception as exc:
            err = wrap_error(op, bucket, key, exc)
            logger.warning("%s", err)
            raise err from exc

    # -------
    # Buckets
    # -------
    def create_bucket(self, bucket_name: str | None = None) -> None:
        req = BucketRequest("create_bucket", resolve_bucket("create_bucket", bucket_name, self._settings))
        self._call(req.op, req.bucket, None, lambda: self._client.make_bucket(req.bucket))
        logger.info("Created bucket %s", req.bucket)

    def list_buckets(self) -> list[Bucket]:
        buckets = self._call("list_buckets", None, None, self._client.list_buckets)
        logger.debug("Listed %d buckets", len(buckets))
        return [Bucket.from_minio(b) for b in buckets]

    def bucket_exists(self, bucket_name: str | None = None) -> bool:
        req = BucketRequest("bucket_exists", resolve_bucket("bucket_exists", bucket_name, self._settings))
        exists = bool(self._call(req.op, req.bucket, None, lambda: self._client.bucket_exists(req.bucket)))
        logger.debug("Bucket %s exists=%s", req.bucket, exists)
        return exists

    def delete_bucket(self, bucket_name: str | None = None) -> None:
        req = BucketRequest("delete_bucket", resolve_bucket("delete_bucket", bucket_name, self._settings))
        self._call(req.op, req.bucket, None, lambda: self._client.remove_bucket(req.bucket))
        logger.info("Deleted bucket %s", req.bucket)

    # -------
    # Uploads
    # -------
    def upload_file(
        self,
        object_name: str,
        stream: BinaryIO,
        size: int | None,
        content_type: str | None = None,
        *,
        bucket_name: str | None = None,
    ) -> str:
        """Upload ``size`` bytes from ``stream`` and return the public link.

        Without ``bucket_name`` the configured default bucket is used. Pass
        ``-1`` as ``size`` when the length is not known up front.
        """
        try:
            bucket = resolve_bucket("upload", bucket_name, self._settings, object_name)
        except ConfigurationError:
            stream.close()
            raise
        return self.upload_file_with_part(bucket, object_name, stream, size, content_type)

    def upload_file_with_part(
        self,
        bucket_name: str,
        object_name: str,
        stream: BinaryIO,
        size: int | None,
        content_type: str | None = None,
    ) -> str:
        """Multipart upload using the configured part size.

        The stream is always closed before returning or raising.
        """
        try:
            req = PutObjectRequest(
                bucket=bucket_name,
                key=object_name,
                stream=stream,
                size=size,
                part_size=self._settings.PART_SIZE,
                content_type=content_type or "",
            )
            result = self._call("upload", bucket_name, object_name, lambda: put_object(self._client, req))
        finally:
            stream.close()
        logger.info("Uploaded %s/%s (%d bytes, etag=%s)", result.bucket, result.key, req.size, result.etag)
        return build_link(self._settings.PREFIX_LINK, bucket_name, object_name)

    # -------
    # Queries
    # -------
    def get_file_info(self, object_name: str, *, bucket_name: str | None = None) -> ObjectInfo:
        req = ObjectRequest(
            "get_file_info", resolve_bucket("get_file_info", bucket_name, self._settings, object_name), object_name
        )
        stat = self._call(req.op, req.bucket, req.key, lambda: self._client.stat_object(req.bucket, req.key))
        logger.debug("Stat %s/%s", req.bucket, req.key)
        return ObjectInfo.from_minio(stat)

    def list_objects_by_prefix(
        self,
        prefix: str = "",
        recursive: bool = False,
        *,
        bucket_name: str | None = None,
    ) -> list[ObjectItem]:
        """Drain the store's paginated listing into a list, in store order."""
        req = ListObjectsRequest(
            bucket=resolve_bucket("list_objects", bucket_name, self._settings, prefix),
            prefix=prefix,
            recursive=recursive,
        )

        def _drain() -> list[ObjectItem]:
            objects = self._client.list_objects(req.bucket, prefix=req.prefix or None, recursive=req.recursive)
            return [ObjectItem.from_minio(obj) for obj in objects]

        items = self._call("list_objects", req.bucket, req.prefix, _drain)
        logger.debug("Listed %d objects in %s under %r", len(items), req.bucket, req.prefix)
        return items

    # ---------------------
    # Retrieval and removal
    # ---------------------
    def get_object(self, object_name: str, *, bucket_name: str | None = None) -> Any:
        """Return the object body as an unread stream.

        The caller must ``close()`` and ``release_conn()`` the response.
        """
        req = ObjectRequest(
            "get_object", resolve_bucket("get_object", bucket_name, self._settings, object_name), object_name
        )
        response = self._call(req.op, req.bucket, req.key, lambda: self._client.get_object(req.bucket, req.key))
        logger.debug("Opened %s/%s for reading", req.bucket, req.key)
        return response

    def remove_object(self, object_name: str, *, bucket_name: str | None = None) -> None:
        req = ObjectRequest(
            "remove_object", resolve_bucket("remove_object", bucket_name, self._settings, object_name), object_name
        )
        self._call(req.op, req.bucket, req.key, lambda: self._client.remove_object(req.bucket, req.key))
        logger.info("Removed %s/%s", req.bucket, req.key)

    # -------
    # Compose
    # -------
    def compose_object(
        self,
        chunk_names: Sequence[str],
        target_object_name: str,
        *,
        bucket_name: str | None = None,
    ) -> WriteResult:
        """Concatenate ``chunk_names`` in order into ``target_object_name``.

        Source chunks are left in place.
        """
        req = ComposeRequest.of(
            resolve_bucket("compose", bucket_name, self._settings, target_object_name),
            chunk_names,
            target_object_name,
        )
        result = self._call(
            "compose",
            req.bucket,
            req.target,
            lambda: self._client.compose_object(req.bucket, req.target, req.sources()),
        )
        logger.info("Composed %d chunks into %s/%s", len(req.chunks), req.bucket, req.target)
        return WriteResult.from_minio(result)


__all__ = ["MinioStorage", "CountingReader", "incomplete_transfer", "put_object", "resolve_bucket"]
