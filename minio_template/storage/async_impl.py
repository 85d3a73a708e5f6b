"""Non-blocking implementation of the storage operations.

Every call awaits the :class:`AsyncMinioClient` capability; the awaitable is
the completion handle.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, AsyncIterator, BinaryIO, Iterator, Sequence

from minio_template.core.config import StorageSettings
from minio_template.storage.async_client import AsyncMinioClient
from minio_template.storage.contracts import AsyncStorageOperations, StorageError, wrap_error
from minio_template.storage.minio_impl import CountingReader, incomplete_transfer, resolve_bucket
from minio_template.storage.models import Bucket, ObjectInfo, ObjectItem, WriteResult
from minio_template.storage.requests import (
    BucketRequest,
    ComposeRequest,
    ListObjectsRequest,
    ObjectRequest,
    PutObjectRequest,
)

logger = logging.getLogger(__name__)


@contextmanager
def _translated(op: str, bucket: str | None, key: str | None) -> Iterator[None]:
    try:
        yield
    except StorageError as exc:
        logger.warning("%s", exc)
        raise
    except Exception as exc:
        err = wrap_error(op, bucket, key, exc)
        logger.warning("%s", err)
        raise err from exc


class AsyncMinioStorage(AsyncStorageOperations):
    """Awaitable operation template sharing the blocking template's semantics.

    Capability differences from :class:`MinioStorage`:

    - uploads resolve to a :class:`WriteResult`, not a link, and do not close
      the input stream;
    - there is no ``list_objects_by_prefix``; ``iter_objects_by_prefix``
      yields entries lazily instead.
    """

    def __init__(self, client: AsyncMinioClient, settings: StorageSettings):
        self._client = client
        self._settings = settings

    async def aclose(self) -> None:
        """Release the client's worker pool."""
        await self._client.close()

    # -------
    # Buckets
    # -------
    async def create_bucket(self, bucket_name: str | None = None) -> None:
        req = BucketRequest("create_bucket", resolve_bucket("create_bucket", bucket_name, self._settings))
        with _translated(req.op, req.bucket, None):
            await self._client.make_bucket(req.bucket)
        logger.info("Created bucket %s", req.bucket)

    async def list_buckets(self) -> list[Bucket]:
        with _translated("list_buckets", None, None):
            buckets = await self._client.list_buckets()
        logger.debug("Listed %d buckets", len(buckets))
        return [Bucket.from_minio(b) for b in buckets]

    async def bucket_exists(self, bucket_name: str | None = None) -> bool:
        req = BucketRequest("bucket_exists", resolve_bucket("bucket_exists", bucket_name, self._settings))
        with _translated(req.op, req.bucket, None):
            exists = bool(await self._client.bucket_exists(req.bucket))
        logger.debug("Bucket %s exists=%s", req.bucket, exists)
        return exists

    async def delete_bucket(self, bucket_name: str | None = None) -> None:
        req = BucketRequest("delete_bucket", resolve_bucket("delete_bucket", bucket_name, self._settings))
        with _translated(req.op, req.bucket, None):
            await self._client.remove_bucket(req.bucket)
        logger.info("Deleted bucket %s", req.bucket)

    # -------
    # Uploads
    # -------
    async def upload_file(
        self,
        object_name: str,
        stream: BinaryIO,
        size: int | None,
        content_type: str | None = None,
        *,
        bucket_name: str | None = None,
    ) -> WriteResult:
        bucket = resolve_bucket("upload", bucket_name, self._settings, object_name)
        return await self.upload_file_with_part(bucket, object_name, stream, size, content_type)

    async def upload_file_with_part(
        self,
        bucket_name: str,
        object_name: str,
        stream: BinaryIO,
        size: int | None,
        content_type: str | None = None,
    ) -> WriteResult:
        """Multipart upload; closing ``stream`` is left to the caller."""
        req = PutObjectRequest(
            bucket=bucket_name,
            key=object_name,
            stream=stream,
            size=size,
            part_size=self._settings.PART_SIZE,
            content_type=content_type or "",
        )
        reader = CountingReader(req.stream)
        with _translated("upload", req.bucket, req.key):
            try:
                raw = await self._client.put_object(
                    bucket_name=req.bucket,
                    object_name=req.key,
                    data=reader,
                    length=req.size,
                    content_type=req.content_type,
                    part_size=req.part_size,
                )
            except Exception as exc:
                short = incomplete_transfer(req, reader)
                if short is not None:
                    raise short from exc
                raise
        result = WriteResult.from_minio(raw)
        logger.info("Uploaded %s/%s (%d bytes, etag=%s)", result.bucket, result.key, req.size, result.etag)
        return result

    # -------
    # Queries
    # -------
    async def get_file_info(self, object_name: str, *, bucket_name: str | None = None) -> ObjectInfo:
        req = ObjectRequest(
            "get_file_info", resolve_bucket("get_file_info", bucket_name, self._settings, object_name), object_name
        )
        with _translated(req.op, req.bucket, req.key):
            stat = await self._client.stat_object(req.bucket, req.key)
        logger.debug("Stat %s/%s", req.bucket, req.key)
        return ObjectInfo.from_minio(stat)

    async def iter_objects_by_prefix(
        self,
        prefix: str = "",
        recursive: bool = False,
        *,
        bucket_name: str | None = None,
    ) -> AsyncIterator[ObjectItem]:
        """Yield listing entries in store order as the client produces them."""
        req = ListObjectsRequest(
            bucket=resolve_bucket("list_objects", bucket_name, self._settings, prefix),
            prefix=prefix,
            recursive=recursive,
        )
        objects = self._client.list_objects(req.bucket, prefix=req.prefix or None, recursive=req.recursive)
        with _translated("list_objects", req.bucket, req.prefix):
            async for obj in objects:
                yield ObjectItem.from_minio(obj)

    # ---------------------
    # Retrieval and removal
    # ---------------------
    async def get_object(self, object_name: str, *, bucket_name: str | None = None) -> Any:
        """Resolve to an unread response stream the caller must close."""
        req = ObjectRequest(
            "get_object", resolve_bucket("get_object", bucket_name, self._settings, object_name), object_name
        )
        with _translated(req.op, req.bucket, req.key):
            response = await self._client.get_object(req.bucket, req.key)
        logger.debug("Opened %s/%s for reading", req.bucket, req.key)
        return response

    async def remove_object(self, object_name: str, *, bucket_name: str | None = None) -> None:
        req = ObjectRequest(
            "remove_object", resolve_bucket("remove_object", bucket_name, self._settings, object_name), object_name
        )
        with _translated(req.op, req.bucket, req.key):
            await self._client.remove_object(req.bucket, req.key)
        logger.info("Removed %s/%s", req.bucket, req.key)

    # -------
    # Compose
    # -------
    async def compose_object(
        self,
        chunk_names: Sequence[str],
        target_object_name: str,
        *,
        bucket_name: str | None = None,
    ) -> WriteResult:
        req = ComposeRequest.of(
            resolve_bucket("compose", bucket_name, self._settings, target_object_name),
            chunk_names,
            target_object_name,
        )
        with _translated("compose", req.bucket, req.target):
            result = await self._client.compose_object(req.bucket, req.target, req.sources())
        logger.info("Composed %d chunks into %s/%s", len(req.chunks), req.bucket, req.target)
        return WriteResult.from_minio(result)


__all__ = ["AsyncMinioStorage"]
