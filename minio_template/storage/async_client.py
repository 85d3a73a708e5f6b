"""Awaitable MinIO client capability.

Wraps the blocking ``minio.Minio`` handle and owns the worker pool its
network calls run on. Callers ``await`` the methods; suspension happens
here, never in the templates that use it.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any, AsyncIterator, Callable, Sequence, TypeVar

from minio import Minio
from minio.commonconfig import ComposeSource

logger = logging.getLogger(__name__)

T = TypeVar("T")

_EXHAUSTED = object()


class AsyncMinioClient:
    """Asynchronous view of one shared ``Minio`` handle.

    - ``executor`` given: calls run on it and ``close()`` leaves it alone;
    - otherwise a ``ThreadPoolExecutor`` is created and shut down on ``close()``.

    Cancelling an awaiting task abandons the wait only; a call already running
    in the pool completes on its own.
    """

    def __init__(
        self,
        client: Minio,
        *,
        executor: Executor | None = None,
        max_workers: int | None = None,
    ) -> None:
        self._client = client
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="minio-async"
        )

    @property
    def client(self) -> Minio:
        return self._client

    async def __aenter__(self) -> "AsyncMinioClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Shut down the worker pool if this client created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=False)
            logger.debug("Async MinIO worker pool shut down")

    async def _submit(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, functools.partial(fn, *args, **kwargs))

    async def make_bucket(self, bucket_name: str) -> None:
        await self._submit(self._client.make_bucket, bucket_name)

    async def list_buckets(self) -> list[Any]:
        return await self._submit(self._client.list_buckets)

    async def bucket_exists(self, bucket_name: str) -> bool:
        return await self._submit(self._client.bucket_exists, bucket_name)

    async def remove_bucket(self, bucket_name: str) -> None:
        await self._submit(self._client.remove_bucket, bucket_name)

    async def put_object(self, **kwargs: Any) -> Any:
        return await self._submit(self._client.put_object, **kwargs)

    async def stat_object(self, bucket_name: str, object_name: str) -> Any:
        return await self._submit(self._client.stat_object, bucket_name, object_name)

    async def list_objects(
        self, bucket_name: str, prefix: str | None = None, recursive: bool = False
    ) -> AsyncIterator[Any]:
        """Yield listing entries, fetching each one (and each page) in the pool."""
        objects = await self._submit(self._client.list_objects, bucket_name, prefix=prefix, recursive=recursive)
        iterator = iter(objects)
        while True:
            obj = await self._submit(next, iterator, _EXHAUSTED)
            if obj is _EXHAUSTED:
                return
            yield obj

    async def get_object(self, bucket_name: str, object_name: str) -> Any:
        return await self._submit(self._client.get_object, bucket_name, object_name)

    async def remove_object(self, bucket_name: str, object_name: str) -> None:
        await self._submit(self._client.remove_object, bucket_name, object_name)

    async def compose_object(self, bucket_name: str, object_name: str, sources: Sequence[ComposeSource]) -> Any:
        return await self._submit(self._client.compose_object, bucket_name, object_name, sources)


__all__ = ["AsyncMinioClient"]
