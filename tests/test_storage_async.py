"""Tests for the awaitable storage template."""

import asyncio
import io
import threading
from concurrent.futures import ThreadPoolExecutor
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from minio_template.storage.async_client import AsyncMinioClient
from minio_template.storage.async_impl import AsyncMinioStorage
from minio_template.storage.contracts import (
    AlreadyExistsError,
    AsyncStorageOperations,
    ConfigurationError,
    IncompleteTransferError,
    NotFoundError,
)
from minio_template.storage.models import WriteResult
from tests.conftest import make_settings
from tests.fake_minio import make_s3_error

MIB = 1024 * 1024


def _storage(client, **overrides) -> AsyncMinioStorage:
    return AsyncMinioStorage(AsyncMinioClient(client), make_settings(**overrides))


def test_satisfies_protocol():
    assert isinstance(_storage(MagicMock()), AsyncStorageOperations)
    assert not hasattr(_storage(MagicMock()), "list_objects_by_prefix")


@pytest.mark.asyncio
async def test_upload_resolves_to_write_result_and_leaves_stream_open():
    client = MagicMock()
    client.put_object.return_value = SimpleNamespace(
        bucket_name="photos", object_name="a.png", etag="e1", version_id=None
    )
    storage = _storage(client)
    stream = io.BytesIO(b"png-bytes")

    result = await storage.upload_file("a.png", stream, 9, "image/png", bucket_name="photos")

    assert result == WriteResult(bucket="photos", key="a.png", etag="e1")
    assert not stream.closed
    assert client.put_object.call_args.kwargs["part_size"] == 5 * MIB


@pytest.mark.asyncio
async def test_upload_runs_on_worker_thread():
    seen = {}

    def fake_put(**kwargs):
        seen["thread"] = threading.current_thread().name
        return SimpleNamespace(bucket_name="default", object_name="k", etag="e", version_id=None)

    client = MagicMock()
    client.put_object.side_effect = fake_put
    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="store-io") as executor:
        storage = AsyncMinioStorage(AsyncMinioClient(client, executor=executor), make_settings())
        await storage.upload_file("k", io.BytesIO(b"x"), 1)

    assert seen["thread"].startswith("store-io")


@pytest.mark.asyncio
async def test_part_size_above_ceiling_rejected_without_contacting_store():
    client = MagicMock()
    storage = _storage(client, PART_SIZE=6 * 1024 * MIB)

    with pytest.raises(ConfigurationError):
        await storage.upload_file("k", io.BytesIO(b"data"), 4)

    client.put_object.assert_not_called()


@pytest.mark.asyncio
async def test_short_stream_raises_incomplete_transfer():
    def fake_put(**kwargs):
        while kwargs["data"].read(4):
            pass
        raise IOError("stream having not enough data")

    client = MagicMock()
    client.put_object.side_effect = fake_put
    storage = _storage(client)

    with pytest.raises(IncompleteTransferError):
        await storage.upload_file("k", io.BytesIO(b"abc"), 10)


@pytest.mark.asyncio
async def test_errors_share_taxonomy_with_sync_template():
    client = MagicMock()
    client.make_bucket.side_effect = make_s3_error("BucketAlreadyExists", "taken", "photos")
    client.stat_object.side_effect = make_s3_error("NoSuchKey", "missing", "photos", "a.png")
    storage = _storage(client)

    with pytest.raises(AlreadyExistsError):
        await storage.create_bucket("photos")
    with pytest.raises(NotFoundError) as excinfo:
        await storage.get_file_info("a.png", bucket_name="photos")

    assert excinfo.value.op == "get_file_info"
    assert excinfo.value.key == "a.png"


@pytest.mark.asyncio
async def test_iter_objects_by_prefix_is_lazy():
    pulled = []

    def entries():
        for i in range(3):
            pulled.append(i)
            yield SimpleNamespace(object_name=f"p/{i}", size=1, last_modified=None, etag="e", is_dir=False)

    client = MagicMock()
    client.list_objects.return_value = entries()
    storage = _storage(client)

    iterator = storage.iter_objects_by_prefix("p/", bucket_name="photos")
    first = await iterator.__anext__()

    assert first.key == "p/0"
    assert pulled == [0]
    rest = [item.key async for item in iterator]
    assert rest == ["p/1", "p/2"]
    client.list_objects.assert_called_once_with("photos", prefix="p/", recursive=False)


@pytest.mark.asyncio
async def test_compose_preserves_order_and_rejects_empty():
    client = MagicMock()
    client.compose_object.return_value = SimpleNamespace(
        bucket_name="default", object_name="t", etag="e", version_id=None
    )
    storage = _storage(client)

    await storage.compose_object(["b", "a"], "t")

    _, _, sources = client.compose_object.call_args.args
    assert [s.object_name for s in sources] == ["b", "a"]

    with pytest.raises(ConfigurationError):
        await storage.compose_object([], "t")
    assert client.compose_object.call_count == 1


@pytest.mark.asyncio
async def test_calls_run_concurrently():
    client = MagicMock()
    client.bucket_exists.return_value = True
    storage = _storage(client)

    results = await asyncio.gather(*(storage.bucket_exists(f"b{i}") for i in range(5)))

    assert results == [True] * 5
    assert client.bucket_exists.call_count == 5


@pytest.mark.asyncio
async def test_template_awaits_client_capability():
    client = AsyncMock(spec=AsyncMinioClient)
    client.bucket_exists.return_value = True
    client.stat_object.side_effect = make_s3_error("NoSuchKey", "missing", "photos", "k")
    storage = AsyncMinioStorage(client, make_settings())

    assert await storage.bucket_exists("photos") is True
    client.bucket_exists.assert_awaited_once_with("photos")
    with pytest.raises(NotFoundError):
        await storage.get_file_info("k", bucket_name="photos")


@pytest.mark.asyncio
async def test_upload_unknown_size_passes_minus_one():
    client = MagicMock()
    client.put_object.return_value = SimpleNamespace(
        bucket_name="default", object_name="k", etag="e", version_id=None
    )
    storage = _storage(client)

    await storage.upload_file("k", io.BytesIO(b"abc"), -1)

    assert client.put_object.call_args.kwargs["length"] == -1


@pytest.mark.asyncio
async def test_blank_bucket_is_not_replaced_by_default():
    client = MagicMock()
    storage = _storage(client)

    with pytest.raises(ConfigurationError):
        await storage.remove_object("k", bucket_name="")

    client.remove_object.assert_not_called()
