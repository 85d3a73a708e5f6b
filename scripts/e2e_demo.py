#!/usr/bin/env python3
"""
End-to-end demo against a running MinIO server.

Prerequisites:
    MINIO_HOST, MINIO_ACCESS_KEY, MINIO_SECRET_KEY set (or a .env file)

Usage:
    python scripts/e2e_demo.py --bucket demo

    # Also exercise the async template:
    MINIO_ASYNC_ENABLE=true python scripts/e2e_demo.py --bucket demo
"""

import argparse
import asyncio
import io
import logging
import sys

from minio_template.core.logging import setup_logging
from minio_template.storage import AsyncMinioStorage, MinioStorage, StorageError
from minio_template.core.config import get_settings
from minio_template.storage.factory import build_templates

logger = logging.getLogger("e2e_demo")

CHUNKS = {
    "chunks/part-1": b"A" * (5 * 1024 * 1024),
    "chunks/part-2": b"B" * (5 * 1024 * 1024),
    "chunks/part-3": b"tail",
}


def run_sync(storage: MinioStorage, bucket: str) -> None:
    if not storage.bucket_exists(bucket):
        storage.create_bucket(bucket)

    for key, data in CHUNKS.items():
        link = storage.upload_file(key, io.BytesIO(data), len(data), bucket_name=bucket)
        print(f"  uploaded {link}")

    result = storage.compose_object(list(CHUNKS), "merged.bin", bucket_name=bucket)
    info = storage.get_file_info("merged.bin", bucket_name=bucket)
    print(f"  composed {result.key} etag={result.etag} size={info.size}")

    for item in storage.list_objects_by_prefix("chunks/", recursive=True, bucket_name=bucket):
        print(f"  listed {item.key} ({item.size} bytes)")

    for key in [*CHUNKS, "merged.bin"]:
        storage.remove_object(key, bucket_name=bucket)
    storage.delete_bucket(bucket)
    print(f"  removed bucket {bucket}")


async def run_async(storage: AsyncMinioStorage, bucket: str) -> None:
    try:
        await _exercise_async(storage, bucket)
    finally:
        await storage.aclose()


async def _exercise_async(storage: AsyncMinioStorage, bucket: str) -> None:
    await storage.create_bucket(bucket)
    streams = {key: io.BytesIO(data) for key, data in CHUNKS.items()}
    try:
        results = await asyncio.gather(
            *(
                storage.upload_file(key, stream, len(CHUNKS[key]), bucket_name=bucket)
                for key, stream in streams.items()
            )
        )
    finally:
        for stream in streams.values():
            stream.close()
    for result in results:
        print(f"  uploaded {result.bucket}/{result.key} etag={result.etag}")

    await storage.compose_object(list(CHUNKS), "merged.bin", bucket_name=bucket)
    async for item in storage.iter_objects_by_prefix("", recursive=True, bucket_name=bucket):
        print(f"  listed {item.key}")
        await storage.remove_object(item.key, bucket_name=bucket)
    await storage.delete_bucket(bucket)
    print(f"  removed bucket {bucket}")


def main() -> int:
    parser = argparse.ArgumentParser(description="MinIO template demo")
    parser.add_argument("--bucket", default="template-demo", help="Scratch bucket to create and remove")
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    templates = build_templates(settings)

    try:
        print("Sync template:")
        run_sync(templates.sync, args.bucket)
        if templates.async_ is not None:
            print("Async template:")
            asyncio.run(run_async(templates.async_, f"{args.bucket}-async"))
    except StorageError as exc:
        logger.error("Demo failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
