"""Pytest configuration and fixtures."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from minio_template.core.config import MIN_PART_SIZE, StorageSettings
from minio_template.storage.async_client import AsyncMinioClient
from minio_template.storage.async_impl import AsyncMinioStorage
from minio_template.storage.minio_impl import MinioStorage
from tests.fake_minio import FakeMinio


def make_settings(**overrides) -> StorageSettings:
    values = {
        "HOST": "http://minio:9000",
        "ACCESS_KEY": "ak",
        "SECRET_KEY": "sk",
        "BUCKET_NAME": "default",
        "PART_SIZE": MIN_PART_SIZE,
        "PREFIX_LINK": "https://cdn.example.com",
        "ASYNC_ENABLE": True,
    }
    values.update(overrides)
    return StorageSettings(**values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def fake_client():
    client = FakeMinio()
    client.make_bucket("default")
    client.make_bucket("photos")
    return client


@pytest.fixture
def storage(fake_client, settings):
    return MinioStorage(fake_client, settings)


@pytest.fixture
def async_storage(fake_client, settings):
    with ThreadPoolExecutor(max_workers=2) as executor:
        yield AsyncMinioStorage(AsyncMinioClient(fake_client, executor=executor), settings)
