import io

import pytest

from minio_template.core.config import MAX_PART_SIZE, MIN_PART_SIZE
from minio_template.storage.contracts import ConfigurationError
from minio_template.storage.requests import (
    DEFAULT_CONTENT_TYPE,
    UNKNOWN_SIZE,
    BucketRequest,
    ComposeRequest,
    ObjectRequest,
    PutObjectRequest,
)


@pytest.mark.parametrize("part_size", [MIN_PART_SIZE, MAX_PART_SIZE])
def test_put_request_accepts_bounds(part_size):
    req = PutObjectRequest(bucket="b", key="k", stream=io.BytesIO(), size=0, part_size=part_size)
    assert req.content_type == DEFAULT_CONTENT_TYPE


@pytest.mark.parametrize("part_size", [MIN_PART_SIZE - 1, MAX_PART_SIZE + 1, 0])
def test_put_request_rejects_out_of_bounds(part_size):
    with pytest.raises(ConfigurationError) as excinfo:
        PutObjectRequest(bucket="b", key="k", stream=io.BytesIO(), size=1, part_size=part_size)
    assert "part size" in excinfo.value.message


def test_put_request_rejects_negative_size():
    with pytest.raises(ConfigurationError):
        PutObjectRequest(bucket="b", key="k", stream=io.BytesIO(), size=-2, part_size=MIN_PART_SIZE)


@pytest.mark.parametrize("size", [None, UNKNOWN_SIZE])
def test_put_request_accepts_unknown_size(size):
    req = PutObjectRequest(bucket="b", key="k", stream=io.BytesIO(), size=size, part_size=MIN_PART_SIZE)
    assert req.size == UNKNOWN_SIZE


def test_blank_names_rejected():
    with pytest.raises(ConfigurationError):
        BucketRequest("create_bucket", "  ")
    with pytest.raises(ConfigurationError):
        ObjectRequest("get_object", "b", "")


def test_compose_request_is_immutable_tuple_in_order():
    chunks = ["c2", "c1"]
    req = ComposeRequest.of("b", chunks, "t")
    chunks.append("c3")

    assert req.chunks == ("c2", "c1")
    assert [s.object_name for s in req.sources()] == ["c2", "c1"]
    with pytest.raises(AttributeError):
        req.target = "other"


def test_compose_request_rejects_empty_list():
    with pytest.raises(ConfigurationError) as excinfo:
        ComposeRequest.of("b", [], "t")
    assert excinfo.value.op == "compose"
