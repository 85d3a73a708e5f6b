"""Immutable per-call request descriptors.

Arguments are validated when a descriptor is built, before the client is
touched, so a bad part size or an empty chunk list never reaches the store.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Sequence

from minio.commonconfig import ComposeSource

from minio_template.core.config import MAX_PART_SIZE, MIN_PART_SIZE
from minio_template.storage.contracts import ConfigurationError

DEFAULT_CONTENT_TYPE = "application/octet-stream"
UNKNOWN_SIZE = -1


def _require_name(op: str, bucket: str | None, key: str | None, value: str | None, what: str) -> None:
    if not value or not value.strip():
        raise ConfigurationError(op, bucket, key, f"{what} must be a non-empty string")


@dataclass(frozen=True, slots=True)
class BucketRequest:
    op: str
    bucket: str

    def __post_init__(self) -> None:
        _require_name(self.op, self.bucket, None, self.bucket, "bucket name")


@dataclass(frozen=True, slots=True)
class ObjectRequest:
    op: str
    bucket: str
    key: str

    def __post_init__(self) -> None:
        _require_name(self.op, self.bucket, self.key, self.bucket, "bucket name")
        _require_name(self.op, self.bucket, self.key, self.key, "object name")


@dataclass(frozen=True, slots=True)
class ListObjectsRequest:
    bucket: str
    prefix: str = ""
    recursive: bool = False

    def __post_init__(self) -> None:
        _require_name("list_objects", self.bucket, self.prefix, self.bucket, "bucket name")


@dataclass(frozen=True, slots=True)
class PutObjectRequest:
    """Descriptor for a multipart upload of ``size`` bytes from ``stream``.

    A ``size`` of ``None`` or ``UNKNOWN_SIZE`` streams until end of input.
    """

    bucket: str
    key: str
    stream: BinaryIO
    size: int | None
    part_size: int
    content_type: str = DEFAULT_CONTENT_TYPE

    def __post_init__(self) -> None:
        _require_name("upload", self.bucket, self.key, self.bucket, "bucket name")
        _require_name("upload", self.bucket, self.key, self.key, "object name")
        if self.size is None:
            object.__setattr__(self, "size", UNKNOWN_SIZE)
        elif self.size < UNKNOWN_SIZE:
            raise ConfigurationError(
                "upload", self.bucket, self.key, f"size must be non-negative or -1 for unknown, got {self.size}"
            )
        if not MIN_PART_SIZE <= self.part_size <= MAX_PART_SIZE:
            raise ConfigurationError(
                "upload",
                self.bucket,
                self.key,
                f"part size {self.part_size} outside [{MIN_PART_SIZE}, {MAX_PART_SIZE}]",
            )
        if not self.content_type:
            object.__setattr__(self, "content_type", DEFAULT_CONTENT_TYPE)


@dataclass(frozen=True, slots=True)
class ComposeRequest:
    """Server-side concatenation of ``chunks`` (in the given order) into ``target``."""

    bucket: str
    chunks: tuple[str, ...]
    target: str

    def __post_init__(self) -> None:
        _require_name("compose", self.bucket, self.target, self.bucket, "bucket name")
        _require_name("compose", self.bucket, self.target, self.target, "target object name")
        object.__setattr__(self, "chunks", tuple(self.chunks))
        if not self.chunks:
            raise ConfigurationError("compose", self.bucket, self.target, "chunk list must not be empty")
        for chunk in self.chunks:
            _require_name("compose", self.bucket, self.target, chunk, "chunk name")

    @classmethod
    def of(cls, bucket: str, chunks: Sequence[str], target: str) -> "ComposeRequest":
        return cls(bucket=bucket, chunks=tuple(chunks), target=target)

    def sources(self) -> list[ComposeSource]:
        return [ComposeSource(self.bucket, chunk) for chunk in self.chunks]


__all__ = [
    "DEFAULT_CONTENT_TYPE",
    "UNKNOWN_SIZE",
    "BucketRequest",
    "ObjectRequest",
    "ListObjectsRequest",
    "PutObjectRequest",
    "ComposeRequest",
]
