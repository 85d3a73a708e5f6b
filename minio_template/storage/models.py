"""Plain result types returned by the storage templates."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class Bucket:
    """A bucket owned by the authenticated principal."""

    name: str
    creation_date: datetime | None

    @classmethod
    def from_minio(cls, bucket: Any) -> "Bucket":
        return cls(name=bucket.name, creation_date=bucket.creation_date)


@dataclass(frozen=True, slots=True)
class ObjectItem:
    """One entry of a prefix listing.

    ``is_dir`` marks a common-prefix entry returned by non-recursive listings;
    such entries carry no size, timestamp or etag.
    """

    key: str
    size: int | None
    last_modified: datetime | None
    etag: str | None
    is_dir: bool = False

    @classmethod
    def from_minio(cls, obj: Any) -> "ObjectItem":
        return cls(
            key=obj.object_name,
            size=obj.size,
            last_modified=obj.last_modified,
            etag=obj.etag,
            is_dir=bool(obj.is_dir),
        )


@dataclass(frozen=True, slots=True)
class ObjectInfo:
    """Object metadata from a stat call; never includes the body."""

    bucket: str
    key: str
    size: int | None
    etag: str | None
    content_type: str | None
    last_modified: datetime | None
    version_id: str | None = None
    metadata: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_minio(cls, stat: Any) -> "ObjectInfo":
        return cls(
            bucket=stat.bucket_name,
            key=stat.object_name,
            size=stat.size,
            etag=stat.etag,
            content_type=stat.content_type,
            last_modified=stat.last_modified,
            version_id=stat.version_id,
            metadata=dict(stat.metadata or {}),
        )


@dataclass(frozen=True, slots=True)
class WriteResult:
    """Raw acknowledgement of a completed write."""

    bucket: str
    key: str
    etag: str | None
    version_id: str | None = None

    @classmethod
    def from_minio(cls, result: Any) -> "WriteResult":
        return cls(
            bucket=result.bucket_name,
            key=result.object_name,
            etag=result.etag,
            version_id=result.version_id,
        )


__all__ = ["Bucket", "ObjectItem", "ObjectInfo", "WriteResult"]
