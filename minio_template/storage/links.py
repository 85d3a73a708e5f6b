"""Public link formatting for uploaded objects."""

from __future__ import annotations

SEPARATOR = "/"


def build_link(prefix: str, bucket: str, key: str) -> str:
    """Return ``{prefix}/{bucket}/{key}``.

    Keys are not URL-encoded; callers with reserved characters encode them first.
    """
    return SEPARATOR.join((prefix, bucket, key))


__all__ = ["build_link"]
