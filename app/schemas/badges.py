"""Storage object references used by the badge publisher."""

from dataclasses import dataclass

BADGE_EXTENSION = ".svg"


@dataclass(frozen=True)
class ObjectRef:
    """A (bucket, name) pair identifying a storage object."""

    bucket: str
    name: str

    def __str__(self) -> str:
        return f"{self.bucket}/{self.name}"


@dataclass(frozen=True)
class StoredObject:
    """Snapshot of an object as reported by the storage backend."""

    ref: ObjectRef
    content_type: str | None
    cache_control: str | None = None
