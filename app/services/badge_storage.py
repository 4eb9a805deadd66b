"""Object storage abstraction with protocol-based swappable implementations.

Production code uses ``GCSBadgeStorage`` which wraps the synchronous
``google-cloud-storage`` client, one client per GCP project.  Tests use
``InMemoryBadgeStorage`` which keeps objects in a dict and records every call
for assertion without network access.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from app.schemas.badges import ObjectRef, StoredObject


class BadgeStorage(Protocol):
    """Protocol for the three storage primitives the publisher needs."""

    def get(self, ref: ObjectRef) -> StoredObject | None:
        """Return the object at *ref*, or None if it does not exist."""
        ...

    def copy(
        self,
        source: StoredObject,
        target: ObjectRef,
        *,
        content_type: str | None,
        cache_control: str,
    ) -> StoredObject:
        """Overwrite *target* with the content of *source* and the given metadata."""
        ...

    def grant_public_read(self, ref: ObjectRef) -> None:
        """Grant READER on *ref* to all users."""
        ...


# Maps a GCP project id to a storage backend scoped to that project.
StorageFactory = Callable[[str], BadgeStorage]


class GCSBadgeStorage:
    """Production implementation backed by Google Cloud Storage.

    The ``google.cloud.storage`` client is imported lazily so the module can
    be loaded without the GCP SDK installed.
    """

    def __init__(self, project: str) -> None:
        from google.cloud import storage

        self._client = storage.Client(project=project)

    def get(self, ref: ObjectRef) -> StoredObject | None:
        blob = self._client.bucket(ref.bucket).get_blob(ref.name)
        if blob is None:
            return None
        return StoredObject(ref=ref, content_type=blob.content_type, cache_control=blob.cache_control)

    def copy(
        self,
        source: StoredObject,
        target: ObjectRef,
        *,
        content_type: str | None,
        cache_control: str,
    ) -> StoredObject:
        """Rewrite *source* onto *target*, sending the target metadata with the request."""
        source_blob = self._client.bucket(source.ref.bucket).blob(source.ref.name)
        destination = self._client.bucket(target.bucket).blob(target.name)
        destination.content_type = content_type
        destination.cache_control = cache_control

        # Large objects may need several rewrite calls; badges finish in one.
        token, _, _ = destination.rewrite(source_blob)
        while token is not None:
            token, _, _ = destination.rewrite(source_blob, token=token)

        return StoredObject(
            ref=target,
            content_type=destination.content_type,
            cache_control=destination.cache_control,
        )

    def grant_public_read(self, ref: ObjectRef) -> None:
        blob = self._client.bucket(ref.bucket).blob(ref.name)
        blob.acl.all().grant_read()
        blob.acl.save()


class InMemoryBadgeStorage:
    """Test double that stores objects in memory and records calls."""

    def __init__(self) -> None:
        self.objects: dict[ObjectRef, StoredObject] = {}
        self.contents: dict[ObjectRef, bytes] = {}
        self.public: set[ObjectRef] = set()
        self.calls: list[dict] = []
        self.grant_error: Exception | None = None

    def put(self, ref: ObjectRef, data: bytes, content_type: str = "image/svg+xml") -> None:
        """Seed an object without recording a call."""
        self.objects[ref] = StoredObject(ref=ref, content_type=content_type)
        self.contents[ref] = data

    def get(self, ref: ObjectRef) -> StoredObject | None:
        self.calls.append({"op": "get", "ref": ref})
        return self.objects.get(ref)

    def copy(
        self,
        source: StoredObject,
        target: ObjectRef,
        *,
        content_type: str | None,
        cache_control: str,
    ) -> StoredObject:
        self.calls.append(
            {
                "op": "copy",
                "source": source.ref,
                "target": target,
                "content_type": content_type,
                "cache_control": cache_control,
            }
        )
        copied = StoredObject(ref=target, content_type=content_type, cache_control=cache_control)
        self.objects[target] = copied
        self.contents[target] = self.contents.get(source.ref, b"")
        # A rewrite replaces the object, dropping any previous ACL grants.
        self.public.discard(target)
        return copied

    def grant_public_read(self, ref: ObjectRef) -> None:
        self.calls.append({"op": "grant_public_read", "ref": ref})
        if self.grant_error is not None:
            raise self.grant_error
        self.public.add(ref)

    def mutations(self) -> list[dict]:
        """Return the recorded calls that changed backend state."""
        return [call for call in self.calls if call["op"] != "get"]
