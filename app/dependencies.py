"""Centralized dependencies shared by the FastAPI app and the function entrypoint."""

from app.services.badge_storage import (
    BadgeStorage,
    GCSBadgeStorage,
    InMemoryBadgeStorage,
    StorageFactory,
)

_memory_storage = InMemoryBadgeStorage()


def _memory_storage_factory(project: str) -> BadgeStorage:
    return _memory_storage


_storage_factory: StorageFactory = _memory_storage_factory
_storage_backend = "memory"


def init_production_deps() -> None:
    """Swap the in-memory storage double for Google Cloud Storage.

    ``GCSBadgeStorage`` imports the GCP SDK lazily, so this only records the
    factory; clients are created per event for the event's project.
    """
    global _storage_factory, _storage_backend  # noqa: PLW0603

    _storage_factory = GCSBadgeStorage
    _storage_backend = "gcs"


def get_storage_factory() -> StorageFactory:
    """Return the factory creating a storage backend per GCP project.

    Defaults to a shared InMemoryBadgeStorage for development and testing.
    Swapped to Google Cloud Storage by ``init_production_deps()``.
    """
    return _storage_factory


def get_storage_backend_name() -> str:
    """Return ``"gcs"`` or ``"memory"`` for health reporting."""
    return _storage_backend


__all__ = [
    "get_storage_backend_name",
    "get_storage_factory",
    "init_production_deps",
]
