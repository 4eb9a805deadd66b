"""Tests for the storage backends: GCS wrapper (mocked client) and in-memory double."""

from unittest.mock import MagicMock, call, patch

from app.schemas.badges import ObjectRef, StoredObject
from app.services.badge_storage import GCSBadgeStorage, InMemoryBadgeStorage

SOURCE = ObjectRef("badges", "success.svg")
TARGET = ObjectRef("badges", "last-build-status-badge.svg")


def _gcs_storage() -> tuple[GCSBadgeStorage, MagicMock]:
    with patch("google.cloud.storage.Client") as mock_client_cls:
        backend = GCSBadgeStorage("acme-ci")
    mock_client_cls.assert_called_once_with(project="acme-ci")
    return backend, mock_client_cls.return_value


def test_gcs_get_returns_snapshot() -> None:
    backend, client = _gcs_storage()
    blob = client.bucket.return_value.get_blob.return_value
    blob.content_type = "image/svg+xml"
    blob.cache_control = None

    result = backend.get(SOURCE)

    client.bucket.assert_called_with("badges")
    client.bucket.return_value.get_blob.assert_called_once_with("success.svg")
    assert result == StoredObject(ref=SOURCE, content_type="image/svg+xml", cache_control=None)


def test_gcs_get_missing_object_returns_none() -> None:
    backend, client = _gcs_storage()
    client.bucket.return_value.get_blob.return_value = None

    assert backend.get(SOURCE) is None


def test_gcs_copy_rewrites_with_target_metadata() -> None:
    backend, client = _gcs_storage()
    source_blob = MagicMock(name="source_blob")
    destination = MagicMock(name="destination")
    client.bucket.return_value.blob.side_effect = [source_blob, destination]
    destination.rewrite.return_value = (None, 120, 120)

    result = backend.copy(
        StoredObject(ref=SOURCE, content_type="image/svg+xml"),
        TARGET,
        content_type="image/svg+xml",
        cache_control="no-cache, max-age=0",
    )

    assert client.bucket.return_value.blob.call_args_list == [
        call("success.svg"),
        call("last-build-status-badge.svg"),
    ]
    destination.rewrite.assert_called_once_with(source_blob)
    assert destination.content_type == "image/svg+xml"
    assert destination.cache_control == "no-cache, max-age=0"
    assert result.ref == TARGET


def test_gcs_copy_follows_rewrite_token() -> None:
    backend, client = _gcs_storage()
    source_blob = MagicMock(name="source_blob")
    destination = MagicMock(name="destination")
    client.bucket.return_value.blob.side_effect = [source_blob, destination]
    destination.rewrite.side_effect = [("tok-1", 10, 20), (None, 20, 20)]

    backend.copy(
        StoredObject(ref=SOURCE, content_type="image/svg+xml"),
        TARGET,
        content_type="image/svg+xml",
        cache_control="no-cache, max-age=0",
    )

    assert destination.rewrite.call_args_list == [
        call(source_blob),
        call(source_blob, token="tok-1"),
    ]


def test_gcs_grant_public_read_targets_all_users() -> None:
    backend, client = _gcs_storage()
    blob = client.bucket.return_value.blob.return_value

    backend.grant_public_read(TARGET)

    client.bucket.return_value.blob.assert_called_once_with("last-build-status-badge.svg")
    blob.acl.all.assert_called_once_with()
    blob.acl.all.return_value.grant_read.assert_called_once_with()
    blob.acl.save.assert_called_once_with()


def test_in_memory_storage_starts_empty() -> None:
    storage = InMemoryBadgeStorage()

    assert storage.objects == {}
    assert storage.calls == []
    assert storage.get(SOURCE) is None


def test_in_memory_copy_resets_visibility() -> None:
    """Overwriting an object drops its earlier public grant."""
    storage = InMemoryBadgeStorage()
    storage.put(SOURCE, b"<svg/>")
    source = storage.get(SOURCE)
    assert source is not None

    storage.copy(source, TARGET, content_type="image/svg+xml", cache_control="no-cache")
    storage.grant_public_read(TARGET)
    storage.copy(source, TARGET, content_type="image/svg+xml", cache_control="no-cache")

    assert TARGET not in storage.public
    assert [c["op"] for c in storage.mutations()] == ["copy", "grant_public_read", "copy"]
