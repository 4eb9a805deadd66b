"""Shared fixtures: watch environment, in-memory storage, and FastAPI test client."""

import base64
import json
import os
from collections.abc import AsyncGenerator

# The app reads settings at import time; keep tests off real GCS.
os.environ["STORAGE_BACKEND"] = "memory"

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.dependencies import get_storage_factory  # noqa: E402
from app.main import app  # noqa: E402
from app.schemas.badges import ObjectRef  # noqa: E402
from app.services.badge_storage import InMemoryBadgeStorage, StorageFactory  # noqa: E402

WATCH_ENV_VARS = (
    "REPO_NAME_REGEX",
    "BRANCH_NAME_REGEX",
    "TAG_NAME_REGEX",
    "BUCKET_NAME",
    "BADGE_NAME",
)

BUCKET = "build-status-badges"
PROJECT_ID = "acme-ci"


def encode_message(message: dict) -> str:
    """Base64-encode a Cloud Build message the way Pub/Sub delivers it."""
    return base64.b64encode(json.dumps(message).encode("utf-8")).decode("ascii")


def make_build_message(
    *,
    status: str = "SUCCESS",
    project_id: str | None = PROJECT_ID,
    repo: str | None = "acme/widget",
    branch: str | None = "master",
    tag: str | None = None,
    build_id: str | None = "b-0001",
) -> dict:
    """Build a trimmed Cloud Build resource with the given substitutions."""
    substitutions = {}
    if repo is not None:
        substitutions["REPO_NAME"] = repo
    if branch is not None:
        substitutions["BRANCH_NAME"] = branch
    if tag is not None:
        substitutions["TAG_NAME"] = tag
    message: dict = {"status": status, "substitutions": substitutions}
    if project_id is not None:
        message["projectId"] = project_id
    if build_id is not None:
        message["id"] = build_id
    return message


@pytest.fixture
def anyio_backend() -> str:
    """Run async tests on asyncio only; the app offloads work via ``asyncio.to_thread``."""
    return "asyncio"


@pytest.fixture
def watch_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Clear every watch variable and set only ``REPO_NAME_REGEX``."""
    for name in WATCH_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("REPO_NAME_REGEX", "^acme/widget$")
    return monkeypatch


@pytest.fixture
def storage() -> InMemoryBadgeStorage:
    """In-memory storage seeded with success and failure badges."""
    backend = InMemoryBadgeStorage()
    backend.put(ObjectRef(BUCKET, "success.svg"), b"<svg>passing</svg>")
    backend.put(ObjectRef(BUCKET, "failure.svg"), b"<svg>failing</svg>")
    return backend


@pytest.fixture
def storage_projects() -> list[str]:
    """Projects the storage factory was asked for, in call order."""
    return []


@pytest.fixture
def storage_factory(
    storage: InMemoryBadgeStorage, storage_projects: list[str],
) -> StorageFactory:
    """Factory returning the shared in-memory storage and recording projects."""

    def factory(project: str) -> InMemoryBadgeStorage:
        storage_projects.append(project)
        return storage

    return factory


@pytest.fixture
async def client(storage_factory: StorageFactory) -> AsyncGenerator[AsyncClient, None]:
    """Yield an httpx AsyncClient with the storage factory overridden."""
    app.dependency_overrides[get_storage_factory] = lambda: storage_factory
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
