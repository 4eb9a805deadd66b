"""Application configuration loaded from environment variables.

``Settings`` holds process-wide options read once at import time.
``WatchConfig`` holds the watch rule and badge locations; it is rebuilt by
``load_watch_config()`` for every handled event.
"""

import re
from typing import Literal

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.exceptions import ConfigurationError
from app.schemas.badges import BADGE_EXTENSION, ObjectRef

DEFAULT_BRANCH_NAME_REGEX = "^master$"
DEFAULT_BUCKET_NAME = "build-status-badges"
DEFAULT_BADGE_NAME = "last-build-status-badge"


class Settings(BaseSettings):
    """Application settings with environment variable loading and sensible defaults."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "build-status-badge"
    debug: bool = False
    log_level: str = "INFO"
    storage_backend: Literal["gcs", "memory"] = "gcs"


class WatchConfig(BaseSettings):
    """Watch rule and badge object names for a single invocation.

    Field names map to the ``REPO_NAME_REGEX``, ``BRANCH_NAME_REGEX``,
    ``TAG_NAME_REGEX``, ``BUCKET_NAME`` and ``BADGE_NAME`` environment
    variables.  A configured ``tag_name_regex`` takes precedence over
    ``branch_name_regex`` when matching.
    """

    model_config = SettingsConfigDict(case_sensitive=False, frozen=True, extra="ignore")

    repo_name_regex: str
    branch_name_regex: str = DEFAULT_BRANCH_NAME_REGEX
    tag_name_regex: str | None = None
    bucket_name: str = DEFAULT_BUCKET_NAME
    badge_name: str = DEFAULT_BADGE_NAME

    @field_validator("repo_name_regex", "branch_name_regex", "tag_name_regex")
    @classmethod
    def pattern_compiles(cls, v: str | None) -> str | None:
        if v is not None:
            try:
                re.compile(v)
            except re.error as exc:
                raise ValueError(f"invalid regular expression {v!r}: {exc}") from exc
        return v

    def source_ref(self, status: str) -> ObjectRef:
        """Return the badge object for a build status, e.g. ``success.svg``."""
        return ObjectRef(self.bucket_name, status.lower() + BADGE_EXTENSION)

    @property
    def target_ref(self) -> ObjectRef:
        """Return the publicly served badge object."""
        return ObjectRef(self.bucket_name, self.badge_name + BADGE_EXTENSION)


def load_watch_config() -> WatchConfig:
    """Build a ``WatchConfig`` from the current environment.

    Raises:
        ConfigurationError: If ``REPO_NAME_REGEX`` is unset or any pattern
            does not compile.
    """
    try:
        return WatchConfig()
    except ValidationError as exc:
        problems = []
        for error in exc.errors():
            env_name = str(error["loc"][0]).upper() if error["loc"] else "?"
            if error["type"] == "missing":
                problems.append(f"Environment variable '{env_name}' must be set")
            else:
                problems.append(f"Environment variable '{env_name}' is invalid: {error['msg']}")
        raise ConfigurationError("; ".join(problems)) from None


settings = Settings()
