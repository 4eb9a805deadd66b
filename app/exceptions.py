"""Exceptions raised while handling build status badge events."""

from app.schemas.badges import ObjectRef


class BadgeError(Exception):
    """Base exception for badge event handling"""


class ConfigurationError(BadgeError):
    """Raised when the watch configuration is missing or invalid"""


class DecodeError(BadgeError):
    """Raised when an event payload cannot be decoded into a build notification"""


class SourceNotFoundError(BadgeError):
    """Raised when the status badge to publish does not exist in the bucket"""

    def __init__(self, ref: ObjectRef) -> None:
        super().__init__(f"Storage object '{ref.name}' not found in bucket '{ref.bucket}'")
        self.ref = ref
