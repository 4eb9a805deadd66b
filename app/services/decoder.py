"""Decode base64 Pub/Sub message data into a ``BuildNotification``.

Cloud Build publishes the full Build resource as JSON.  Only ``status``,
``projectId`` and three substitution keys matter here; everything else in the
message is ignored.
"""

import base64
import binascii
import json

import structlog

from app.exceptions import DecodeError
from app.schemas.notifications import BuildNotification

logger = structlog.get_logger()

# BRANCH_NAME is not sent for tag-triggered builds and TAG_NAME is not sent
# for branch-triggered builds.
REPO_NAME_KEY = "REPO_NAME"
BRANCH_NAME_KEY = "BRANCH_NAME"
TAG_NAME_KEY = "TAG_NAME"


def _required_str(message: dict, key: str) -> str:
    value = message.get(key)
    if not isinstance(value, str):
        raise DecodeError(f"Required field '{key}' is missing or not a string")
    return value


def _optional_str(substitutions: dict, key: str) -> str | None:
    value = substitutions.get(key)
    return value if isinstance(value, str) else None


def decode_build_notification(data: str | bytes | None) -> BuildNotification:
    """Decode a base64-encoded Cloud Build message.

    Args:
        data: The ``data`` field of a Pub/Sub message.

    Returns:
        The decoded notification.  Missing substitution keys become ``None``.

    Raises:
        DecodeError: If the payload is absent, is not base64, is not a JSON
            object, or lacks a string ``status`` or ``projectId``.
    """
    if not data:
        raise DecodeError("Event payload is absent")

    try:
        encoded = data.encode("ascii") if isinstance(data, str) else data
        # Producers may strip the trailing "=" padding.
        encoded += b"=" * (-len(encoded) % 4)
        raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"Event payload is not valid base64: {exc}") from exc

    try:
        message = json.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise DecodeError(f"Event payload is not UTF-8 text: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise DecodeError(f"Event payload is not valid JSON: {exc}") from exc

    if not isinstance(message, dict):
        raise DecodeError("Event payload must be a JSON object")

    substitutions = message.get("substitutions")
    if substitutions is None:
        substitutions = {}
    elif not isinstance(substitutions, dict):
        raise DecodeError("Field 'substitutions' must be a JSON object")

    build_id = message.get("id")
    notification = BuildNotification(
        status=_required_str(message, "status"),
        project_id=_required_str(message, "projectId"),
        repo_name=_optional_str(substitutions, REPO_NAME_KEY),
        branch_name=_optional_str(substitutions, BRANCH_NAME_KEY),
        tag_name=_optional_str(substitutions, TAG_NAME_KEY),
        build_id=build_id if isinstance(build_id, str) else None,
    )

    logger.info(
        "build_notification_decoded",
        build_id=notification.build_id,
        project_id=notification.project_id,
        status=notification.status,
        repo_name=notification.repo_name,
        branch_name=notification.branch_name,
        tag_name=notification.tag_name,
    )
    return notification
