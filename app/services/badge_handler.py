"""Per-event pipeline: load config, decode, match, publish.

Every delivery adapter (Pub/Sub push endpoint, background function) calls
``handle_build_event`` with the raw message data.  Errors are never caught
here; they abort the invocation and surface to the adapter.
"""

import structlog

from app.config import load_watch_config
from app.services.badge_storage import StorageFactory
from app.services.decoder import decode_build_notification
from app.services.matcher import should_publish
from app.services.publisher import publish_badge

logger = structlog.get_logger()


def handle_build_event(data: str | bytes | None, storage_factory: StorageFactory) -> bool:
    """Handle one Cloud Build notification.

    Args:
        data: Base64-encoded message data from the Pub/Sub message.
        storage_factory: Creates a storage backend for the notification's
            project.  Only called when the badge is published.

    Returns:
        True if the badge was published, False if the event was ignored.

    Raises:
        ConfigurationError: If the watch configuration is missing or invalid.
        DecodeError: If *data* is not a valid Cloud Build message.
        SourceNotFoundError: If the status badge object does not exist.
    """
    config = load_watch_config()
    logger.info(
        "watch_config_loaded",
        repo_name_regex=config.repo_name_regex,
        branch_name_regex=config.branch_name_regex,
        tag_name_regex=config.tag_name_regex,
        bucket_name=config.bucket_name,
        badge_object=config.target_ref.name,
    )

    notification = decode_build_notification(data)

    if not should_publish(config, notification):
        logger.info("badge_update_ignored", build_id=notification.build_id)
        return False

    storage = storage_factory(notification.project_id)
    target = publish_badge(storage, config, notification.status)
    logger.info(
        "badge_published",
        build_id=notification.build_id,
        status=notification.status,
        badge=str(target.ref),
    )
    return True
