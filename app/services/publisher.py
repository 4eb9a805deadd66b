"""Copy the badge for a build status over the public badge object."""

import structlog

from app.config import WatchConfig
from app.exceptions import SourceNotFoundError
from app.schemas.badges import StoredObject
from app.services.badge_storage import BadgeStorage

logger = structlog.get_logger()

# Badge consumers must always fetch the latest status, never a cached one.
NO_CACHE = "no-cache, max-age=0"


def publish_badge(storage: BadgeStorage, config: WatchConfig, status: str) -> StoredObject:
    """Publish ``{status}.svg`` as the target badge and make it public.

    The copy and the ACL grant are separate backend calls.  If the grant
    fails, the copied badge stays in place with its previous visibility and
    the error propagates; the next published badge repeats the grant.

    Raises:
        SourceNotFoundError: If the status badge does not exist.
    """
    source_ref = config.source_ref(status)
    target_ref = config.target_ref

    source = storage.get(source_ref)
    if source is None:
        raise SourceNotFoundError(source_ref)

    target = storage.copy(
        source,
        target_ref,
        content_type=source.content_type,
        cache_control=NO_CACHE,
    )
    logger.info(
        "badge_copied",
        bucket=target_ref.bucket,
        source=source_ref.name,
        target=target_ref.name,
        content_type=target.content_type,
        cache_control=target.cache_control,
    )

    storage.grant_public_read(target_ref)
    logger.info("badge_made_public", bucket=target_ref.bucket, target=target_ref.name)

    return target
