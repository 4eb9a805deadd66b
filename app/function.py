"""Cloud Functions entrypoint for a Pub/Sub background trigger.

Deploy with ``--entry-point build_status_badge`` and
``--trigger-topic cloud-builds``.
"""

import structlog

from app.config import settings
from app.dependencies import get_storage_factory, init_production_deps
from app.logging_config import configure_logging
from app.services.badge_handler import handle_build_event

configure_logging(
    json_logs=not settings.debug,
    log_level=settings.log_level,
    service=settings.app_name,
)

if settings.storage_backend == "gcs":
    init_production_deps()

logger = structlog.get_logger()


def build_status_badge(event: dict, context: object = None) -> None:
    """Background Cloud Function triggered by a Cloud Build Pub/Sub message.

    ``event["data"]`` holds the base64-encoded Build resource.  Errors
    propagate so the platform records the invocation as failed.
    """
    event_id = getattr(context, "event_id", None)
    with structlog.contextvars.bound_contextvars(event_id=event_id):
        published = handle_build_event(event.get("data"), get_storage_factory())
        logger.info("function_invocation_finished", published=published)
