"""Pub/Sub push subscription endpoint for Cloud Build notifications."""

import asyncio
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies import get_storage_factory
from app.exceptions import DecodeError
from app.schemas.notifications import PubSubPushEnvelope, PushResponse
from app.services.badge_handler import handle_build_event
from app.services.badge_storage import StorageFactory

logger = structlog.get_logger()

router = APIRouter(prefix="/pubsub", tags=["pubsub"])


@router.post("/push", response_model=PushResponse)
async def pubsub_push(
    envelope: PubSubPushEnvelope,
    storage_factory: Annotated[StorageFactory, Depends(get_storage_factory)],
) -> PushResponse:
    """Receive a Cloud Build message pushed by a Pub/Sub subscription.

    A 2xx response acknowledges the message.  Undecodable messages get a 400;
    configuration and storage failures propagate to the global handler as a
    500, leaving redelivery to the subscription's retry policy.
    """
    message = envelope.message
    structlog.contextvars.bind_contextvars(message_id=message.message_id)
    try:
        published = await asyncio.to_thread(handle_build_event, message.data, storage_factory)
    except DecodeError as exc:
        logger.warning("pubsub_message_undecodable", error=str(exc))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from None
    finally:
        structlog.contextvars.unbind_contextvars("message_id")

    return PushResponse(
        status="published" if published else "ignored",
        message_id=message.message_id,
    )
