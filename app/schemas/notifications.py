"""Pydantic models for Cloud Build notifications and Pub/Sub push envelopes."""

from pydantic import BaseModel, ConfigDict, Field


class BuildNotification(BaseModel):
    """A decoded Cloud Build completion message.

    ``branch_name`` is ``None`` for builds triggered by a tag push and
    ``tag_name`` is ``None`` for builds triggered by a branch push.
    """

    model_config = ConfigDict(frozen=True)

    status: str
    project_id: str
    repo_name: str | None = None
    branch_name: str | None = None
    tag_name: str | None = None
    build_id: str | None = None


class PubSubMessage(BaseModel):
    """The ``message`` member of a Pub/Sub push request.

    Reference: https://cloud.google.com/pubsub/docs/push#receive_push
    """

    model_config = ConfigDict(populate_by_name=True)

    data: str | None = None
    attributes: dict[str, str] = Field(default_factory=dict)
    message_id: str | None = Field(default=None, alias="messageId")
    publish_time: str | None = Field(default=None, alias="publishTime")


class PubSubPushEnvelope(BaseModel):
    """Pub/Sub push subscription request body."""

    message: PubSubMessage
    subscription: str | None = None


class PushResponse(BaseModel):
    """Response model for the /pubsub/push endpoint."""

    status: str
    message_id: str | None = None
