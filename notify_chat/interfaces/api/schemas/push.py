"""Pydantic models describing push notification requests and results."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from notify_chat.domain.entities import DrainResult, NotificationOutcome


class DirectNotificationRequest(BaseModel):
    """Payload used to notify a recipient immediately, bypassing the queue.

    Fields are accepted both in camelCase and snake_case.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    recipient_id: str = Field(..., min_length=1, description="User who receives the notification")
    message_id: str | None = None
    conversation_id: str | None = None
    sender_id: str | None = None
    sender_name: str | None = None
    message_text: str | None = None


class ProcessedNotificationRead(BaseModel):
    id: str
    message_id: str | None = None
    status: str
    summary: str


class DrainErrorRead(BaseModel):
    id: str | None = None
    error: str


class QueueStatusResponse(BaseModel):
    """Result of a queue drain triggered with ``GET``."""

    status: str
    timestamp: datetime
    processed: list[ProcessedNotificationRead] = Field(default_factory=list)
    errors: list[DrainErrorRead] = Field(default_factory=list)
    summary: str
    api_version: str


class ProcessQueueResponse(BaseModel):
    """Result of a queue drain triggered with ``{"action": "process_queue"}``."""

    success: bool = True
    processed: list[ProcessedNotificationRead] = Field(default_factory=list)
    errors: list[DrainErrorRead] = Field(default_factory=list)
    api_version: str


class NotificationOutcomeRead(BaseModel):
    success: bool
    message: str | None = None
    error: str | None = None
    success_count: int = 0
    failure_count: int = 0

    @classmethod
    def from_outcome(cls, outcome: NotificationOutcome) -> "NotificationOutcomeRead":
        return cls(
            success=outcome.success,
            message=outcome.summary if outcome.success else None,
            error=outcome.error,
            success_count=outcome.success_count,
            failure_count=outcome.failure_count,
        )


class PushHealthResponse(BaseModel):
    status: str
    timestamp: datetime
    auth_strategy: str
    has_service_account: bool
    has_server_key: bool
    has_project_id: bool


def drain_items(result: DrainResult) -> tuple[list[ProcessedNotificationRead], list[DrainErrorRead]]:
    """Convert a :class:`DrainResult` into response items."""

    processed = [
        ProcessedNotificationRead(
            id=item.id, message_id=item.message_id, status=item.status, summary=item.summary
        )
        for item in result.processed
    ]
    errors = [DrainErrorRead(id=item.id, error=item.error) for item in result.errors]
    return processed, errors


__all__ = [
    "DirectNotificationRequest",
    "DrainErrorRead",
    "NotificationOutcomeRead",
    "ProcessQueueResponse",
    "ProcessedNotificationRead",
    "PushHealthResponse",
    "QueueStatusResponse",
    "drain_items",
]
