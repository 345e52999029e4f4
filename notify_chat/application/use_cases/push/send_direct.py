"""Send a chat notification immediately, bypassing the queue."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol
from uuid import uuid4

from notify_chat.domain.entities import (
    DeviceTarget,
    NotificationOutcome,
    PendingNotification,
    unique_targets,
)
from notify_chat.infrastructure.push import (
    DEFAULT_ANDROID_CHANNEL_ID,
    CredentialProvider,
    Dispatcher,
)

from .drain_queue import BatchAuthorization, deliver_notification

logger = logging.getLogger(__name__)

DIRECT_NOTIFICATION_PREFIX = "direct_"


class DeviceTokenLookup(Protocol):
    def list_for_user(self, user_id: str) -> Sequence[DeviceTarget]:
        ...


def send_direct_notification(
    device_tokens: DeviceTokenLookup,
    *,
    recipient_id: str,
    message_id: str | None,
    conversation_id: str | None,
    sender_id: str | None,
    sender_name: str | None,
    message_text: str | None,
    credentials: CredentialProvider,
    dispatcher: Dispatcher,
    channel_id: str = DEFAULT_ANDROID_CHANNEL_ID,
) -> NotificationOutcome:
    """Build a one-off notification for ``recipient_id`` and fan it out."""

    notification = PendingNotification(
        id=f"{DIRECT_NOTIFICATION_PREFIX}{uuid4().hex}",
        message_id=message_id,
        conversation_id=conversation_id,
        sender_id=sender_id,
        sender_name=sender_name,
        message_text=message_text,
        device_targets=unique_targets(device_tokens.list_for_user(recipient_id)),
        recipient_id=recipient_id,
    )
    if not notification.device_targets:
        logger.info("No device tokens registered for recipient %s", recipient_id)
        return NotificationOutcome.failure("No device targets found for recipient")

    logger.info(
        "Sending direct notification %s to %d devices",
        notification.id,
        len(notification.device_targets),
    )
    return deliver_notification(
        notification,
        BatchAuthorization(credentials),
        dispatcher=dispatcher,
        channel_id=channel_id,
    )


__all__ = ["DIRECT_NOTIFICATION_PREFIX", "send_direct_notification"]
