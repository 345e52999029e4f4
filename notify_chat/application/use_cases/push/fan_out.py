"""Deliver one notification to every device target of its recipient."""

from __future__ import annotations

import logging

from notify_chat.domain.entities import (
    DeviceTarget,
    DispatchOutcome,
    NotificationOutcome,
    PendingNotification,
)
from notify_chat.domain.errors import NoTargetsError
from notify_chat.infrastructure.push import (
    DEFAULT_ANDROID_CHANNEL_ID,
    Dispatcher,
    GatewayAuthorization,
    build_message,
    redact_token,
)

logger = logging.getLogger(__name__)


def _dispatch_to_target(
    notification: PendingNotification,
    target: DeviceTarget,
    authorization: GatewayAuthorization,
    project_id: str,
    *,
    dispatcher: Dispatcher,
    channel_id: str,
) -> DispatchOutcome:
    try:
        message = build_message(notification, target, channel_id=channel_id)
        return dispatcher.send(message, authorization, project_id)
    except Exception as exc:
        logger.exception(
            "Unexpected error sending notification %s to %s",
            notification.id,
            redact_token(target.token),
        )
        return DispatchOutcome(
            token=target.token, success=False, error=str(exc) or exc.__class__.__name__
        )


def fan_out(
    notification: PendingNotification,
    authorization: GatewayAuthorization,
    project_id: str,
    *,
    dispatcher: Dispatcher,
    channel_id: str = DEFAULT_ANDROID_CHANNEL_ID,
) -> NotificationOutcome:
    """Send ``notification`` to each device target and reduce the outcomes.

    Every target is attempted even when earlier ones fail. The notification
    succeeds when at least one device accepted the message.
    """

    try:
        targets = notification.require_targets()
    except NoTargetsError as exc:
        logger.warning("Notification %s has no device targets", notification.id)
        return NotificationOutcome.failure(str(exc))

    success_count = 0
    failure_count = 0
    last_error: str | None = None
    for target in targets:
        outcome = _dispatch_to_target(
            notification,
            target,
            authorization,
            project_id,
            dispatcher=dispatcher,
            channel_id=channel_id,
        )
        if outcome.success:
            success_count += 1
        else:
            failure_count += 1
            last_error = outcome.error

    result = NotificationOutcome.from_counts(
        success_count=success_count,
        failure_count=failure_count,
        last_error=last_error,
    )
    logger.info("Notification %s: %s", notification.id, result.summary)
    return result


__all__ = ["fan_out"]
