"""Drain a batch of pending notifications from the push queue."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from notify_chat.domain.entities import (
    PUSH_STATUS_SENT,
    DrainError,
    DrainResult,
    NotificationOutcome,
    PendingNotification,
    ProcessedNotification,
)
from notify_chat.domain.errors import PushDeliveryError
from notify_chat.infrastructure.push import (
    AUTH_UNAVAILABLE_MESSAGE,
    DEFAULT_ANDROID_CHANNEL_ID,
    CredentialProvider,
    Dispatcher,
    GatewayAuthorization,
)

from .fan_out import fan_out

logger = logging.getLogger(__name__)


class NotificationQueue(Protocol):
    """Queue collaborator holding pending notifications."""

    def get_pending(self, limit: int) -> Sequence[PendingNotification]:
        ...

    def mark_terminal(
        self, notification_id: str, success: bool, error_message: str | None = None
    ) -> None:
        ...


class BatchAuthorization:
    """Resolve gateway authorization lazily, at most once per batch.

    A failed attempt is remembered so the rest of the batch fails with the
    same reason instead of retrying the token exchange per notification.
    The authorization is resolved again if it expires mid-batch.
    """

    def __init__(self, credentials: CredentialProvider) -> None:
        self._credentials = credentials
        self._authorization: GatewayAuthorization | None = None
        self._error: str | None = None

    @property
    def project_id(self) -> str:
        return self._credentials.project_id

    def resolve(self) -> tuple[GatewayAuthorization | None, str | None]:
        if self._error is None and (
            self._authorization is None or self._authorization.is_expired()
        ):
            try:
                self._authorization = self._credentials.authorization()
            except PushDeliveryError as exc:
                self._authorization = None
                self._error = f"{AUTH_UNAVAILABLE_MESSAGE}: {exc}"
                logger.error("Push gateway authorization failed: %s", exc)
        return self._authorization, self._error


def deliver_notification(
    notification: PendingNotification,
    batch_authorization: BatchAuthorization,
    *,
    dispatcher: Dispatcher,
    channel_id: str = DEFAULT_ANDROID_CHANNEL_ID,
) -> NotificationOutcome:
    """Authorize and fan out one notification."""

    authorization, error = batch_authorization.resolve()
    if authorization is None:
        return NotificationOutcome.failure(error or AUTH_UNAVAILABLE_MESSAGE)
    return fan_out(
        notification,
        authorization,
        batch_authorization.project_id,
        dispatcher=dispatcher,
        channel_id=channel_id,
    )


def _report(
    queue: NotificationQueue,
    notification: PendingNotification,
    outcome: NotificationOutcome,
    result: DrainResult,
) -> None:
    try:
        queue.mark_terminal(notification.id, outcome.success, outcome.error)
    except Exception as exc:
        logger.exception("Failed to record status of push notification %s", notification.id)
        result.errors.append(
            DrainError(id=notification.id, error=f"Failed to record notification status: {exc}")
        )
        return

    if outcome.success:
        result.processed.append(
            ProcessedNotification(
                id=notification.id,
                message_id=notification.message_id,
                status=PUSH_STATUS_SENT,
                summary=outcome.summary,
            )
        )
        logger.info("Notification %s sent successfully", notification.id)
    else:
        result.errors.append(DrainError(id=notification.id, error=outcome.error or outcome.summary))
        logger.error("Failed to send notification %s: %s", notification.id, outcome.error)


def drain_queue(
    queue: NotificationQueue,
    *,
    credentials: CredentialProvider,
    dispatcher: Dispatcher,
    batch_size: int,
    channel_id: str = DEFAULT_ANDROID_CHANNEL_ID,
) -> DrainResult:
    """Claim up to ``batch_size`` notifications, deliver them and record each outcome.

    Never raises: failures to read the queue are returned as a batch-level
    error, and each notification's failure is isolated from the others.
    """

    result = DrainResult()
    try:
        notifications = list(queue.get_pending(batch_size))
    except Exception as exc:
        logger.exception("Error fetching pending push notifications")
        result.errors.append(DrainError(id=None, error=str(exc) or exc.__class__.__name__))
        return result

    logger.info("Found %d pending push notifications", len(notifications))
    if not notifications:
        return result

    batch_authorization = BatchAuthorization(credentials)
    for notification in notifications:
        try:
            outcome = deliver_notification(
                notification,
                batch_authorization,
                dispatcher=dispatcher,
                channel_id=channel_id,
            )
        except Exception as exc:
            logger.exception("Error processing push notification %s", notification.id)
            outcome = NotificationOutcome.failure(str(exc) or exc.__class__.__name__)
        _report(queue, notification, outcome, result)

    logger.info(result.summary)
    return result


__all__ = ["BatchAuthorization", "NotificationQueue", "deliver_notification", "drain_queue"]
