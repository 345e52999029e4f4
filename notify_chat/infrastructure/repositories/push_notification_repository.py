"""Persistence helpers for the push notification queue."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import timedelta

from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from notify_chat.domain.entities import (
    PUSH_STATUS_FAILED,
    PUSH_STATUS_PENDING,
    PUSH_STATUS_PROCESSING,
    PUSH_STATUS_SENT,
    DeviceTarget,
    PendingNotification,
)
from notify_chat.infrastructure.models import PushNotificationModel
from notify_chat.utils import ensure_utc, utc_now_naive

from .device_token_repository import DeviceTokenRepository

logger = logging.getLogger(__name__)

DEFAULT_CLAIM_TIMEOUT_SECONDS = 300


class PushNotificationQueueRepository:
    """Claim pending push notifications and record their terminal status."""

    def __init__(
        self,
        session: Session,
        *,
        claim_timeout_seconds: int = DEFAULT_CLAIM_TIMEOUT_SECONDS,
    ) -> None:
        self.session = session
        self.claim_timeout = timedelta(seconds=claim_timeout_seconds)

    def get_pending(self, limit: int) -> Sequence[PendingNotification]:
        """Claim up to ``limit`` of the oldest pending notifications.

        Rows are moved to ``processing`` so a concurrent drain skips them.
        Rows stuck in ``processing`` for longer than the claim timeout are
        claimed again, which is how a batch interrupted by a crash gets
        redelivered.
        """

        if limit <= 0:
            return []

        now = utc_now_naive()
        stale_before = now - self.claim_timeout
        query = (
            self.session.query(PushNotificationModel)
            .filter(
                or_(
                    PushNotificationModel.status == PUSH_STATUS_PENDING,
                    and_(
                        PushNotificationModel.status == PUSH_STATUS_PROCESSING,
                        PushNotificationModel.claimed_at < stale_before,
                    ),
                )
            )
            .order_by(PushNotificationModel.created_at.asc(), PushNotificationModel.id.asc())
            .limit(limit)
            .with_for_update(skip_locked=True)
        )
        models = query.all()
        if not models:
            self.session.commit()
            return []

        for model in models:
            model.status = PUSH_STATUS_PROCESSING
            model.claimed_at = now
            model.attempts = (model.attempts or 0) + 1
        self.session.commit()

        targets = DeviceTokenRepository(self.session).list_for_users(
            model.recipient_id for model in models
        )
        return [
            self._to_entity(model, targets.get(model.recipient_id, ()))
            for model in models
        ]

    def mark_terminal(
        self, notification_id: str, success: bool, error_message: str | None = None
    ) -> None:
        """Record the final status of a notification.

        Repeating the call with the same outcome leaves the row untouched.
        """

        status = PUSH_STATUS_SENT if success else PUSH_STATUS_FAILED
        error = None if success else error_message
        model = self.session.get(PushNotificationModel, notification_id)
        if model is None:
            logger.warning("Push notification %s not found; skipping status update", notification_id)
            return
        if model.status == status and model.error_message == error:
            return

        model.status = status
        model.error_message = error
        model.processed_at = utc_now_naive()
        self.session.add(model)
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

    def enqueue(
        self,
        *,
        recipient_id: str,
        message_id: str | None,
        conversation_id: str | None,
        sender_id: str | None,
        sender_name: str | None,
        message_text: str | None,
    ) -> str:
        """Insert a pending notification and return its queue identifier."""

        model = PushNotificationModel(
            recipient_id=recipient_id,
            message_id=message_id,
            conversation_id=conversation_id,
            sender_id=sender_id,
            sender_name=sender_name,
            message_text=message_text,
            status=PUSH_STATUS_PENDING,
            attempts=0,
            created_at=utc_now_naive(),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return model.id

    @staticmethod
    def _to_entity(
        model: PushNotificationModel, targets: Sequence[DeviceTarget]
    ) -> PendingNotification:
        return PendingNotification(
            id=model.id,
            message_id=model.message_id,
            conversation_id=model.conversation_id,
            sender_id=model.sender_id,
            sender_name=model.sender_name,
            message_text=model.message_text,
            device_targets=tuple(targets),
            recipient_id=model.recipient_id,
            created_at=ensure_utc(model.created_at),
        )


__all__ = ["DEFAULT_CLAIM_TIMEOUT_SECONDS", "PushNotificationQueueRepository"]
