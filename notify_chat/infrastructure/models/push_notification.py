"""SQLAlchemy model for the push notification queue."""

from uuid import uuid4

from sqlalchemy import Column, DateTime, Index, Integer, String, Text

from notify_chat.domain.entities import PUSH_STATUS_PENDING
from notify_chat.infrastructure.database import Base
from notify_chat.utils import utc_now_naive


def _new_queue_id() -> str:
    return str(uuid4())


class PushNotificationModel(Base):
    """Database representation of one queued chat push notification."""

    __tablename__ = "push_notification_queue"
    __table_args__ = (
        Index("ix_push_notification_queue_status_created", "status", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=_new_queue_id)
    recipient_id = Column(String(64), nullable=False, index=True)
    message_id = Column(String(64), nullable=True)
    conversation_id = Column(String(64), nullable=True)
    sender_id = Column(String(64), nullable=True)
    sender_name = Column(String(120), nullable=True)
    message_text = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=PUSH_STATUS_PENDING)
    error_message = Column(Text, nullable=True)
    attempts = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(), nullable=False, default=utc_now_naive)
    claimed_at = Column(DateTime(), nullable=True)
    processed_at = Column(DateTime(), nullable=True)


__all__ = ["PushNotificationModel"]
