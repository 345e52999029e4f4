"""FastAPI dependency utilities."""

from fastapi import Depends
from sqlalchemy.orm import Session

from notify_chat.infrastructure.database import get_db
from notify_chat.infrastructure.push import PushGateway, get_push_gateway
from notify_chat.infrastructure.repositories import (
    DeviceTokenRepository,
    PushNotificationQueueRepository,
)


def get_gateway() -> PushGateway:
    """Return the process-wide push gateway."""

    return get_push_gateway()


def get_notification_queue(
    db: Session = Depends(get_db),
    gateway: PushGateway = Depends(get_gateway),
) -> PushNotificationQueueRepository:
    """Return the queue repository bound to the request session."""

    return PushNotificationQueueRepository(
        db, claim_timeout_seconds=gateway.claim_timeout_seconds
    )


def get_device_tokens(db: Session = Depends(get_db)) -> DeviceTokenRepository:
    return DeviceTokenRepository(db)
