"""Repository implementations for infrastructure layer."""

from .device_token_repository import DeviceTokenRepository
from .push_notification_repository import (
    DEFAULT_CLAIM_TIMEOUT_SECONDS,
    PushNotificationQueueRepository,
)

__all__ = [
    "DEFAULT_CLAIM_TIMEOUT_SECONDS",
    "DeviceTokenRepository",
    "PushNotificationQueueRepository",
]
