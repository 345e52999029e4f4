from .push import (
    DirectNotificationRequest,
    DrainErrorRead,
    NotificationOutcomeRead,
    ProcessQueueResponse,
    ProcessedNotificationRead,
    PushHealthResponse,
    QueueStatusResponse,
    drain_items,
)
from .welcome_email import WelcomeEmailRequest, WelcomeEmailResponse

__all__ = [
    "DirectNotificationRequest",
    "DrainErrorRead",
    "NotificationOutcomeRead",
    "ProcessQueueResponse",
    "ProcessedNotificationRead",
    "PushHealthResponse",
    "QueueStatusResponse",
    "WelcomeEmailRequest",
    "WelcomeEmailResponse",
    "drain_items",
]
