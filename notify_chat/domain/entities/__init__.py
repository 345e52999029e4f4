"""Domain entities exposed by the application."""

from .credentials import ACCESS_TOKEN_LIFETIME, AccessToken, ServiceAccountCredential
from .delivery import (
    DispatchOutcome,
    DrainError,
    DrainResult,
    NotificationOutcome,
    ProcessedNotification,
)
from .push_notification import (
    DEFAULT_DEVICE_TYPE,
    PUSH_STATUS_FAILED,
    PUSH_STATUS_PENDING,
    PUSH_STATUS_PROCESSING,
    PUSH_STATUS_SENT,
    DeviceTarget,
    PendingNotification,
    unique_targets,
)

__all__ = [
    "ACCESS_TOKEN_LIFETIME",
    "AccessToken",
    "DEFAULT_DEVICE_TYPE",
    "DeviceTarget",
    "DispatchOutcome",
    "DrainError",
    "DrainResult",
    "NotificationOutcome",
    "PUSH_STATUS_FAILED",
    "PUSH_STATUS_PENDING",
    "PUSH_STATUS_PROCESSING",
    "PUSH_STATUS_SENT",
    "PendingNotification",
    "ProcessedNotification",
    "ServiceAccountCredential",
    "unique_targets",
]
