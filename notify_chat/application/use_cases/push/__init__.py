"""Use cases for delivering chat push notifications."""

from .drain_queue import BatchAuthorization, NotificationQueue, deliver_notification, drain_queue
from .fan_out import fan_out
from .send_direct import DIRECT_NOTIFICATION_PREFIX, send_direct_notification

__all__ = [
    "BatchAuthorization",
    "DIRECT_NOTIFICATION_PREFIX",
    "NotificationQueue",
    "deliver_notification",
    "drain_queue",
    "fan_out",
    "send_direct_notification",
]
