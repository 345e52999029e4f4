"""ORM models used by the application infrastructure."""

from .device_token import DeviceTokenModel
from .push_notification import PushNotificationModel

__all__ = [
    "DeviceTokenModel",
    "PushNotificationModel",
]
