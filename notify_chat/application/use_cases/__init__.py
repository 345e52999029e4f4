"""Aggregate application use cases."""

from .push import drain_queue, fan_out, send_direct_notification
from .welcome_email import welcome_new_user

__all__ = [
    "drain_queue",
    "fan_out",
    "send_direct_notification",
    "welcome_new_user",
]
