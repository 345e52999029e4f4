"""Build push gateway payloads for chat message notifications."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from notify_chat.domain.entities import DeviceTarget, PendingNotification
from notify_chat.utils import isoformat_utc

MESSAGE_EVENT_TYPE = "message_inserted"
NOTIFICATION_BODY_LIMIT = 100
DEFAULT_SENDER_NAME = "Someone"
EMPTY_MESSAGE_PLACEHOLDER = "Sent you a message"
DEFAULT_ANDROID_CHANNEL_ID = "chat_messages"
ANDROID_CLICK_ACTION = "FLUTTER_NOTIFICATION_CLICK"
ANDROID_ICON = "@mipmap/ic_launcher"
NOTIFICATION_SOUND = "default"


def build_title(sender_name: str | None) -> str:
    return f"New message from {sender_name or DEFAULT_SENDER_NAME}"


def build_body(message_text: str | None) -> str:
    """Return the notification body, never longer than ``NOTIFICATION_BODY_LIMIT``."""

    if message_text is None:
        return EMPTY_MESSAGE_PLACEHOLDER
    return message_text[:NOTIFICATION_BODY_LIMIT]


def redact_token(token: str | None) -> str:
    """Shorten a device token for log output."""

    if not token:
        return "<empty>"
    return f"{token[:20]}..."


def build_message(
    notification: PendingNotification,
    target: DeviceTarget,
    *,
    channel_id: str = DEFAULT_ANDROID_CHANNEL_ID,
    sent_at: datetime | None = None,
) -> dict[str, Any]:
    """Return the ``messages:send`` request body for one device target.

    Values in ``data`` are strings because the gateway only accepts a
    string-to-string map there.
    """

    return {
        "message": {
            "token": target.token,
            "notification": {
                "title": build_title(notification.sender_name),
                "body": build_body(notification.message_text),
            },
            "data": {
                "type": MESSAGE_EVENT_TYPE,
                "conversationId": notification.conversation_id or "",
                "messageId": notification.message_id or "",
                "senderId": notification.sender_id or "",
                "senderName": notification.sender_name or "",
                "timestamp": isoformat_utc(sent_at),
            },
            "android": {
                "notification": {
                    "sound": NOTIFICATION_SOUND,
                    "click_action": ANDROID_CLICK_ACTION,
                    "channel_id": channel_id,
                    "icon": ANDROID_ICON,
                }
            },
            "apns": {
                "payload": {
                    "aps": {
                        "sound": NOTIFICATION_SOUND,
                        "badge": 1,
                    }
                }
            },
        }
    }


__all__ = [
    "DEFAULT_ANDROID_CHANNEL_ID",
    "EMPTY_MESSAGE_PLACEHOLDER",
    "MESSAGE_EVENT_TYPE",
    "NOTIFICATION_BODY_LIMIT",
    "build_body",
    "build_message",
    "build_title",
    "redact_token",
]
