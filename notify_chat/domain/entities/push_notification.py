"""Domain entities describing queued chat push notifications."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from notify_chat.domain.errors import NoTargetsError

PUSH_STATUS_PENDING = "pending"
PUSH_STATUS_PROCESSING = "processing"
PUSH_STATUS_SENT = "sent"
PUSH_STATUS_FAILED = "failed"

DEFAULT_DEVICE_TYPE = "android"


@dataclass(frozen=True)
class DeviceTarget:
    """A registered device token belonging to the notification recipient."""

    token: str
    device_type: str = DEFAULT_DEVICE_TYPE


def unique_targets(targets: Iterable[DeviceTarget]) -> tuple[DeviceTarget, ...]:
    """Return ``targets`` without repeated tokens, keeping the first occurrence."""

    seen: set[str] = set()
    unique: list[DeviceTarget] = []
    for target in targets:
        if not target.token or target.token in seen:
            continue
        seen.add(target.token)
        unique.append(target)
    return tuple(unique)


@dataclass(frozen=True)
class PendingNotification:
    """One delivery intent claimed from the push queue.

    ``device_targets`` is ordered and unique by token. The entity is not
    modified once claimed; only its terminal status is written back to the
    queue.
    """

    id: str
    message_id: str | None
    conversation_id: str | None
    sender_id: str | None
    sender_name: str | None
    message_text: str | None
    device_targets: tuple[DeviceTarget, ...] = field(default_factory=tuple)
    recipient_id: str | None = None
    created_at: datetime | None = None

    def require_targets(self) -> tuple[DeviceTarget, ...]:
        """Return the device targets or raise :class:`NoTargetsError` when empty."""

        if not self.device_targets:
            raise NoTargetsError("No device targets found for notification")
        return self.device_targets


__all__ = [
    "DEFAULT_DEVICE_TYPE",
    "DeviceTarget",
    "PUSH_STATUS_FAILED",
    "PUSH_STATUS_PENDING",
    "PUSH_STATUS_PROCESSING",
    "PUSH_STATUS_SENT",
    "PendingNotification",
    "unique_targets",
]
