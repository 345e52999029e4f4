"""Outcome types produced while delivering push notifications."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DispatchOutcome:
    """Result of sending one message to one device token."""

    token: str
    success: bool
    error: str | None = None
    status_code: int | None = None
    message_name: str | None = None


@dataclass(frozen=True)
class NotificationOutcome:
    """Reduction of every :class:`DispatchOutcome` for one notification."""

    success: bool
    summary: str
    success_count: int = 0
    failure_count: int = 0
    last_error: str | None = None

    @property
    def total(self) -> int:
        return self.success_count + self.failure_count

    @property
    def error(self) -> str | None:
        """Message written to the queue when the notification failed."""

        return None if self.success else self.summary

    @classmethod
    def from_counts(
        cls, *, success_count: int, failure_count: int, last_error: str | None
    ) -> "NotificationOutcome":
        total = success_count + failure_count
        if success_count > 0:
            return cls(
                success=True,
                summary=f"Sent to {success_count}/{total} devices",
                success_count=success_count,
                failure_count=failure_count,
                last_error=last_error,
            )
        return cls(
            success=False,
            summary=f"Failed to send to all {total} devices. Last error: {last_error}",
            success_count=0,
            failure_count=failure_count,
            last_error=last_error,
        )

    @classmethod
    def failure(cls, error: str) -> "NotificationOutcome":
        """Build a failed outcome for errors raised before any dispatch happened."""

        return cls(success=False, summary=error, last_error=error)


@dataclass(frozen=True)
class ProcessedNotification:
    """Summary of a queued notification that reached at least one device."""

    id: str
    message_id: str | None
    status: str
    summary: str


@dataclass(frozen=True)
class DrainError:
    """Failure recorded for one notification, or for the batch when ``id`` is ``None``."""

    id: str | None
    error: str


@dataclass
class DrainResult:
    """Structured result returned by a queue drain."""

    processed: list[ProcessedNotification] = field(default_factory=list)
    errors: list[DrainError] = field(default_factory=list)

    @property
    def summary(self) -> str:
        return f"Processed {len(self.processed)} notifications, {len(self.errors)} errors"


__all__ = [
    "DispatchOutcome",
    "DrainError",
    "DrainResult",
    "NotificationOutcome",
    "ProcessedNotification",
]
