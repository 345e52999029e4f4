"""Helpers for working with UTC timestamps."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""

    return datetime.now(tz=timezone.utc)


def utc_now_naive() -> datetime:
    """Return the current UTC time without ``tzinfo`` for database columns."""

    return utc_now().replace(tzinfo=None)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Interpret naive values as UTC and convert aware values to UTC."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def isoformat_utc(value: datetime | None = None) -> str:
    """Return an ISO-8601 string in UTC with millisecond precision and ``Z`` suffix."""

    moment = ensure_utc(value) or utc_now()
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
