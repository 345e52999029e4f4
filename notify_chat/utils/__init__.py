"""Utility helpers for reusable functionality."""

from .datetime import ensure_utc, isoformat_utc, utc_now, utc_now_naive

__all__ = [
    "ensure_utc",
    "isoformat_utc",
    "utc_now",
    "utc_now_naive",
]
