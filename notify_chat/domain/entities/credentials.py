"""Entities for the push gateway signing identity and bearer tokens."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from notify_chat.utils import utc_now

ACCESS_TOKEN_LIFETIME = timedelta(seconds=3600)


@dataclass(frozen=True)
class ServiceAccountCredential:
    """Service account identity used to sign OAuth2 JWT assertions."""

    client_email: str
    private_key: str = field(repr=False)
    project_id: str


@dataclass(frozen=True)
class AccessToken:
    """Short-lived OAuth2 bearer credential returned by the token endpoint."""

    token: str = field(repr=False)
    issued_at: datetime
    expires_at: datetime
    token_type: str = "Bearer"

    def is_expired(self, *, at: datetime | None = None, leeway: timedelta = timedelta(0)) -> bool:
        moment = at or utc_now()
        return moment + leeway >= self.expires_at


__all__ = ["ACCESS_TOKEN_LIFETIME", "AccessToken", "ServiceAccountCredential"]
