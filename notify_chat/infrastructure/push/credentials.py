"""OAuth2 credential minting and gateway authorization strategies."""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any, Protocol

import httpx

from notify_chat.domain.entities import ACCESS_TOKEN_LIFETIME, AccessToken, ServiceAccountCredential
from notify_chat.domain.errors import AuthError, ConfigurationError, TransportError
from notify_chat.utils import utc_now

from .jwt import RS256Signer, Signer, build_assertion_claims, encode_jwt

logger = logging.getLogger(__name__)

GRANT_TYPE_JWT_BEARER = "urn:ietf:params:oauth:grant-type:jwt-bearer"
DEFAULT_TOKEN_URL = "https://oauth2.googleapis.com/token"
DEFAULT_SCOPE = "https://www.googleapis.com/auth/firebase.messaging"
DEFAULT_TIMEOUT_SECONDS = 10.0
TOKEN_REFRESH_LEEWAY = timedelta(seconds=60)
AUTH_UNAVAILABLE_MESSAGE = "No authentication method available for FCM"

_REQUIRED_SERVICE_ACCOUNT_FIELDS = ("client_email", "private_key", "project_id")


def parse_service_account(raw: str | Mapping[str, Any]) -> ServiceAccountCredential:
    """Build a :class:`ServiceAccountCredential` from its JSON document."""

    if isinstance(raw, str):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Service account JSON is malformed: {exc.msg}") from exc
    else:
        data = raw

    if not isinstance(data, Mapping):
        raise ConfigurationError("Service account JSON must be an object")

    missing = [
        name
        for name in _REQUIRED_SERVICE_ACCOUNT_FIELDS
        if not isinstance(data.get(name), str) or not data.get(name).strip()
    ]
    if missing:
        raise ConfigurationError(
            "Service account JSON is missing required fields: " + ", ".join(missing)
        )

    return ServiceAccountCredential(
        client_email=data["client_email"].strip(),
        private_key=data["private_key"],
        project_id=data["project_id"].strip(),
    )


def load_service_account(
    *, inline_json: str | None, path: str | None
) -> ServiceAccountCredential | None:
    """Return the configured service account, or ``None`` when none is configured."""

    if inline_json and inline_json.strip():
        return parse_service_account(inline_json)
    if path and path.strip():
        try:
            content = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Could not read service account file {path}: {exc}") from exc
        return parse_service_account(content)
    return None


def _describe_error_response(response: httpx.Response) -> str:
    text = response.text.strip()
    try:
        payload = response.json()
    except ValueError:
        return text or response.reason_phrase
    if isinstance(payload, Mapping):
        description = payload.get("error_description")
        error = payload.get("error")
        if description and error:
            return f"{error}: {description}"
        if description or error:
            return str(description or error)
    return text or response.reason_phrase


class CredentialMinter:
    """Exchange a signed JWT assertion for an OAuth2 access token."""

    def __init__(
        self,
        *,
        token_url: str = DEFAULT_TOKEN_URL,
        scope: str = DEFAULT_SCOPE,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.Client | None = None,
        signer_factory: Callable[[str], Signer] = RS256Signer,
    ) -> None:
        self.token_url = token_url
        self.scope = scope
        self.timeout_seconds = timeout_seconds
        self._client = client or httpx.Client(timeout=timeout_seconds)
        self._owns_client = client is None
        self._signer_factory = signer_factory

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def build_assertion(self, service_account: ServiceAccountCredential) -> str:
        """Return a signed JWT assertion for the JWT bearer grant."""

        issued_at = int(utc_now().timestamp())
        claims = build_assertion_claims(
            issuer=service_account.client_email,
            scope=self.scope,
            audience=self.token_url,
            issued_at=issued_at,
        )
        signer = self._signer_factory(service_account.private_key)
        return encode_jwt(claims, signer)

    def mint(self, service_account: ServiceAccountCredential) -> AccessToken:
        """Mint a new access token for ``service_account``.

        Raises :class:`ConfigurationError` when the key cannot be loaded,
        :class:`AuthError` when the exchange is rejected and
        :class:`TransportError` when the token endpoint is unreachable.
        """

        assertion = self.build_assertion(service_account)
        issued = utc_now()
        try:
            response = self._client.post(
                self.token_url,
                data={"grant_type": GRANT_TYPE_JWT_BEARER, "assertion": assertion},
                headers={"Accept": "application/json"},
                timeout=self.timeout_seconds,
            )
        except httpx.TimeoutException as exc:
            raise TransportError(f"OAuth token request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"OAuth token request failed: {exc}") from exc

        if response.status_code != 200:
            detail = _describe_error_response(response)
            logger.error(
                "Token exchange for %s failed with status %s: %s",
                service_account.client_email,
                response.status_code,
                detail,
            )
            raise AuthError(f"Token exchange failed with status {response.status_code}: {detail}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise AuthError("Token endpoint returned a non-JSON response") from exc

        token = payload.get("access_token") if isinstance(payload, Mapping) else None
        if not isinstance(token, str) or not token:
            raise AuthError("Token endpoint response is missing access_token")

        lifetime = ACCESS_TOKEN_LIFETIME
        expires_in = payload.get("expires_in")
        if isinstance(expires_in, int) and 0 < expires_in < lifetime.total_seconds():
            lifetime = timedelta(seconds=expires_in)

        logger.info("OAuth access token minted for project %s", service_account.project_id)
        return AccessToken(
            token=token,
            issued_at=issued,
            expires_at=issued + lifetime,
            token_type=str(payload.get("token_type") or "Bearer"),
        )


class GatewayAuthorization(Protocol):
    """Authorization header value for push gateway requests."""

    def header(self) -> str:
        ...

    def is_expired(self) -> bool:
        ...


@dataclass(frozen=True)
class BearerTokenAuth:
    access_token: AccessToken

    def header(self) -> str:
        return f"Bearer {self.access_token.token}"

    def is_expired(self) -> bool:
        return self.access_token.is_expired()


@dataclass(frozen=True)
class LegacyServerKeyAuth:
    server_key: str = field(repr=False)

    def header(self) -> str:
        return f"key={self.server_key}"

    def is_expired(self) -> bool:
        return False


class CredentialProvider(Protocol):
    """Source of gateway authorization selected once from configuration."""

    strategy: str
    project_id: str

    def authorization(self) -> GatewayAuthorization:
        ...


class OAuthCredentialProvider:
    """Mint bearer tokens from a service account and reuse them until close to expiry."""

    strategy = "oauth"

    def __init__(
        self,
        minter: CredentialMinter,
        service_account: ServiceAccountCredential,
        *,
        project_id: str | None = None,
        refresh_leeway: timedelta = TOKEN_REFRESH_LEEWAY,
    ) -> None:
        self.minter = minter
        self.service_account = service_account
        self.project_id = project_id or service_account.project_id
        self.refresh_leeway = refresh_leeway
        self._cached: AccessToken | None = None
        self._lock = threading.Lock()

    def authorization(self) -> BearerTokenAuth:
        with self._lock:
            cached = self._cached
            if cached is None or cached.is_expired(leeway=self.refresh_leeway):
                cached = self.minter.mint(self.service_account)
                self._cached = cached
            return BearerTokenAuth(cached)

    def invalidate(self) -> None:
        with self._lock:
            self._cached = None


class LegacyKeyCredentialProvider:
    """Authorize gateway requests with a static legacy server key."""

    strategy = "legacy"

    def __init__(self, server_key: str, *, project_id: str) -> None:
        self._auth = LegacyServerKeyAuth(server_key)
        self.project_id = project_id

    def authorization(self) -> LegacyServerKeyAuth:
        return self._auth


class UnconfiguredCredentialProvider:
    """Provider used when no credentials are configured; every request fails."""

    strategy = "none"

    def __init__(self, reason: str, *, project_id: str | None = None) -> None:
        self.reason = reason
        self.project_id = project_id or ""

    def authorization(self) -> GatewayAuthorization:
        raise ConfigurationError(self.reason)


__all__ = [
    "AUTH_UNAVAILABLE_MESSAGE",
    "BearerTokenAuth",
    "CredentialMinter",
    "CredentialProvider",
    "GRANT_TYPE_JWT_BEARER",
    "GatewayAuthorization",
    "LegacyKeyCredentialProvider",
    "LegacyServerKeyAuth",
    "OAuthCredentialProvider",
    "UnconfiguredCredentialProvider",
    "load_service_account",
    "parse_service_account",
]
