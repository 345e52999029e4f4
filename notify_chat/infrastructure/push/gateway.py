"""Assemble the push pipeline collaborators from application settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

import httpx

from notify_chat.config import Settings, get_settings
from notify_chat.domain.errors import ConfigurationError

from .credentials import (
    CredentialMinter,
    CredentialProvider,
    LegacyKeyCredentialProvider,
    OAuthCredentialProvider,
    UnconfiguredCredentialProvider,
    load_service_account,
)
from .dispatcher import PushDispatcher

logger = logging.getLogger(__name__)


@dataclass
class PushGateway:
    """Collaborators shared by queue drains and direct sends."""

    credentials: CredentialProvider
    dispatcher: PushDispatcher
    batch_size: int
    claim_timeout_seconds: int
    android_channel_id: str
    client: httpx.Client | None = None

    def close(self) -> None:
        if self.client is not None:
            self.client.close()


def build_credential_provider(
    settings: Settings, *, client: httpx.Client | None = None
) -> CredentialProvider:
    """Select the authentication strategy once from configuration."""

    mode = settings.push_auth_mode
    if mode in ("auto", "oauth"):
        try:
            service_account = load_service_account(
                inline_json=settings.firebase_service_account,
                path=settings.firebase_service_account_path,
            )
        except ConfigurationError as exc:
            if mode == "oauth" or not settings.fcm_server_key:
                logger.error("Service account configuration is invalid: %s", exc)
                return UnconfiguredCredentialProvider(str(exc), project_id=settings.fcm_project_id)
            logger.warning("Service account configuration is invalid, using legacy key: %s", exc)
            service_account = None

        if service_account is not None:
            minter = CredentialMinter(
                token_url=settings.oauth_token_url,
                scope=settings.fcm_scope,
                timeout_seconds=settings.push_request_timeout_seconds,
                client=client,
            )
            return OAuthCredentialProvider(
                minter, service_account, project_id=settings.fcm_project_id
            )
        if mode == "oauth":
            return UnconfiguredCredentialProvider(
                "FIREBASE_SERVICE_ACCOUNT is not configured", project_id=settings.fcm_project_id
            )

    if settings.fcm_server_key:
        if not settings.fcm_project_id:
            return UnconfiguredCredentialProvider(
                "FCM_PROJECT_ID is required when using FCM_SERVER_KEY"
            )
        return LegacyKeyCredentialProvider(
            settings.fcm_server_key, project_id=settings.fcm_project_id
        )

    return UnconfiguredCredentialProvider(
        "Neither FIREBASE_SERVICE_ACCOUNT nor FCM_SERVER_KEY is configured",
        project_id=settings.fcm_project_id,
    )


def build_push_gateway(settings: Settings, *, client: httpx.Client | None = None) -> PushGateway:
    """Create the gateway collaborators; one HTTP client is shared by all of them."""

    owned_client = None
    if client is None:
        owned_client = client = httpx.Client(timeout=settings.push_request_timeout_seconds)
    credentials = build_credential_provider(settings, client=client)
    dispatcher = PushDispatcher(
        base_url=settings.fcm_base_url,
        timeout_seconds=settings.push_request_timeout_seconds,
        client=client,
    )
    logger.info("Push gateway configured with %s authentication", credentials.strategy)
    return PushGateway(
        credentials=credentials,
        dispatcher=dispatcher,
        batch_size=settings.push_batch_size,
        claim_timeout_seconds=settings.push_claim_timeout_seconds,
        android_channel_id=settings.push_android_channel_id,
        client=owned_client,
    )


@lru_cache(maxsize=1)
def get_push_gateway() -> PushGateway:
    """Return the process-wide gateway so minted tokens are reused between drains."""

    return build_push_gateway(get_settings())


def reset_push_gateway() -> None:
    if get_push_gateway.cache_info().currsize:
        get_push_gateway().close()
    get_push_gateway.cache_clear()


__all__ = [
    "PushGateway",
    "build_credential_provider",
    "build_push_gateway",
    "get_push_gateway",
    "reset_push_gateway",
]
