"""Push gateway delivery: credential minting, message building and dispatch."""

from .credentials import (
    AUTH_UNAVAILABLE_MESSAGE,
    BearerTokenAuth,
    CredentialMinter,
    CredentialProvider,
    GatewayAuthorization,
    LegacyKeyCredentialProvider,
    LegacyServerKeyAuth,
    OAuthCredentialProvider,
    UnconfiguredCredentialProvider,
    load_service_account,
    parse_service_account,
)
from .dispatcher import Dispatcher, PushDispatcher
from .gateway import (
    PushGateway,
    build_credential_provider,
    build_push_gateway,
    get_push_gateway,
    reset_push_gateway,
)
from .messages import DEFAULT_ANDROID_CHANNEL_ID, build_message, redact_token

__all__ = [
    "AUTH_UNAVAILABLE_MESSAGE",
    "BearerTokenAuth",
    "CredentialMinter",
    "CredentialProvider",
    "DEFAULT_ANDROID_CHANNEL_ID",
    "Dispatcher",
    "GatewayAuthorization",
    "LegacyKeyCredentialProvider",
    "LegacyServerKeyAuth",
    "OAuthCredentialProvider",
    "PushDispatcher",
    "PushGateway",
    "UnconfiguredCredentialProvider",
    "build_credential_provider",
    "build_message",
    "build_push_gateway",
    "get_push_gateway",
    "load_service_account",
    "parse_service_account",
    "redact_token",
    "reset_push_gateway",
]
