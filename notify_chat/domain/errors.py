"""Error taxonomy for the push notification pipeline."""

from __future__ import annotations


class PushDeliveryError(RuntimeError):
    """Base class for failures raised while delivering push notifications."""


class ConfigurationError(PushDeliveryError):
    """Service account or project configuration is missing or malformed."""


class AuthError(PushDeliveryError):
    """The OAuth token exchange was rejected or the assertion could not be signed."""


class TransportError(PushDeliveryError):
    """An outbound request failed before a response was received."""


class GatewayError(PushDeliveryError):
    """The push gateway rejected a message or did not acknowledge it."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class NoTargetsError(PushDeliveryError):
    """A notification has no device tokens to deliver to."""


__all__ = [
    "AuthError",
    "ConfigurationError",
    "GatewayError",
    "NoTargetsError",
    "PushDeliveryError",
    "TransportError",
]
