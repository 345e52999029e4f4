"""Send built messages to the push gateway and classify the responses."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol

import httpx

from notify_chat.domain.entities import DispatchOutcome
from notify_chat.domain.errors import ConfigurationError, GatewayError, PushDeliveryError, TransportError

from .credentials import GatewayAuthorization
from .messages import redact_token

logger = logging.getLogger(__name__)

DEFAULT_GATEWAY_URL = "https://fcm.googleapis.com"
ACKNOWLEDGEMENT_FIELD = "name"


class Dispatcher(Protocol):
    def send(
        self,
        message: Mapping[str, Any],
        authorization: GatewayAuthorization,
        project_id: str,
    ) -> DispatchOutcome:
        ...


def _describe_gateway_error(response: httpx.Response) -> str:
    text = response.text.strip()
    try:
        payload = response.json()
    except ValueError:
        return text or response.reason_phrase
    error = payload.get("error") if isinstance(payload, Mapping) else None
    if isinstance(error, Mapping):
        message = error.get("message")
        status = error.get("status")
        if message and status:
            return f"{message} ({status})"
        if message:
            return str(message)
    elif isinstance(error, str):
        return error
    return text or response.reason_phrase


class PushDispatcher:
    """Deliver one message to one device token over the gateway HTTP API."""

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_GATEWAY_URL,
        timeout_seconds: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._client = client or httpx.Client(timeout=timeout_seconds)
        self._owns_client = client is None

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def endpoint(self, project_id: str) -> str:
        return f"{self.base_url}/v1/projects/{project_id}/messages:send"

    def send(
        self,
        message: Mapping[str, Any],
        authorization: GatewayAuthorization,
        project_id: str,
    ) -> DispatchOutcome:
        """Send ``message`` and return the outcome; gateway and network errors are not raised."""

        token = str(message.get("message", {}).get("token") or "")
        try:
            message_name = self._post(message, authorization, project_id)
        except PushDeliveryError as exc:
            logger.error("Push to %s failed: %s", redact_token(token), exc)
            return DispatchOutcome(
                token=token,
                success=False,
                error=str(exc),
                status_code=getattr(exc, "status_code", None),
            )

        logger.info("Push to %s acknowledged as %s", redact_token(token), message_name)
        return DispatchOutcome(token=token, success=True, status_code=200, message_name=message_name)

    def _post(
        self,
        message: Mapping[str, Any],
        authorization: GatewayAuthorization,
        project_id: str,
    ) -> str:
        if not project_id:
            raise ConfigurationError("Push gateway project id is not configured")

        headers = {
            "Authorization": authorization.header(),
            "Content-Type": "application/json",
        }
        try:
            response = self._client.post(
                self.endpoint(project_id),
                json=dict(message),
                headers=headers,
                timeout=self.timeout_seconds,
            )
        except httpx.TimeoutException as exc:
            raise TransportError(f"Push gateway request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"Push gateway request failed: {exc}") from exc
        return self._acknowledgement(response)

    @staticmethod
    def _acknowledgement(response: httpx.Response) -> str:
        """Return the message name acknowledged by the gateway or raise :class:`GatewayError`."""

        if not response.is_success:
            raise GatewayError(
                f"HTTP {response.status_code}: {_describe_gateway_error(response)}",
                status_code=response.status_code,
                body=response.text,
            )
        try:
            payload = response.json()
        except ValueError:
            payload = None
        name = payload.get(ACKNOWLEDGEMENT_FIELD) if isinstance(payload, Mapping) else None
        if not isinstance(name, str) or not name:
            raise GatewayError(
                f"HTTP {response.status_code}: gateway response did not acknowledge the message",
                status_code=response.status_code,
                body=response.text,
            )
        return name


__all__ = ["ACKNOWLEDGEMENT_FIELD", "DEFAULT_GATEWAY_URL", "Dispatcher", "PushDispatcher"]
