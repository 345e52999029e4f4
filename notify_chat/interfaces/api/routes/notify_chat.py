"""Endpoints that drain the push queue or send chat notifications directly."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from notify_chat.application.use_cases.push import drain_queue, send_direct_notification
from notify_chat.config import Settings, get_settings
from notify_chat.domain.entities import DrainResult
from notify_chat.infrastructure.push import PushGateway
from notify_chat.infrastructure.repositories import (
    DeviceTokenRepository,
    PushNotificationQueueRepository,
)
from notify_chat.interfaces.api.dependencies import (
    get_device_tokens,
    get_gateway,
    get_notification_queue,
)
from notify_chat.interfaces.api.schemas import (
    DirectNotificationRequest,
    NotificationOutcomeRead,
    ProcessQueueResponse,
    PushHealthResponse,
    QueueStatusResponse,
    drain_items,
)
from notify_chat.utils import utc_now

router = APIRouter(prefix="/notify-chat", tags=["push-notifications"])

API_VERSION = "FCM HTTP v1 API"
PROCESS_QUEUE_ACTION = "process_queue"


def _drain(queue: PushNotificationQueueRepository, gateway: PushGateway) -> DrainResult:
    return drain_queue(
        queue,
        credentials=gateway.credentials,
        dispatcher=gateway.dispatcher,
        batch_size=gateway.batch_size,
        channel_id=gateway.android_channel_id,
    )


@router.get("", response_model=QueueStatusResponse)
def process_queue(
    queue: PushNotificationQueueRepository = Depends(get_notification_queue),
    gateway: PushGateway = Depends(get_gateway),
) -> QueueStatusResponse:
    """Drain one batch of pending notifications."""

    result = _drain(queue, gateway)
    processed, errors = drain_items(result)
    return QueueStatusResponse(
        status="Queue processing complete",
        timestamp=utc_now(),
        processed=processed,
        errors=errors,
        summary=result.summary,
        api_version=API_VERSION,
    )


@router.post("", response_model=None)
def handle_notification_request(
    payload: dict[str, Any] = Body(...),
    queue: PushNotificationQueueRepository = Depends(get_notification_queue),
    device_tokens: DeviceTokenRepository = Depends(get_device_tokens),
    gateway: PushGateway = Depends(get_gateway),
) -> ProcessQueueResponse | JSONResponse:
    """Drain the queue on ``{"action": "process_queue"}``, otherwise send directly."""

    action = payload.get("action")
    if action == PROCESS_QUEUE_ACTION:
        processed, errors = drain_items(_drain(queue, gateway))
        return ProcessQueueResponse(processed=processed, errors=errors, api_version=API_VERSION)
    if action is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported action: {action}",
        )

    try:
        request = DirectNotificationRequest.model_validate(payload)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc

    outcome = send_direct_notification(
        device_tokens,
        recipient_id=request.recipient_id,
        message_id=request.message_id,
        conversation_id=request.conversation_id,
        sender_id=request.sender_id,
        sender_name=request.sender_name,
        message_text=request.message_text,
        credentials=gateway.credentials,
        dispatcher=gateway.dispatcher,
        channel_id=gateway.android_channel_id,
    )
    body = NotificationOutcomeRead.from_outcome(outcome)
    return JSONResponse(
        status_code=status.HTTP_200_OK if outcome.success else status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(),
    )


@router.get("/health", response_model=PushHealthResponse)
def push_health(
    settings: Settings = Depends(get_settings),
    gateway: PushGateway = Depends(get_gateway),
) -> PushHealthResponse:
    """Report which push credentials are configured without exposing them."""

    return PushHealthResponse(
        status="running",
        timestamp=utc_now(),
        auth_strategy=gateway.credentials.strategy,
        has_service_account=bool(
            settings.firebase_service_account or settings.firebase_service_account_path
        ),
        has_server_key=bool(settings.fcm_server_key),
        has_project_id=bool(gateway.credentials.project_id),
    )
