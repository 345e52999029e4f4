"""Endpoint that sends the welcome email after a user signs up."""

from fastapi import APIRouter, HTTPException, status

from notify_chat.application.use_cases.welcome_email import welcome_new_user
from notify_chat.interfaces.api.schemas import WelcomeEmailRequest, WelcomeEmailResponse

router = APIRouter(tags=["email"])


@router.post("/welcome-email", response_model=WelcomeEmailResponse)
def send_welcome(payload: WelcomeEmailRequest) -> WelcomeEmailResponse:
    """Send the welcome email for a new account."""

    try:
        sent = welcome_new_user(
            user_id=payload.user_id,
            user_email=payload.user_email,
            user_name=payload.user_name,
            login_method=payload.login_method,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    if not sent:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to send welcome email",
        )

    return WelcomeEmailResponse(
        success=True,
        message="Welcome email sent successfully",
        user_id=payload.user_id,
        user_email=payload.user_email,
        user_name=payload.user_name,
        login_method=payload.login_method,
        timestamp=payload.timestamp,
    )
