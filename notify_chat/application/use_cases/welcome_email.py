"""Use case for greeting newly registered users by email."""

from __future__ import annotations

import logging

from notify_chat.infrastructure.email import send_welcome_email

logger = logging.getLogger(__name__)


def welcome_new_user(
    *,
    user_id: str | None,
    user_email: str | None,
    user_name: str | None,
    login_method: str | None = None,
) -> bool:
    """Send the welcome email, raising ``ValueError`` when required data is missing."""

    if not (user_id and user_email and user_name):
        raise ValueError("Missing required fields")

    sent = send_welcome_email(user_email, user_name, login_method=login_method)
    if sent:
        logger.info("Welcome email sent to user %s", user_id)
    else:
        logger.warning("Welcome email for user %s was not sent", user_id)
    return sent
