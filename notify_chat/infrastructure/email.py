"""Helpers for sending welcome emails.

SendGrid is used when configured, otherwise Mailgun and then Resend. Only
the first configured provider is tried.
"""

from __future__ import annotations

import json
import logging
from html import escape
from typing import Any

import httpx
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import From, Mail, To

from notify_chat.config import get_settings

logger = logging.getLogger(__name__)

MAILGUN_API_URL = "https://api.mailgun.net/v3/{domain}/messages"
RESEND_API_URL = "https://api.resend.com/emails"
EMAIL_TIMEOUT_SECONDS = 10.0
APP_NAME = "EduBazaar"
APP_URL = "https://edubazaar.com"
GOOGLE_LOGIN_METHOD = "google"


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, "", b""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        messages: list[str] = []
        for item in parsed.get("errors") or []:
            if not isinstance(item, dict) or not item.get("message"):
                continue
            if item.get("field"):
                messages.append(f"{item['field']}: {item['message']}")
            else:
                messages.append(str(item["message"]))
        if messages:
            return "; ".join(messages)
        return json.dumps(parsed, default=str)

    if isinstance(parsed, list):
        return "; ".join(str(item) for item in parsed)

    return None


def _log_sendgrid_failure(status_code: Any, body: Any, exc: Exception | None = None) -> None:
    details = _extract_sendgrid_error_details(body)
    if status_code and details:
        logger.error("SendGrid request failed with status %s: %s", status_code, details)
    elif status_code:
        logger.error("SendGrid request failed with status %s", status_code)
    elif details:
        logger.error("SendGrid request failed: %s", details)
    elif exc is not None:
        logger.exception("Error sending email via SendGrid: %s", exc)


def send_email(subject: str, html_content: str, recipient: str, *, recipient_name: str | None = None) -> bool:
    """Send an email using the configured SendGrid credentials."""

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info("SendGrid configuration incomplete; skipping email delivery")
        return False

    message = Mail(
        from_email=From(settings.sendgrid_sender, settings.sendgrid_sender_name),
        to_emails=To(recipient, recipient_name),
        subject=subject,
        html_content=html_content,
    )

    try:
        client = SendGridAPIClient(settings.sendgrid_api_key)
        response = client.send(message)
    except Exception as exc:  # pragma: no cover - network failures depend on environment
        _log_sendgrid_failure(getattr(exc, "status_code", None), getattr(exc, "body", None), exc)
        return False

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        _log_sendgrid_failure(status_code, getattr(response, "body", None))
        return False

    return True


def _post_email(
    provider: str,
    url: str,
    client: httpx.Client | None,
    **request: Any,
) -> bool:
    http = client or httpx.Client(timeout=EMAIL_TIMEOUT_SECONDS)
    try:
        response = http.post(url, **request)
    except httpx.HTTPError as exc:
        logger.error("%s request failed: %s", provider, exc)
        return False
    finally:
        if client is None:
            http.close()

    if not response.is_success:
        logger.error(
            "%s request failed with status %s: %s",
            provider,
            response.status_code,
            response.text.strip() or response.reason_phrase,
        )
        return False
    return True


def _sender_header() -> str:
    settings = get_settings()
    return f"{settings.email_sender_name} <{settings.email_sender}>"


def send_with_mailgun(
    subject: str, html_content: str, recipient: str, *, client: httpx.Client | None = None
) -> bool:
    """Send an email through the Mailgun messages API."""

    settings = get_settings()
    if not (settings.mailgun_api_key and settings.mailgun_domain):
        logger.info("Mailgun configuration incomplete; skipping email delivery")
        return False

    return _post_email(
        "Mailgun",
        MAILGUN_API_URL.format(domain=settings.mailgun_domain),
        client,
        auth=("api", settings.mailgun_api_key),
        data={
            "from": _sender_header(),
            "to": recipient,
            "subject": subject,
            "html": html_content,
        },
    )


def send_with_resend(
    subject: str, html_content: str, recipient: str, *, client: httpx.Client | None = None
) -> bool:
    """Send an email through the Resend API."""

    settings = get_settings()
    if not settings.resend_api_key:
        logger.info("Resend configuration incomplete; skipping email delivery")
        return False

    return _post_email(
        "Resend",
        RESEND_API_URL,
        client,
        headers={"Authorization": f"Bearer {settings.resend_api_key}"},
        json={
            "from": _sender_header(),
            "to": [recipient],
            "subject": subject,
            "html": html_content,
        },
    )


def render_welcome_email(user_name: str, *, login_method: str | None = None) -> tuple[str, str]:
    """Return the subject and HTML body of the welcome email."""

    name = escape(user_name)
    if (login_method or "").lower() == GOOGLE_LOGIN_METHOD:
        subject = f"Welcome to {APP_NAME}! Your Google account is connected"
        intro = (
            f"<p>You signed in to {APP_NAME} with your Google account. "
            "You can use the same account every time you log in.</p>"
        )
    else:
        subject = f"Welcome to {APP_NAME}!"
        intro = (
            f"<p>We're thrilled to have you join the {APP_NAME} community "
            "of students, learners and educators.</p>"
        )

    html_content = "".join(
        (
            "<!DOCTYPE html><html><head><meta charset=\"utf-8\">",
            f"<title>{subject}</title></head><body>",
            f"<h1>Welcome to {APP_NAME}!</h1>",
            f"<h2>Hello {name}!</h2>",
            intro,
            "<ul>",
            "<li><strong>Buy &amp; Sell:</strong> list textbooks, electronics and more</li>",
            "<li><strong>Join Study Groups:</strong> connect with fellow students</li>",
            "<li><strong>Chat &amp; Network:</strong> message other members directly</li>",
            "</ul>",
            f"<p><a href=\"{APP_URL}\">Start exploring</a></p>",
            f"<p><strong>The {APP_NAME} Team</strong></p>",
            f"<p>This email was sent because you signed up for {APP_NAME}.</p>",
            "</body></html>",
        )
    )
    return subject, html_content


def send_welcome_email(email: str, user_name: str, *, login_method: str | None = None) -> bool:
    """Send the welcome email through the first configured provider."""

    settings = get_settings()
    subject, html_content = render_welcome_email(user_name, login_method=login_method)
    if settings.sendgrid_api_key and settings.sendgrid_sender:
        return send_email(subject, html_content, email, recipient_name=user_name)
    if settings.mailgun_api_key and settings.mailgun_domain:
        return send_with_mailgun(subject, html_content, email)
    if settings.resend_api_key:
        return send_with_resend(subject, html_content, email)

    logger.warning("No email provider configured; set up SendGrid, Mailgun or Resend")
    return False


__all__ = [
    "render_welcome_email",
    "send_email",
    "send_welcome_email",
    "send_with_mailgun",
    "send_with_resend",
]
