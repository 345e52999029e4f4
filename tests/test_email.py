"""Unit tests for the email helper utilities."""

from __future__ import annotations

import base64
import json
import types
from urllib.parse import parse_qs

import httpx
import pytest

from notify_chat.infrastructure import email as email_module


def _settings(**overrides) -> types.SimpleNamespace:
    values = {
        "sendgrid_api_key": None,
        "sendgrid_sender": None,
        "sendgrid_sender_name": None,
        "mailgun_api_key": None,
        "mailgun_domain": None,
        "resend_api_key": None,
        "email_sender": "noreply@edubazaar.com",
        "email_sender_name": "EduBazaar Team",
    }
    values.update(overrides)
    return types.SimpleNamespace(**values)


SENDGRID_SETTINGS = {"sendgrid_api_key": "SG.fake", "sendgrid_sender": "sender@example.com", "sendgrid_sender_name": "EduBazaar"}


class RecordingClient:
    """Stand-in for ``SendGridAPIClient`` that records sent messages."""

    sent: list = []

    def __init__(self, api_key: str):
        self.api_key = api_key

    def send(self, message):
        RecordingClient.sent.append((self.api_key, message))
        return types.SimpleNamespace(status_code=202, body=None)


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_send_email_without_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    """When SendGrid settings are missing the helper should exit early."""

    monkeypatch.setattr(email_module, "get_settings", lambda: _settings())

    assert email_module.send_email("Subject", "<p>Body</p>", "user@example.com") is False


def test_send_email_success(monkeypatch: pytest.MonkeyPatch) -> None:
    """A successful SendGrid response should return ``True``."""

    RecordingClient.sent = []
    monkeypatch.setattr(email_module, "get_settings", lambda: _settings(**SENDGRID_SETTINGS))
    monkeypatch.setattr(email_module, "SendGridAPIClient", RecordingClient)

    sent = email_module.send_email("Subject", "<p>Body</p>", "user@example.com", recipient_name="Ana")

    assert sent is True
    ((api_key, message),) = RecordingClient.sent
    assert api_key == "SG.fake"
    payload = message.get()
    assert payload["from"] == {"email": "sender@example.com", "name": "EduBazaar"}
    assert payload["subject"] == "Subject"
    assert payload["personalizations"][0]["to"] == [{"email": "user@example.com", "name": "Ana"}]
    assert payload["content"] == [{"type": "text/html", "value": "<p>Body</p>"}]


def test_send_email_logs_forbidden_error(monkeypatch: pytest.MonkeyPatch, caplog):
    """Forbidden responses from SendGrid should surface meaningful log details."""

    class FakeForbiddenError(Exception):
        status_code = 403
        body = json.dumps(
            {
                "errors": [
                    {
                        "message": "The provided authorization grant is invalid.",
                        "field": None,
                        "help": None,
                    }
                ]
            }
        ).encode()

    class FailingClient(RecordingClient):
        def send(self, message):
            raise FakeForbiddenError()

    monkeypatch.setattr(email_module, "get_settings", lambda: _settings(**SENDGRID_SETTINGS))
    monkeypatch.setattr(email_module, "SendGridAPIClient", FailingClient)

    with caplog.at_level("ERROR"):
        result = email_module.send_email("Subject", "<p>Body</p>", "user@example.com")

    assert result is False
    assert "status 403" in caplog.text
    assert "authorization grant is invalid" in caplog.text


def test_send_email_rejects_non_success_status(monkeypatch: pytest.MonkeyPatch, caplog) -> None:
    class BadRequestClient(RecordingClient):
        def send(self, message):
            return types.SimpleNamespace(status_code=400, body=b'{"errors": [{"field": "from.email", "message": "is invalid"}]}')

    monkeypatch.setattr(email_module, "get_settings", lambda: _settings(**SENDGRID_SETTINGS))
    monkeypatch.setattr(email_module, "SendGridAPIClient", BadRequestClient)

    with caplog.at_level("ERROR"):
        assert email_module.send_email("Subject", "<p>Body</p>", "user@example.com") is False
    assert "from.email: is invalid" in caplog.text


def test_mailgun_posts_form_with_basic_auth(monkeypatch: pytest.MonkeyPatch) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"id": "<1@mg.example.com>", "message": "Queued. Thank you."})

    monkeypatch.setattr(
        email_module,
        "get_settings",
        lambda: _settings(mailgun_api_key="mg-key", mailgun_domain="mg.example.com"),
    )

    sent = email_module.send_with_mailgun("Subject", "<p>Body</p>", "user@example.com", client=_client(handler))

    assert sent is True
    (request,) = requests
    assert str(request.url) == "https://api.mailgun.net/v3/mg.example.com/messages"
    assert request.headers["authorization"] == "Basic " + base64.b64encode(b"api:mg-key").decode()
    form = parse_qs(request.content.decode())
    assert form == {
        "from": ["EduBazaar Team <noreply@edubazaar.com>"],
        "to": ["user@example.com"],
        "subject": ["Subject"],
        "html": ["<p>Body</p>"],
    }


def test_mailgun_error_status_returns_false(monkeypatch: pytest.MonkeyPatch, caplog) -> None:
    monkeypatch.setattr(
        email_module,
        "get_settings",
        lambda: _settings(mailgun_api_key="mg-key", mailgun_domain="mg.example.com"),
    )
    client = _client(lambda request: httpx.Response(401, text="Forbidden"))

    with caplog.at_level("ERROR"):
        assert email_module.send_with_mailgun("Subject", "<p>Body</p>", "user@example.com", client=client) is False
    assert "Mailgun request failed with status 401: Forbidden" in caplog.text


def test_resend_posts_json_with_bearer_token(monkeypatch: pytest.MonkeyPatch) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"id": "email-1"})

    monkeypatch.setattr(email_module, "get_settings", lambda: _settings(resend_api_key="re_key"))

    sent = email_module.send_with_resend("Subject", "<p>Body</p>", "user@example.com", client=_client(handler))

    assert sent is True
    (request,) = requests
    assert str(request.url) == "https://api.resend.com/emails"
    assert request.headers["authorization"] == "Bearer re_key"
    assert json.loads(request.content) == {
        "from": "EduBazaar Team <noreply@edubazaar.com>",
        "to": ["user@example.com"],
        "subject": "Subject",
        "html": "<p>Body</p>",
    }


def test_resend_network_failure_returns_false(monkeypatch: pytest.MonkeyPatch, caplog) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("name resolution failed", request=request)

    monkeypatch.setattr(email_module, "get_settings", lambda: _settings(resend_api_key="re_key"))

    with caplog.at_level("ERROR"):
        assert email_module.send_with_resend("Subject", "<p>Body</p>", "user@example.com", client=_client(handler)) is False
    assert "name resolution failed" in caplog.text


def _record_providers(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    used: list[str] = []

    def recorder(name):
        def send(subject, html_content, recipient, **kwargs):
            used.append(name)
            return True

        return send

    monkeypatch.setattr(email_module, "send_email", recorder("sendgrid"))
    monkeypatch.setattr(email_module, "send_with_mailgun", recorder("mailgun"))
    monkeypatch.setattr(email_module, "send_with_resend", recorder("resend"))
    return used


@pytest.mark.parametrize(
    "configured, expected",
    [
        ({**SENDGRID_SETTINGS, "mailgun_api_key": "k", "mailgun_domain": "d", "resend_api_key": "r"}, "sendgrid"),
        ({"mailgun_api_key": "k", "mailgun_domain": "d", "resend_api_key": "r"}, "mailgun"),
        ({"resend_api_key": "r"}, "resend"),
    ],
)
def test_welcome_email_uses_first_configured_provider(
    monkeypatch: pytest.MonkeyPatch, configured: dict, expected: str
) -> None:
    used = _record_providers(monkeypatch)
    monkeypatch.setattr(email_module, "get_settings", lambda: _settings(**configured))

    assert email_module.send_welcome_email("ana@example.com", "Ana") is True
    assert used == [expected]


def test_welcome_email_without_providers_is_not_sent(monkeypatch: pytest.MonkeyPatch, caplog) -> None:
    used = _record_providers(monkeypatch)
    monkeypatch.setattr(email_module, "get_settings", lambda: _settings())

    with caplog.at_level("WARNING"):
        assert email_module.send_welcome_email("ana@example.com", "Ana") is False
    assert used == []
    assert "No email provider configured" in caplog.text


def test_error_details_join_field_messages() -> None:
    body = {"errors": [{"field": "from.email", "message": "does not match a verified Sender Identity"}, {"message": "second"}]}

    details = email_module._extract_sendgrid_error_details(json.dumps(body).encode())

    assert details == "from.email: does not match a verified Sender Identity; second"


def test_error_details_fall_back_to_plain_text() -> None:
    assert email_module._extract_sendgrid_error_details("  bad gateway ") == "bad gateway"
    assert email_module._extract_sendgrid_error_details(b"") is None


def test_welcome_email_escapes_user_name() -> None:
    subject, html = email_module.render_welcome_email("<Ana>")

    assert subject == "Welcome to EduBazaar!"
    assert "Hello &lt;Ana&gt;!" in html
    assert "<Ana>" not in html


def test_welcome_email_google_variant() -> None:
    subject, html = email_module.render_welcome_email("Ana", login_method="Google")

    assert "Google account" in subject
    assert "signed in to EduBazaar with your Google account" in html
