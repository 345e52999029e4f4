"""Shared fixtures for the notify-chat test suite."""

from __future__ import annotations

import json
import os
import sys
import tempfile
from datetime import timedelta
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
for path in (ROOT, Path(__file__).resolve().parent):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

_TEST_DB_DIR = Path(tempfile.mkdtemp(prefix="notify-chat-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DB_DIR / 'test.db'}"
for _name in (
    "FIREBASE_SERVICE_ACCOUNT",
    "FIREBASE_SERVICE_ACCOUNT_PATH",
    "FCM_SERVER_KEY",
    "FCM_PROJECT_ID",
    "PUSH_AUTH_MODE",
    "SENDGRID_API_KEY",
    "SENDGRID_SENDER",
    "MAILGUN_API_KEY",
    "MAILGUN_DOMAIN",
    "RESEND_API_KEY",
):
    os.environ.pop(_name, None)

from cryptography.hazmat.primitives import serialization  # noqa: E402
from cryptography.hazmat.primitives.asymmetric import rsa  # noqa: E402

from notify_chat.domain.entities import AccessToken, ServiceAccountCredential  # noqa: E402
from notify_chat.infrastructure.push import BearerTokenAuth  # noqa: E402
from notify_chat.utils import utc_now  # noqa: E402


@pytest.fixture(scope="session")
def rsa_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(rsa_private_key) -> str:
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture()
def service_account(private_key_pem: str) -> ServiceAccountCredential:
    return ServiceAccountCredential(
        client_email="pusher@demo-project.iam.gserviceaccount.com",
        private_key=private_key_pem,
        project_id="demo-project",
    )


@pytest.fixture()
def service_account_json(service_account: ServiceAccountCredential) -> str:
    return json.dumps(
        {
            "type": "service_account",
            "project_id": service_account.project_id,
            "private_key_id": "abc123",
            "private_key": service_account.private_key,
            "client_email": service_account.client_email,
            "token_uri": "https://oauth2.googleapis.com/token",
        }
    )


@pytest.fixture()
def bearer_auth() -> BearerTokenAuth:
    now = utc_now()
    return BearerTokenAuth(
        AccessToken(token="ya29.test-token", issued_at=now, expires_at=now + timedelta(hours=1))
    )


@pytest.fixture()
def db_session():
    """Yield a session bound to freshly created tables."""

    from notify_chat.infrastructure import database

    database.initialize_database()
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()
        database.Base.metadata.drop_all(bind=database.engine)
