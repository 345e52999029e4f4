"""RS256 JSON Web Token assertions for the OAuth2 JWT bearer grant.

Assembly (base64url segments joined by dots) is kept apart from signing so
it can be exercised without key material. Signing goes through the
:class:`Signer` protocol; :class:`RS256Signer` implements it with a
python-jose JWK backed by ``cryptography``.
"""

from __future__ import annotations

import base64
import json
from collections.abc import Mapping
from typing import Any, Protocol

from cryptography.hazmat.primitives.asymmetric import rsa
from jose import jwk
from jose.constants import ALGORITHMS
from jose.exceptions import JOSEError

from notify_chat.domain.errors import AuthError, ConfigurationError

JWT_HEADER: Mapping[str, str] = {"alg": ALGORITHMS.RS256, "typ": "JWT"}
ASSERTION_LIFETIME_SECONDS = 3600


class Signer(Protocol):
    """Produce a signature over raw bytes."""

    algorithm: str

    def sign(self, data: bytes) -> bytes:
        ...


def base64url_encode(raw: bytes) -> str:
    """Encode ``raw`` as base64url without padding."""

    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _encode_segment(value: Mapping[str, Any]) -> str:
    return base64url_encode(json.dumps(value, separators=(",", ":")).encode("utf-8"))


def build_signing_input(header: Mapping[str, Any], claims: Mapping[str, Any]) -> str:
    """Return ``base64url(header).base64url(claims)``."""

    return f"{_encode_segment(header)}.{_encode_segment(claims)}"


def assemble_token(signing_input: str, signature: bytes) -> str:
    return f"{signing_input}.{base64url_encode(signature)}"


def build_assertion_claims(
    *,
    issuer: str,
    scope: str,
    audience: str,
    issued_at: int,
    lifetime_seconds: int = ASSERTION_LIFETIME_SECONDS,
) -> dict[str, Any]:
    return {
        "iss": issuer,
        "scope": scope,
        "aud": audience,
        "iat": issued_at,
        "exp": issued_at + lifetime_seconds,
    }


def normalize_private_key(private_key: str) -> str:
    """Restore newlines in PEM keys stored with escaped ``\\n`` sequences."""

    return private_key.replace("\\n", "\n").strip() + "\n"


class RS256Signer:
    """Sign with RSASSA-PKCS1-v1_5 and SHA-256 using a PKCS#8 PEM private key."""

    algorithm = ALGORITHMS.RS256

    def __init__(self, private_key_pem: str) -> None:
        if not private_key_pem or "PRIVATE KEY" not in private_key_pem:
            raise ConfigurationError("Service account private_key is not a PEM encoded private key")
        try:
            key = jwk.construct(normalize_private_key(private_key_pem), algorithm=self.algorithm)
        except JOSEError as exc:
            raise ConfigurationError(f"Could not parse service account private key: {exc}") from exc
        if key.is_public():
            raise ConfigurationError("Service account private_key holds a public key")
        if not isinstance(key.prepared_key, rsa.RSAPrivateKey):
            raise ConfigurationError("Service account private_key is not an RSA key")
        self._key = key

    def sign(self, data: bytes) -> bytes:
        try:
            return self._key.sign(data)
        except JOSEError as exc:
            raise AuthError(f"Could not sign JWT assertion: {exc}") from exc


def encode_jwt(claims: Mapping[str, Any], signer: Signer) -> str:
    """Build and sign a compact JWT for ``claims``."""

    header = {**JWT_HEADER, "alg": signer.algorithm}
    signing_input = build_signing_input(header, claims)
    signature = signer.sign(signing_input.encode("ascii"))
    return assemble_token(signing_input, signature)


__all__ = [
    "ASSERTION_LIFETIME_SECONDS",
    "JWT_HEADER",
    "RS256Signer",
    "Signer",
    "assemble_token",
    "base64url_encode",
    "build_assertion_claims",
    "build_signing_input",
    "encode_jwt",
    "normalize_private_key",
]
