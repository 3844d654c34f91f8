"""Password hashing and signed session tokens, stdlib only."""
from __future__ import annotations

import base64
import hashlib
import hmac
import json
import os
import time
from datetime import datetime, timedelta, timezone
from typing import Any

from ..config import get_settings

PBKDF2_ALGO = "sha256"
PBKDF2_ITERATIONS = 390000
PBKDF2_SALT_BYTES = 16
PASSWORD_PREFIX = "pbkdf2_sha256"


class InvalidSessionToken(ValueError):
    pass


def _b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _b64url_decode(value: str) -> bytes:
    padding = "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(value + padding)


def _pbkdf2(password: str, salt: bytes, iterations: int) -> bytes:
    return hashlib.pbkdf2_hmac(PBKDF2_ALGO, password.encode("utf-8"), salt, iterations)


def hash_password(password: str) -> str:
    salt = os.urandom(PBKDF2_SALT_BYTES)
    digest = _pbkdf2(password, salt, PBKDF2_ITERATIONS)
    return "$".join([PASSWORD_PREFIX, str(PBKDF2_ITERATIONS), _b64url_encode(salt), _b64url_encode(digest)])


def verify_password(password: str, password_hash: str) -> bool:
    parts = password_hash.split("$", 3)
    if len(parts) != 4 or parts[0] != PASSWORD_PREFIX:
        return False
    try:
        iterations = int(parts[1])
        salt = _b64url_decode(parts[2])
        expected = _b64url_decode(parts[3])
    except ValueError:
        return False
    return hmac.compare_digest(_pbkdf2(password, salt, iterations), expected)


def _json_segment(data: dict[str, Any]) -> str:
    return _b64url_encode(json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode("utf-8"))


def _sign(signing_input: str) -> bytes:
    settings = get_settings()
    if settings.jwt_algorithm.upper() != "HS256":
        raise ValueError("Only HS256 is supported")
    return hmac.new(settings.jwt_secret_key.encode("utf-8"), signing_input.encode("utf-8"), hashlib.sha256).digest()


def create_access_token(payload: dict[str, Any]) -> str:
    """Issue an HS256 JWT carrying ``payload`` plus an ``exp`` claim."""
    expires = datetime.now(timezone.utc) + timedelta(days=get_settings().jwt_expire_days)
    signing_input = ".".join([
        _json_segment({"alg": "HS256", "typ": "JWT"}),
        _json_segment({**payload, "exp": int(expires.timestamp())}),
    ])
    return f"{signing_input}.{_b64url_encode(_sign(signing_input))}"


def decode_access_token(token: str) -> dict[str, Any]:
    """Verify signature, algorithm and expiry; return the claims.

    Raises ``InvalidSessionToken`` (a ``ValueError``) on any failure.
    """
    segments = token.split(".")
    if len(segments) != 3:
        raise InvalidSessionToken("Invalid token format")
    header_b64, payload_b64, signature_b64 = segments

    try:
        signature = _b64url_decode(signature_b64)
        header = json.loads(_b64url_decode(header_b64))
        payload = json.loads(_b64url_decode(payload_b64))
    except ValueError as exc:
        raise InvalidSessionToken("Malformed token") from exc
    if not isinstance(header, dict) or not isinstance(payload, dict):
        raise InvalidSessionToken("Malformed token")

    if not hmac.compare_digest(signature, _sign(f"{header_b64}.{payload_b64}")):
        raise InvalidSessionToken("Invalid token signature")
    if str(header.get("alg") or "").upper() != "HS256":
        raise InvalidSessionToken("Unsupported token algorithm")

    try:
        exp = int(payload.get("exp"))
    except (TypeError, ValueError) as exc:
        raise InvalidSessionToken("Invalid token exp") from exc
    if exp <= int(time.time()):
        raise InvalidSessionToken("Token expired")
    return payload
