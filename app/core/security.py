"""
Password hashing and access tokens.

Passwords: PBKDF2-HMAC-SHA256, stored as
    pbkdf2_sha256$<iterations>$<salt_hex>$<hash_hex>

Tokens: <payload>.<signature>, both base64url without padding.
    payload   = JSON {"sub": <user_id>, "exp": <unix seconds>}
    signature = HMAC-SHA256(SECRET_KEY, payload)
"""
from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import secrets
import time
from typing import Optional

from app.core.config import settings
from app.core.errors import AuthenticationError

_ALGORITHM = "pbkdf2_sha256"
_ITERATIONS = 200_000


def hash_password(password: str, iterations: int = _ITERATIONS) -> str:
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt, iterations)
    return f"{_ALGORITHM}${iterations}${salt.hex()}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        algorithm, iterations, salt_hex, digest_hex = stored.split("$")
        if algorithm != _ALGORITHM:
            return False
        digest = hashlib.pbkdf2_hmac(
            "sha256", password.encode(), bytes.fromhex(salt_hex), int(iterations)
        )
    except ValueError:
        return False
    return hmac.compare_digest(digest.hex(), digest_hex)


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def _b64decode(text: str) -> bytes:
    return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))


def _sign(payload: str, secret: str) -> str:
    return _b64encode(hmac.new(secret.encode(), payload.encode(), hashlib.sha256).digest())


def create_access_token(
    user_id: int,
    ttl_seconds: Optional[int] = None,
    secret: Optional[str] = None,
    now: Optional[float] = None,
) -> str:
    ttl = settings.ACCESS_TOKEN_TTL_SECONDS if ttl_seconds is None else ttl_seconds
    issued = time.time() if now is None else now
    body = json.dumps({"sub": user_id, "exp": int(issued + ttl)}, separators=(",", ":"))
    payload = _b64encode(body.encode())
    return f"{payload}.{_sign(payload, secret or settings.SECRET_KEY)}"


def decode_access_token(
    token: str,
    secret: Optional[str] = None,
    now: Optional[float] = None,
) -> int:
    """Return the user id in `token`. Raises AuthenticationError otherwise."""
    try:
        payload, signature = token.split(".")
    except ValueError:
        raise AuthenticationError("Invalid access token.") from None

    expected = _sign(payload, secret or settings.SECRET_KEY)
    if not hmac.compare_digest(signature.encode(), expected.encode()):
        raise AuthenticationError("Invalid access token.")

    try:
        claims = json.loads(_b64decode(payload))
        user_id = int(claims["sub"])
        expires = float(claims["exp"])
    except (binascii.Error, ValueError, KeyError, TypeError):
        raise AuthenticationError("Invalid access token.") from None

    if expires <= (time.time() if now is None else now):
        raise AuthenticationError("Access token has expired.")
    return user_id
