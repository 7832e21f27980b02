"""
JWT authentication for the dashboard API.

Tokens are HS256 (header.payload.signature) signed with ``JWT_SECRET`` and
carry the user's id, name and email. ``get_current_user`` is the FastAPI
dependency that verifies the ``Authorization: Bearer <token>`` header.
"""

import base64
import hashlib
import hmac
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Header

from services.config import get_settings
from services.errors import InvalidTokenError, TokenExpiredError, UnauthorizedError

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def _b64decode(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


def _sign(signing_input: str, secret: str) -> str:
    signature = hmac.new(secret.encode(), signing_input.encode(), hashlib.sha256).digest()
    return _b64encode(signature)


def create_jwt_token(
    user_id: str,
    email: str,
    name: Optional[str] = None,
    expires_in: Optional[timedelta] = None,
) -> str:
    """Create a signed JWT with user claims."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    expiry = now + (expires_in if expires_in is not None else timedelta(hours=settings.jwt_expiry_hours))
    payload = {
        "sub": user_id,
        "email": email,
        "name": name,
        "iat": int(now.timestamp()),
        "exp": int(expiry.timestamp()),
    }

    header = _b64encode(json.dumps({"alg": JWT_ALGORITHM, "typ": "JWT"}).encode())
    body = _b64encode(json.dumps(payload).encode())
    signing_input = f"{header}.{body}"
    return f"{signing_input}.{_sign(signing_input, settings.jwt_secret)}"


def decode_jwt_token(token: str) -> Dict[str, Any]:
    """
    Verify a JWT and return its claims.

    Raises:
        InvalidTokenError: malformed token or bad signature
        TokenExpiredError: signature is valid but ``exp`` is in the past
    """
    parts = token.split(".")
    if len(parts) != 3:
        raise InvalidTokenError()

    header_b64, payload_b64, sig_b64 = parts
    expected = _sign(f"{header_b64}.{payload_b64}", get_settings().jwt_secret)
    if not hmac.compare_digest(sig_b64, expected):
        raise InvalidTokenError()

    try:
        payload = json.loads(_b64decode(payload_b64))
    except (ValueError, TypeError) as e:
        logger.debug(f"JWT payload decode error: {e}")
        raise InvalidTokenError() from e

    if not isinstance(payload, dict):
        raise InvalidTokenError()

    if payload.get("exp", 0) < datetime.now(timezone.utc).timestamp():
        raise TokenExpiredError()

    return payload


async def get_current_user(authorization: Optional[str] = Header(None)) -> Dict[str, Any]:
    """Extract and verify the bearer token from the Authorization header."""
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthorizedError("Token de acesso não fornecido")

    token = authorization[7:].strip()
    if not token:
        raise UnauthorizedError("Token de acesso não fornecido")

    return decode_jwt_token(token)
