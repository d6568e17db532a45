"""
JWT token utilities for the identity gate.

Tokens are issued by the external identity service; this module only needs to
decode them. ``create_access_token`` is kept for service-to-service calls and
for tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import ExpiredSignatureError, JWTError, jwt
from backend.app.core.config import settings


class TokenInvalidError(Exception):
    """Raised when a token cannot be decoded or has expired."""


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Data payload to encode in the token (should include: sub, name, role)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string

    Example payload:
        {
            "sub": "merchant@example.com",
            "name": "Jane Merchant",
            "role": "MERCHANT",
            "exp": 1234567890
        }
    """
    to_encode = data.copy()

    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a JWT access token.

    Raises:
        TokenInvalidError: if the signature is wrong, the token is malformed
            or it has expired.
    """
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except ExpiredSignatureError as exc:
        raise TokenInvalidError("Token has expired") from exc
    except JWTError as exc:
        raise TokenInvalidError("Could not validate credentials") from exc
