"""
Authentication dependencies for FastAPI.

This module is the identity gate: it turns a bearer credential into the
caller identity consumed by the parcel endpoints.
"""

import logging
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from backend.app.core.jwt import TokenInvalidError, decode_access_token
from backend.app.core.account_restriction import is_account_restricted

logger = logging.getLogger(__name__)

# auto_error is off so that a missing header is a 401, not FastAPI's default
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """
    FastAPI dependency for JWT authentication.

    Checks:
    1. A bearer credential is present (401 otherwise)
    2. The token signature and expiry are valid (403 otherwise)
    3. The token carries an account email in ``sub`` (403 otherwise)
    4. The account has not been restricted (403 otherwise)

    Returns:
        Decoded token payload containing ``sub`` (email), ``name`` and ``role``
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized access",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = decode_access_token(credentials.credentials)
    except TokenInvalidError as exc:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Forbidden access: {exc}",
        )

    email = payload.get("sub")
    if not email:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid token payload",
        )

    if await is_account_restricted(email):
        logger.info("Rejected request from restricted account %s", email)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account has been restricted",
        )

    return payload
