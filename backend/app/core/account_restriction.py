"""
Restricted account lookup using Redis.

The identity service flags blocked accounts in Redis so that every token they
hold stops working immediately, without waiting for token expiry.
"""

import logging
from typing import Optional
from backend.app.core import redis_client as redis_client_module
from backend.app.core.config import settings

logger = logging.getLogger(__name__)

# Redis key prefix for restricted accounts
RESTRICTED_ACCOUNT_PREFIX = "account:restricted:"


def restricted_account_key(email: str) -> str:
    return f"{RESTRICTED_ACCOUNT_PREFIX}{email.lower()}"


async def restrict_account(email: str, ttl_seconds: Optional[int] = None) -> bool:
    """
    Flag an account as restricted.

    Args:
        email: Account email (the token ``sub``)
        ttl_seconds: Flag lifetime, defaults to the max token lifetime

    Returns:
        True if the flag was written, False otherwise
    """
    if ttl_seconds is None:
        ttl_seconds = settings.access_token_expire_minutes * 60

    client = await redis_client_module.get_redis()
    try:
        await client.set(restricted_account_key(email), "1", ex=ttl_seconds)
        return True
    except Exception:
        logger.exception("Error restricting account %s", email)
        return False


async def is_account_restricted(email: str) -> bool:
    """
    Check whether an account has been restricted.

    Returns:
        True if restricted, False otherwise
    """
    client = await redis_client_module.get_redis()
    try:
        exists = await client.exists(restricted_account_key(email))
        return exists > 0
    except Exception:
        # Fail open: an unreachable Redis must not lock every caller out
        logger.warning("Restricted account check failed for %s", email, exc_info=True)
        return False
