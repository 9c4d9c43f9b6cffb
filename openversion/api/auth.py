"""
Authentication dependency for the version API.

Shared personal access token, accepted from either header:
- X-Api-Key: <token>
- Authorization: Bearer <token>

The guard is active only when API_AUTH_ENABLED is true and API_TOKEN is set.
In development it is skipped unless API_AUTH_ENFORCE_IN_DEVELOPMENT is true.
"""
from fastapi import Header, HTTPException, status
from typing import Optional
import hmac
import logging

from openversion.config import settings

logger = logging.getLogger(__name__)


def is_guard_active() -> bool:
    """Read settings at call time so tests can patch them"""
    if not settings.api_auth_enabled or not settings.api_token:
        return False
    if settings.is_development and not settings.api_auth_enforce_in_development:
        return False
    return True


def extract_token(x_api_key: Optional[str], authorization: Optional[str]) -> Optional[str]:
    """Token from X-Api-Key, falling back to a Bearer Authorization header"""
    if x_api_key and x_api_key.strip():
        return x_api_key.strip()
    if authorization and authorization.startswith("Bearer "):
        token = authorization[7:].strip()  # Remove "Bearer " prefix
        return token or None
    return None


async def verify_access_token(
    x_api_key: Optional[str] = Header(None),
    authorization: Optional[str] = Header(None)
) -> None:
    """
    Verify the personal access token when the guard is active.

    Raises:
        HTTPException: 401 if the token is missing or does not match
    """
    if not is_guard_active():
        return

    token = extract_token(x_api_key, authorization)
    if token is None:
        logger.warning("API request rejected: Missing access token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing access token. Use 'X-Api-Key: <token>' or 'Authorization: Bearer <token>'.",
            headers={"WWW-Authenticate": "Bearer"}
        )

    # Constant-time comparison
    if not hmac.compare_digest(token.encode("utf-8"), settings.api_token.encode("utf-8")):
        logger.warning("API request rejected: Invalid access token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid access token.",
            headers={"WWW-Authenticate": "Bearer"}
        )
