"""
Bearer token identity for the bookstore API.

Tokens are issued elsewhere; this module only checks the signature and expiry
and pulls the user id out of the configured claim.
"""

import logging
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from bookstore.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def decode_user_id(token: str, settings: Settings) -> Optional[str]:
    """Return the user id carried by ``token`` or None when it cannot be trusted."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.InvalidTokenError as e:
        logger.info("Rejected bearer token: %s", e)
        return None

    user_id = payload.get(settings.JWT_USER_CLAIM)
    if user_id in (None, ""):
        return None
    return str(user_id)


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
) -> str:
    """
    Resolve the authenticated user id for a request.
    Raises 401 when the token is missing, malformed, expired or carries no user id.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not authenticated.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = decode_user_id(credentials.credentials, settings)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user_id


def require_auth():
    """
    Dependency to require authentication
    Usage: app.include_router(router, dependencies=[require_auth()])
    """
    return Depends(get_current_user_id)
