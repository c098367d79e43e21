"""
FastAPI dependencies for authentication and authorization.

These dependencies are used to protect endpoints and extract the session identity.
"""

import logging
from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyCookie
from jose import JWTError
from typing import Optional

from app.core.config import settings
from app.core.security import decode_token
from app.schemas.session import Identity

logger = logging.getLogger(__name__)

# Session cookie scheme (Cookie: token=<jwt>)
session_cookie = APIKeyCookie(name=settings.SESSION_COOKIE_NAME, auto_error=False)


async def get_current_identity(
    token: Optional[str] = Depends(session_cookie),
) -> Identity:
    """
    Extract and validate the session identity from the cookie token.

    This dependency:
    1. Reads the token from the session cookie
    2. Decodes and validates the JWT
    3. Ensures the claims carry an email

    Raises:
        HTTPException 401: If the token is missing, invalid or expired
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized Access!",
    )

    if not token:
        logger.debug("Rejected request without session token")
        raise credentials_exception

    try:
        payload = decode_token(token)
    except JWTError as e:
        logger.warning(f"Rejected invalid session token: {e}")
        raise credentials_exception

    if payload.get("email") is None:
        raise credentials_exception

    return Identity(**payload)


async def require_email_owner(
    email: str,
    identity: Identity = Depends(get_current_identity),
) -> Identity:
    """
    Ensure the authenticated identity owns the `{email}` path parameter.

    Usage:
        @router.get("/jobs/{email}")
        def list_jobs(email: str, identity: Identity = Depends(require_email_owner)):
            ...

    Raises:
        HTTPException 401: No valid session
        HTTPException 403: Session belongs to a different email
    """
    if identity.email != email:
        logger.warning(f"Forbidden access to {email} by {identity.email}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden Access!"
        )

    return identity


def parse_object_id(id: str) -> ObjectId:
    """
    Convert the `{id}` path parameter to an ObjectId.

    Raises:
        HTTPException 400: If the value is not a valid ObjectId
    """
    try:
        return ObjectId(id)
    except (InvalidId, TypeError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid id"
        )
