"""
Session endpoints.

Implements cookie-carried JWT sessions:
- POST /jwt: Sign the given identity claims and set the session cookie
- GET /logout: Clear the session cookie
"""

import logging
from fastapi import APIRouter, Response

from app.core.security import clear_session_cookie, create_access_token, set_session_cookie
from app.schemas.session import SessionClaimsRequest, SessionResponse

router = APIRouter(tags=["Authentication"])
logger = logging.getLogger(__name__)


@router.post("/jwt", response_model=SessionResponse)
def issue_session(request: SessionClaimsRequest, response: Response):
    """
    Issue a session token for the given claims.

    The token expires after ACCESS_TOKEN_EXPIRE_DAYS and is sent back as an
    HTTP-only cookie; it is not included in the body.
    """
    claims = request.model_dump(mode="json")
    claims.pop("exp", None)

    token = create_access_token(data=claims)
    set_session_cookie(response, token)

    logger.info(f"Issued session for {request.email}")
    return SessionResponse(success=True)


@router.get("/logout", response_model=SessionResponse)
def logout(response: Response):
    """Clear the session cookie. Always succeeds."""
    clear_session_cookie(response)
    return SessionResponse(success=True)
