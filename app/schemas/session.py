"""
Pydantic schemas for session issuing and the authenticated identity.
"""

from pydantic import BaseModel, ConfigDict

from app.schemas.common import SubmittedEmail


class SessionClaimsRequest(BaseModel):
    """Claims the client asks to be signed into its session token."""
    model_config = ConfigDict(extra="allow")

    email: SubmittedEmail


class SessionResponse(BaseModel):
    success: bool = True


class Identity(BaseModel):
    """Decoded session claims attached to an authenticated request."""
    model_config = ConfigDict(extra="allow")

    email: str
