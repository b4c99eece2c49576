"""
Authentication request/response schemas.
"""
from pydantic import BaseModel, Field


class GoogleSignInRequest(BaseModel):
    """ID token obtained by the browser from the identity provider."""
    id_token: str = Field(..., min_length=1, description="Identity provider ID token")


class SessionResponse(BaseModel):
    """Session token returned after a successful sign-in."""
    access_token: str = Field(..., description="JWT session token")
    token_type: str = Field(default="bearer")
    expires_in: int = Field(..., description="Token lifetime in seconds")
    email: str
    is_admin: bool = False
    groups: list[str] = []


class MeResponse(BaseModel):
    """Current user as resolved for this request."""
    email: str
    is_admin: bool
    groups: list[str]
