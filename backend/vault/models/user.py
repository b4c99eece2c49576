"""
Authenticated caller resolved for the current request.
"""
from pydantic import BaseModel, Field

WILDCARD_GROUP = "*"


class SessionUser(BaseModel):
    """
    The signed-in user as seen by request handlers.

    Identity comes from the session token; groups are resolved from
    the membership sheet on every request.
    """
    email: str = Field(..., description="Lowercased email from the identity provider")
    is_admin: bool = Field(default=False, description="Listed in ADMIN_EMAILS")
    groups: list[str] = Field(default=[], description="Resolved group memberships")
