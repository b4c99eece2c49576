"""
Membership model: which team (group) an email belongs to.
"""
from pydantic import BaseModel, Field


class Member(BaseModel):
    """One (email, group) row. An email may appear once per group."""
    email: str = Field(..., description="Member email address")
    group: str = Field(..., description="Team / group name")

    def matches(self, email: str) -> bool:
        return self.email.lower() == email.lower()
