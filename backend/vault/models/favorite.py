"""
Favorite (bookmark) model.
"""
from pydantic import BaseModel, Field


class Favorite(BaseModel):
    """A user's bookmark of a service record, unique per (email, service_id)."""
    email: str = Field(..., description="Owner email, lowercased")
    service_id: str = Field(..., description="Bookmarked ServiceRecord id")
    service_name: str = Field(default="", description="Service name at bookmark time")
    created_at: str = Field(default="", description="ISO-8601 creation timestamp")


class FavoriteStat(BaseModel):
    """How many users bookmarked a given service."""
    service_id: str
    service_name: str
    count: int
    users: list[str] = []
