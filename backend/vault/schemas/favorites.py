"""
Favorites request/response schemas.
"""
from typing import Optional, Union

from pydantic import BaseModel, Field

from vault.models.favorite import Favorite
from vault.models.service import ServiceRecord


class FavoriteCreate(BaseModel):
    service_id: str = Field(..., alias="serviceId", min_length=1)
    service_name: Optional[str] = Field(None, alias="serviceName")

    model_config = {"populate_by_name": True}


class FavoritesResponse(BaseModel):
    """Favorite rows, or the favorited service records when details=true."""
    favorites: Union[list[ServiceRecord], list[Favorite]] = []


class FavoriteMutationResponse(BaseModel):
    success: bool = True
    message: str
