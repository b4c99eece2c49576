"""
Search and popularity response schemas.
"""
from pydantic import BaseModel, Field

from vault.models.service import ServiceRecord


class SearchResponse(BaseModel):
    results: list[ServiceRecord] = Field(default=[], description="Visible matches in catalog order")


class PopularResponse(BaseModel):
    services: list[ServiceRecord] = Field(default=[], description="Most searched-for visible services")
