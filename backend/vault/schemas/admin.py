"""
Administrative request/response schemas.
"""
from pydantic import BaseModel, Field

from vault.models.favorite import FavoriteStat
from vault.models.logs import AdminActionLog, SearchLogEntry
from vault.models.member import Member


class MemberRequest(BaseModel):
    email: str = Field(default="", description="Member email")
    group: str = Field(default="", description="Group name")


class MembersResponse(BaseModel):
    members: list[Member] = []


class ServicePermission(BaseModel):
    service_id: str
    service_name: str
    allowed_groups: list[str] = Field(default=[], description="Empty means every group")


class PermissionsResponse(BaseModel):
    services: list[ServicePermission] = []


class PermissionUpdate(BaseModel):
    service_id: str = Field(default="", alias="serviceId")
    allowed_groups: list[str] = Field(default=[], alias="allowedGroups")

    model_config = {"populate_by_name": True}


class PermissionUpdateResponse(BaseModel):
    success: bool = True
    service_id: str
    allowed_groups: list[str]


class SearchLogsResponse(BaseModel):
    logs: list[SearchLogEntry] = []


class AuditLogsResponse(BaseModel):
    logs: list[AdminActionLog] = []


class FavoriteStatsResponse(BaseModel):
    stats: list[FavoriteStat] = []


class WarmupResponse(BaseModel):
    success: bool = True
    count: int
    duration_ms: int


class SuccessResponse(BaseModel):
    success: bool = True
