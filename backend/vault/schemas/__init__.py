"""
Request and response schemas for API endpoints.
"""
from vault.schemas.auth import GoogleSignInRequest, MeResponse, SessionResponse
from vault.schemas.search import PopularResponse, SearchResponse
from vault.schemas.favorites import (
    FavoriteCreate,
    FavoriteMutationResponse,
    FavoritesResponse,
)
from vault.schemas.admin import (
    AuditLogsResponse,
    FavoriteStatsResponse,
    MemberRequest,
    MembersResponse,
    PermissionsResponse,
    PermissionUpdate,
    PermissionUpdateResponse,
    SearchLogsResponse,
    ServicePermission,
    SuccessResponse,
    WarmupResponse,
)

__all__ = [
    # Auth
    "GoogleSignInRequest",
    "SessionResponse",
    "MeResponse",
    # Search
    "SearchResponse",
    "PopularResponse",
    # Favorites
    "FavoriteCreate",
    "FavoritesResponse",
    "FavoriteMutationResponse",
    # Admin
    "MemberRequest",
    "MembersResponse",
    "ServicePermission",
    "PermissionsResponse",
    "PermissionUpdate",
    "PermissionUpdateResponse",
    "SearchLogsResponse",
    "AuditLogsResponse",
    "FavoriteStatsResponse",
    "WarmupResponse",
    "SuccessResponse",
]
