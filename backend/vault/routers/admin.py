"""
Admin router: members, permissions, logs and cache control.

Permission views work on the unfiltered catalog: they manage
visibility rather than consume it.
"""
import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from vault.core.exceptions import InvalidInputError, UpstreamUnavailableError
from vault.dependencies.directory import get_client_ip, get_directory
from vault.dependencies.rate_limit import rate_limited
from vault.dependencies.roles import require_admin
from vault.models.user import SessionUser
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
from vault.services.directory import DirectoryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


# ==================== Members ====================


@router.get(
    "/members",
    response_model=MembersResponse,
    summary="List members",
)
async def list_members(
    admin: SessionUser = Depends(require_admin()),
    directory: DirectoryService = Depends(get_directory),
):
    return MembersResponse(members=await directory.members.list_members())


@router.post(
    "/members",
    response_model=SuccessResponse,
    summary="Add a member",
)
async def add_member(
    body: MemberRequest,
    request: Request,
    admin: SessionUser = Depends(require_admin()),
    directory: DirectoryService = Depends(get_directory),
):
    """
    Register an (email, group) pair.

    The email must belong to the allowed domain.
    """
    try:
        await directory.add_member(body.email, body.group, admin.email, get_client_ip(request))
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except UpstreamUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    return SuccessResponse()


@router.delete(
    "/members",
    response_model=SuccessResponse,
    summary="Remove a member",
)
async def delete_member(
    body: MemberRequest,
    request: Request,
    admin: SessionUser = Depends(require_admin()),
    directory: DirectoryService = Depends(get_directory),
):
    try:
        await directory.delete_member(body.email, body.group, admin.email, get_client_ip(request))
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except UpstreamUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    return SuccessResponse()


# ==================== Permissions ====================


@router.get(
    "/permissions",
    response_model=PermissionsResponse,
    summary="List services with their allowed groups",
)
async def list_permissions(
    admin: SessionUser = Depends(require_admin()),
    directory: DirectoryService = Depends(get_directory),
):
    entries = await directory.list_permissions()
    return PermissionsResponse(services=[ServicePermission(**entry) for entry in entries])


@router.post(
    "/permissions",
    response_model=PermissionUpdateResponse,
    summary="Set the groups allowed to see a service",
)
async def set_permission(
    body: PermissionUpdate,
    request: Request,
    admin: SessionUser = Depends(require_admin()),
    directory: DirectoryService = Depends(get_directory),
):
    """
    Restrict a service to the given groups.

    An empty `allowedGroups` list opens the service to every group.
    """
    try:
        stored = await directory.set_permission(
            body.service_id,
            body.allowed_groups,
            actor_email=admin.email,
            client_ip=get_client_ip(request),
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return PermissionUpdateResponse(service_id=body.service_id, allowed_groups=stored)


# ==================== Logs ====================


@router.get(
    "/logs",
    response_model=SearchLogsResponse,
    summary="Recent searches",
)
async def search_logs(
    admin: SessionUser = Depends(require_admin()),
    directory: DirectoryService = Depends(get_directory),
    limit: int = Query(100, ge=1, le=1000, description="Number of entries"),
):
    return SearchLogsResponse(logs=directory.recent_searches(limit))


@router.get(
    "/audit",
    response_model=AuditLogsResponse,
    summary="Recent administrative actions",
)
async def audit_logs(
    admin: SessionUser = Depends(require_admin()),
    directory: DirectoryService = Depends(get_directory),
    limit: int = Query(100, ge=1, le=1000, description="Number of entries"),
):
    return AuditLogsResponse(logs=await directory.audit.list_logs(limit))


@router.get(
    "/favorites",
    response_model=FavoriteStatsResponse,
    summary="Favorite statistics",
)
async def favorite_stats(
    admin: SessionUser = Depends(require_admin()),
    directory: DirectoryService = Depends(get_directory),
):
    return FavoriteStatsResponse(stats=await directory.favorites.favorite_stats())


# ==================== Cache ====================


@router.post(
    "/warmup",
    response_model=WarmupResponse,
    summary="Reload the catalog cache",
    dependencies=[Depends(rate_limited("admin"))],
)
async def warmup(
    request: Request,
    admin: SessionUser = Depends(require_admin()),
    directory: DirectoryService = Depends(get_directory),
):
    """
    Invalidate every snapshot and reload the catalog.

    When the record store is down the previous snapshot keeps serving.
    """
    started = time.perf_counter()
    count = await directory.refresh_cache(admin.email, get_client_ip(request))
    duration_ms = int((time.perf_counter() - started) * 1000)
    logger.info(f"Cache warmup by {admin.email}: {count} services in {duration_ms}ms")
    return WarmupResponse(count=count, duration_ms=duration_ms)
