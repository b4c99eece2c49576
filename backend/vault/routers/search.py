"""
Search router: catalog search and popular services.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from vault.config import get_settings
from vault.core.exceptions import InvalidInputError
from vault.dependencies.auth import CurrentUser
from vault.dependencies.directory import get_client_ip, get_directory, get_user_agent
from vault.dependencies.rate_limit import rate_limited
from vault.schemas.search import PopularResponse, SearchResponse
from vault.services.directory import DirectoryService

router = APIRouter(tags=["Search"])


@router.get(
    "/search",
    response_model=SearchResponse,
    summary="Search services",
    dependencies=[Depends(rate_limited("search"))],
)
async def search_services(
    request: Request,
    current_user: CurrentUser,
    directory: DirectoryService = Depends(get_directory),
    q: str = Query("", description="Substring of the service name or URL"),
):
    """
    Search the catalog by service name or URL.

    Only services visible to the caller's groups are returned.
    An empty query returns no results.
    """
    results = await directory.search(
        q,
        actor_email=current_user.email,
        user_groups=current_user.groups,
        client_ip=get_client_ip(request),
        user_agent=get_user_agent(request),
    )
    return SearchResponse(results=results)


@router.get(
    "/popular",
    response_model=PopularResponse,
    summary="Get popular services",
    dependencies=[Depends(rate_limited("popular"))],
)
async def popular_services(
    current_user: CurrentUser,
    directory: DirectoryService = Depends(get_directory),
    limit: Optional[int] = Query(None, ge=1, le=50, description="Number of services"),
):
    """
    Most searched-for services visible to the caller.

    Ranked by recent successful searches; padded with unranked services.
    """
    try:
        services = await directory.popular(
            limit or get_settings().popular_default_limit,
            actor_email=current_user.email,
            user_groups=current_user.groups,
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return PopularResponse(services=services)
