"""
Favorites router: per-user bookmarks.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status

from vault.core.exceptions import InvalidInputError, UpstreamUnavailableError
from vault.dependencies.auth import CurrentUser
from vault.dependencies.directory import get_directory
from vault.dependencies.rate_limit import rate_limited
from vault.schemas.favorites import (
    FavoriteCreate,
    FavoriteMutationResponse,
    FavoritesResponse,
)
from vault.services.directory import DirectoryService

router = APIRouter(
    prefix="/favorites",
    tags=["Favorites"],
    dependencies=[Depends(rate_limited("favorites"))],
)


@router.get(
    "",
    response_model=FavoritesResponse,
    summary="List favorites",
)
async def list_favorites(
    current_user: CurrentUser,
    directory: DirectoryService = Depends(get_directory),
    details: bool = Query(False, description="Return full service records"),
):
    """
    List the caller's favorites, newest first.

    With `details=true`, returns the favorited service records the
    caller can still see, in catalog order.
    """
    if details:
        services = await directory.favorites.favorite_services(
            current_user.email, current_user.groups
        )
        return FavoritesResponse(favorites=services)

    favorites = await directory.favorites.list_favorites(current_user.email)
    return FavoritesResponse(favorites=favorites)


@router.post(
    "",
    response_model=FavoriteMutationResponse,
    summary="Add a favorite",
)
async def add_favorite(
    request: FavoriteCreate,
    current_user: CurrentUser,
    directory: DirectoryService = Depends(get_directory),
):
    """Bookmark a service. Adding it twice keeps a single bookmark."""
    try:
        created = await directory.favorites.add_favorite(
            current_user.email, request.service_id, request.service_name
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except UpstreamUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    message = "Added to favorites" if created else "Already in favorites"
    return FavoriteMutationResponse(message=message)


@router.delete(
    "",
    response_model=FavoriteMutationResponse,
    summary="Remove a favorite",
)
async def remove_favorite(
    current_user: CurrentUser,
    directory: DirectoryService = Depends(get_directory),
    service_id: str = Query("", alias="serviceId", description="Service to remove"),
):
    """Remove a bookmark."""
    try:
        await directory.favorites.remove_favorite(current_user.email, service_id)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except UpstreamUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    return FavoriteMutationResponse(message="Removed from favorites")
