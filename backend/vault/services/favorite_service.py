"""
Per-user favorites (bookmarks) of service records.
"""
import asyncio
import logging
from typing import Iterable, Optional

from vault.core.exceptions import InvalidInputError
from vault.models.favorite import Favorite, FavoriteStat
from vault.models.service import ServiceRecord
from vault.services.authorization import AuthorizationFilter
from vault.services.cache import SnapshotCache
from vault.services.record_store import RecordStore

logger = logging.getLogger(__name__)

ALL_FAVORITES_KEY = "*"


class FavoriteService:
    """
    Favorites are cached per email; the "*" key holds everyone's for stats.
    """

    def __init__(
        self,
        store: RecordStore,
        services: SnapshotCache[list[ServiceRecord]],
        authorization: AuthorizationFilter,
        ttl_seconds: float,
    ):
        self.store = store
        self.services = services
        self.authorization = authorization
        self.cache: SnapshotCache[list[Favorite]] = SnapshotCache(
            "favorites",
            loader=self._load,
            ttl_seconds=ttl_seconds,
        )
        self._write_lock = asyncio.Lock()

    async def _load(self, key: str) -> list[Favorite]:
        if key == ALL_FAVORITES_KEY:
            return await self.store.fetch_favorites()
        return await self.store.fetch_favorites(key)

    def _invalidate(self, email: str) -> None:
        self.cache.invalidate(email)
        self.cache.invalidate(ALL_FAVORITES_KEY)

    async def list_favorites(self, email: str) -> list[Favorite]:
        """A user's favorites, newest first."""
        favorites = await self.cache.get(email.lower())
        return sorted(favorites, key=lambda f: f.created_at, reverse=True)

    async def is_favorite(self, email: str, service_id: str) -> bool:
        return any(f.service_id == service_id for f in await self.cache.get(email.lower()))

    async def add_favorite(
        self,
        email: str,
        service_id: str,
        service_name: Optional[str] = None,
    ) -> bool:
        """
        Bookmark a service. Adding an existing pair is a no-op.

        Args:
            email: Owner email
            service_id: ServiceRecord id
            service_name: Display name; looked up in the catalog when omitted

        Returns:
            True if a new favorite was stored
        """
        if not service_id:
            raise InvalidInputError("serviceId is required")
        email = email.lower()

        async with self._write_lock:
            if await self.is_favorite(email, service_id):
                return False

            if not service_name:
                catalog = await self.services.get()
                match = next((s for s in catalog if s.id == service_id), None)
                service_name = match.service_name if match and match.service_name else service_id

            await self.store.add_favorite(email, service_id, service_name)
            self._invalidate(email)

        logger.info(f"Favorite added: {email} -> {service_id}")
        return True

    async def remove_favorite(self, email: str, service_id: str) -> None:
        if not service_id:
            raise InvalidInputError("serviceId is required")
        email = email.lower()
        async with self._write_lock:
            await self.store.remove_favorite(email, service_id)
            self._invalidate(email)

    async def favorite_services(self, email: str, user_groups: Iterable[str]) -> list[ServiceRecord]:
        """Favorited records the caller can still see, in catalog order."""
        user_groups = list(user_groups)
        if not user_groups:
            logger.warning(f"Favorite details denied for {email}: no group memberships")
            return []

        favorite_ids = {f.service_id for f in await self.cache.get(email.lower())}
        catalog = await self.services.get()
        return self.authorization.filter(
            (s for s in catalog if s.id in favorite_ids),
            user_groups,
        )

    async def favorite_stats(self) -> list[FavoriteStat]:
        """Bookmark counts per service, most bookmarked first."""
        stats: dict[str, FavoriteStat] = {}
        for favorite in await self.cache.get(ALL_FAVORITES_KEY):
            stat = stats.get(favorite.service_id)
            if stat is None:
                stat = FavoriteStat(
                    service_id=favorite.service_id,
                    service_name=favorite.service_name,
                    count=0,
                    users=[],
                )
                stats[favorite.service_id] = stat
            stat.count += 1
            stat.users.append(favorite.email)

        return sorted(stats.values(), key=lambda s: s.count, reverse=True)
