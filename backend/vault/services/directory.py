"""
Directory service: the access-controlled service catalog.

Owns the service snapshot cache, the permission store and the search
history, and wires search, ranking, membership and favorites together.
One instance is created at application startup and shared by every
request handler through ``app.state``.
"""
import logging
from typing import Optional

from vault.config import Settings, get_settings
from vault.core.exceptions import InvalidInputError
from vault.models.logs import AdminAction, SearchLogEntry
from vault.models.member import Member
from vault.models.service import ServiceRecord
from vault.models.user import WILDCARD_GROUP
from vault.services.audit_service import AuditService
from vault.services.authorization import AuthorizationFilter, PermissionStore
from vault.services.cache import SnapshotCache
from vault.services.favorite_service import FavoriteService
from vault.services.membership import MembershipService
from vault.services.popularity import PopularityRanker
from vault.services.record_store import RecordStore
from vault.services.search_engine import SearchEngine
from vault.services.search_log import SearchLogBook

logger = logging.getLogger(__name__)


class DirectoryService:
    """Entry point for everything request handlers do with the catalog."""

    def __init__(
        self,
        store: RecordStore,
        audit: AuditService,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.store = store
        self.audit = audit

        self.services: SnapshotCache[list[ServiceRecord]] = SnapshotCache(
            "services",
            loader=lambda _key: self.store.fetch_services(),
            ttl_seconds=self.settings.services_cache_ttl_seconds,
        )
        self.permissions = PermissionStore()
        self.authorization = AuthorizationFilter(self.permissions)
        self.search_engine = SearchEngine(self.authorization)
        self.ranker = PopularityRanker(self.authorization, log_window=self.settings.popular_log_window)
        self.search_logs = SearchLogBook(capacity=self.settings.search_log_capacity)

        self.members = MembershipService(
            store,
            ttl_seconds=self.settings.members_cache_ttl_seconds,
            allowed_domain=self.settings.allowed_domain,
        )
        self.favorites = FavoriteService(
            store,
            services=self.services,
            authorization=self.authorization,
            ttl_seconds=self.settings.favorites_cache_ttl_seconds,
        )

    # ==================== Identity ====================

    def is_admin(self, email: str) -> bool:
        return email.lower() in self.settings.get_admin_emails()

    async def resolve_groups(self, email: str) -> list[str]:
        """
        Groups used for visibility checks.

        Administrators get the wildcard. Anyone else gets their membership
        rows; an unknown user or a failed lookup yields no groups.
        """
        if self.is_admin(email):
            return [WILDCARD_GROUP]
        try:
            return await self.members.get_user_groups(email)
        except Exception:
            logger.exception(f"Group resolution failed for {email}; denying access")
            return []

    # ==================== Catalog ====================

    async def get_services(self) -> list[ServiceRecord]:
        """Unfiltered catalog snapshot. Admin views only."""
        return await self.services.get()

    async def _caller_groups(self, actor_email: str, user_groups: Optional[list[str]]) -> list[str]:
        if user_groups is not None:
            return list(user_groups)
        return await self.resolve_groups(actor_email)

    async def search(
        self,
        query: str,
        actor_email: str,
        user_groups: Optional[list[str]] = None,
        client_ip: str = "unknown",
        user_agent: str = "unknown",
    ) -> list[ServiceRecord]:
        """
        Search the catalog as ``actor_email`` and record the search.

        ``user_groups`` are the caller's already resolved groups; when
        omitted they are looked up from ``actor_email``. Blank queries
        return nothing and are not logged.
        """
        if not query or not query.strip():
            return []

        groups = await self._caller_groups(actor_email, user_groups)
        if not groups:
            logger.warning(f"Search denied for {actor_email}: no group memberships")
            return []

        catalog = await self.services.get()
        results = self.search_engine.search(catalog, query, groups)

        self.search_logs.append(SearchLogEntry(
            actor_email=actor_email,
            query=query,
            client_ip=client_ip,
            user_agent=user_agent,
            success=len(results) > 0,
        ))
        return results

    async def popular(
        self,
        limit: int,
        actor_email: str,
        user_groups: Optional[list[str]] = None,
    ) -> list[ServiceRecord]:
        """Most searched-for records the caller may see."""
        if limit <= 0:
            raise InvalidInputError("limit must be positive")

        groups = await self._caller_groups(actor_email, user_groups)
        if not groups:
            logger.warning(f"Popular list denied for {actor_email}: no group memberships")
            return []

        catalog = await self.services.get()
        recent = self.search_logs.recent(self.settings.popular_log_window)
        return self.ranker.popular(catalog, recent, limit, groups)

    def recent_searches(self, limit: int = 100) -> list[SearchLogEntry]:
        return self.search_logs.recent(limit)

    async def refresh_cache(self, actor_email: Optional[str] = None, client_ip: str = "unknown") -> int:
        """
        Drop every snapshot and reload the catalog.

        Returns:
            Number of services in the fresh snapshot
        """
        self.services.invalidate()
        self.members.cache.invalidate()
        self.favorites.cache.invalidate()
        services = await self.services.get()

        if actor_email:
            await self.audit.record(
                actor_email,
                AdminAction.CACHE_REFRESH,
                details=f"{len(services)} services loaded",
                client_ip=client_ip,
            )
        return len(services)

    # ==================== Permissions ====================

    async def list_permissions(self) -> list[dict]:
        """Every catalog record with its allowed groups ([] = everyone)."""
        services = await self.services.get()
        return [
            {
                "service_id": service.id,
                "service_name": service.service_name,
                "allowed_groups": self.permissions.get_allowed_groups(service.id),
            }
            for service in services
        ]

    async def set_permission(
        self,
        service_id: str,
        groups: list[str],
        actor_email: str,
        client_ip: str = "unknown",
    ) -> list[str]:
        """
        Restrict a service to ``groups``; an empty list opens it to all.
        """
        if not service_id or not service_id.strip():
            raise InvalidInputError("serviceId is required")

        stored = self.permissions.set_allowed_groups(service_id, groups or [])
        details = f"Allowed groups: {', '.join(stored)}" if stored else "Open to all groups"
        logger.info(f"Permission for {service_id} set by {actor_email}: {details}")

        await self.audit.record(
            actor_email,
            AdminAction.PERMISSION_UPDATE,
            target=service_id,
            details=details,
            client_ip=client_ip,
        )
        return stored

    # ==================== Members ====================

    async def add_member(self, email: str, group: str, actor_email: str, client_ip: str = "unknown") -> Member:
        member = await self.members.add_member(email, group)
        await self.audit.record(
            actor_email,
            AdminAction.MEMBER_ADD,
            target=member.email,
            details=f"Group: {member.group}",
            client_ip=client_ip,
        )
        return member

    async def delete_member(self, email: str, group: str, actor_email: str, client_ip: str = "unknown") -> None:
        await self.members.delete_member(email, group)
        await self.audit.record(
            actor_email,
            AdminAction.MEMBER_DELETE,
            target=email.strip(),
            details=f"Group: {group.strip()}",
            client_ip=client_ip,
        )

    async def close(self) -> None:
        await self.store.close()
