"""
Membership resolution and administration.

Members live in the record store as (email, group) rows; the cached
snapshot answers "which groups is this email in?".
"""
import logging
import re

from vault.core.exceptions import InvalidInputError
from vault.models.member import Member
from vault.services.cache import SnapshotCache
from vault.services.record_store import RecordStore

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class MembershipService:
    """Reads members through the cache and writes them through the store."""

    def __init__(self, store: RecordStore, ttl_seconds: float, allowed_domain: str):
        self.store = store
        self.allowed_domain = allowed_domain.lower()
        self.cache: SnapshotCache[list[Member]] = SnapshotCache(
            "members",
            loader=lambda _key: self.store.fetch_members(),
            ttl_seconds=ttl_seconds,
        )

    async def list_members(self) -> list[Member]:
        return list(await self.cache.get())

    async def get_user_groups(self, email: str) -> list[str]:
        """
        Groups of an email, case-insensitive. Unknown users get [].
        """
        if not email:
            return []
        groups: list[str] = []
        for member in await self.cache.get():
            if member.matches(email) and member.group not in groups:
                groups.append(member.group)
        return groups

    async def is_member(self, email: str) -> bool:
        return bool(await self.get_user_groups(email))

    def _validate(self, email: str, group: str) -> tuple[str, str]:
        email = (email or "").strip()
        group = (group or "").strip()
        if not email or not group:
            raise InvalidInputError("Email and group are required")
        if not EMAIL_PATTERN.match(email):
            raise InvalidInputError("Invalid email format")
        return email, group

    async def add_member(self, email: str, group: str) -> Member:
        """
        Add an (email, group) row.

        Raises:
            InvalidInputError: Missing fields, bad format or foreign domain
        """
        email, group = self._validate(email, group)
        if not email.lower().endswith(f"@{self.allowed_domain}"):
            raise InvalidInputError(f"Only @{self.allowed_domain} addresses can be registered")

        await self.store.add_member(email, group)
        self.cache.invalidate()
        logger.info(f"Member added: {email} -> {group}")
        return Member(email=email, group=group)

    async def delete_member(self, email: str, group: str) -> None:
        email, group = self._validate(email, group)
        await self.store.delete_member(email, group)
        self.cache.invalidate()
        logger.info(f"Member removed: {email} -> {group}")
