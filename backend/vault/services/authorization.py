"""
Group-based visibility of service records.

Policy is open-by-default: a record with no permission entry is visible
to every group. A non-empty entry restricts the record to the listed
groups. The wildcard group ("*") sees everything.
"""
from typing import Iterable

from vault.models.service import ServiceRecord
from vault.models.user import WILDCARD_GROUP


class PermissionStore:
    """
    In-memory map of service id -> allowed groups.

    Lives for the lifetime of the process. Every mutation replaces a
    single key and runs synchronously on the event loop, so readers
    never see a half-written entry.
    """

    def __init__(self):
        self._allowed: dict[str, tuple[str, ...]] = {}

    def set_allowed_groups(self, service_id: str, groups: Iterable[str]) -> list[str]:
        """
        Restrict a service to the given groups.

        An empty list removes the entry, which is indistinguishable from
        never having set one.

        Returns:
            The stored group list (deduplicated, blanks dropped)
        """
        cleaned: list[str] = []
        for group in groups:
            name = group.strip()
            if name and name not in cleaned:
                cleaned.append(name)

        if cleaned:
            self._allowed[service_id] = tuple(cleaned)
        else:
            self._allowed.pop(service_id, None)
        return cleaned

    def get_allowed_groups(self, service_id: str) -> list[str]:
        return list(self._allowed.get(service_id, ()))

    def entries(self) -> dict[str, list[str]]:
        return {service_id: list(groups) for service_id, groups in self._allowed.items()}

    def __len__(self) -> int:
        return len(self._allowed)


class AuthorizationFilter:
    """Visibility predicate shared by search, ranking and favorites."""

    def __init__(self, permissions: PermissionStore):
        self.permissions = permissions

    def is_visible(self, record: ServiceRecord, user_groups: Iterable[str]) -> bool:
        groups = set(user_groups)
        if WILDCARD_GROUP in groups:
            return True

        allowed = self.permissions.get_allowed_groups(record.id)
        if not allowed:
            return True

        return not groups.isdisjoint(allowed)

    def filter(self, records: Iterable[ServiceRecord], user_groups: Iterable[str]) -> list[ServiceRecord]:
        """Visible records, original order kept."""
        groups = set(user_groups)
        return [record for record in records if self.is_visible(record, groups)]
