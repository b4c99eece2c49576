"""
Substring search over the cached service catalog.
"""
from typing import Iterable

from vault.models.service import ServiceRecord
from vault.services.authorization import AuthorizationFilter


def matches_query(record: ServiceRecord, lowered_query: str) -> bool:
    return lowered_query in record.service_name.lower() or lowered_query in record.url.lower()


class SearchEngine:
    """
    Case-insensitive substring match on service name or URL.

    Results keep catalog order. Records the caller may not see are
    dropped without a trace, so a restricted record's existence is
    never revealed.
    """

    def __init__(self, authorization: AuthorizationFilter):
        self.authorization = authorization

    def search(
        self,
        catalog: Iterable[ServiceRecord],
        query: str,
        user_groups: Iterable[str],
    ) -> list[ServiceRecord]:
        # Blank queries must not dump the whole catalog
        if not query or not query.strip():
            return []

        lowered = query.lower()
        groups = set(user_groups)
        return [
            record for record in catalog
            if matches_query(record, lowered) and self.authorization.is_visible(record, groups)
        ]
