"""
Popularity ranking of service records from search history.

Scoring:
- take the most recent ``log_window`` search log entries
- count successful searches per lowercased query string
- a record's score is the sum of counts of every query that is a
  substring of its lowercased name or URL

Ordering: scored records by descending score (ties by service name),
then unscored records in catalog order until ``limit`` is reached.
"""
from collections import Counter
from typing import Iterable

from vault.core.exceptions import InvalidInputError
from vault.models.logs import SearchLogEntry
from vault.models.service import ServiceRecord
from vault.services.authorization import AuthorizationFilter


def query_frequencies(entries: Iterable[SearchLogEntry]) -> Counter:
    """Lowercased query -> number of successful searches."""
    counts: Counter = Counter()
    for entry in entries:
        if entry.success and entry.query:
            counts[entry.query.lower()] += 1
    return counts


def score_record(record: ServiceRecord, frequencies: Counter) -> int:
    name = record.service_name.lower()
    url = record.url.lower()
    return sum(
        count for query, count in frequencies.items()
        if query in name or query in url
    )


class PopularityRanker:
    """Ranks visible records by how often past searches hit them."""

    def __init__(self, authorization: AuthorizationFilter, log_window: int = 500):
        self.authorization = authorization
        self.log_window = log_window

    def popular(
        self,
        catalog: Iterable[ServiceRecord],
        recent_logs: list[SearchLogEntry],
        limit: int,
        user_groups: Iterable[str],
    ) -> list[ServiceRecord]:
        """
        Top ``limit`` visible records.

        Args:
            catalog: Cached service records in catalog order
            recent_logs: Search log entries, most recent first
            limit: Maximum number of records to return (> 0)
            user_groups: Caller's groups for the visibility check

        Returns:
            At most ``limit`` records
        """
        if limit <= 0:
            raise InvalidInputError("limit must be positive")

        frequencies = query_frequencies(recent_logs[: self.log_window])
        visible = self.authorization.filter(catalog, user_groups)

        scored: list[tuple[int, ServiceRecord]] = []
        unscored: list[ServiceRecord] = []
        for record in visible:
            score = score_record(record, frequencies) if frequencies else 0
            if score > 0:
                scored.append((score, record))
            else:
                unscored.append(record)

        scored.sort(key=lambda item: (-item[0], item[1].service_name))

        # TODO: decide whether unscored fill should be shuffled for variety;
        # it stays in catalog order until product confirms.
        ranked = [record for _, record in scored] + unscored
        return ranked[:limit]
