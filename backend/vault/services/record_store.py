"""
Record store adapters for the spreadsheet backing the directory.

The production store is a spreadsheet published as a web app:
- GET  <url>                                  -> {"success": true, "data": [rows]}
- GET  <url>?action=getMembers                -> {"success": true, "members": [rows]}
- GET  <url>?action=getFavorites&email=<e>    -> {"success": true, "favorites": [rows]}
- GET  <url>?action=getAllFavorites           -> {"success": true, "favorites": [rows]}
- POST <url> {"action": "addMember" | "deleteMember" | "addFavorite" | "removeFavorite", ...}

Adapters normalize rows but never cache or retry; every failure is
raised as UpstreamUnavailableError for the cache layer to absorb.
"""
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Optional

import httpx

from vault.config import Settings, get_settings
from vault.core.exceptions import UpstreamUnavailableError
from vault.models.favorite import Favorite
from vault.models.member import Member
from vault.models.service import ServiceRecord
from vault.services.normalizer import (
    normalize_favorite,
    normalize_member,
    normalize_services,
)

logger = logging.getLogger(__name__)


class RecordStore(ABC):
    """Narrow contract the directory needs from its backing store."""

    @abstractmethod
    async def fetch_services(self) -> list[ServiceRecord]:
        ...

    @abstractmethod
    async def fetch_members(self) -> list[Member]:
        ...

    @abstractmethod
    async def fetch_favorites(self, email: Optional[str] = None) -> list[Favorite]:
        """Favorites of one user, or of everyone when email is None."""

    @abstractmethod
    async def add_member(self, email: str, group: str) -> None:
        ...

    @abstractmethod
    async def delete_member(self, email: str, group: str) -> None:
        ...

    @abstractmethod
    async def add_favorite(self, email: str, service_id: str, service_name: str) -> None:
        ...

    @abstractmethod
    async def remove_favorite(self, email: str, service_id: str) -> None:
        ...

    async def close(self) -> None:
        """Release network resources, if any."""


class AppsScriptRecordStore(RecordStore):
    """
    Async client for the spreadsheet web app.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client with connection pooling."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        params: Optional[dict[str, Any]] = None,
        payload: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        client = await self._get_client()
        try:
            response = await client.request(method, self.base_url, params=params, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamUnavailableError(
                f"Record store returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamUnavailableError(f"Record store unreachable: {e}") from e
        except ValueError as e:
            raise UpstreamUnavailableError("Record store returned invalid JSON") from e

        if not isinstance(body, dict):
            raise UpstreamUnavailableError("Record store returned an unexpected payload")
        if body.get("success") is False:
            raise UpstreamUnavailableError(f"Record store error: {body.get('error', 'unknown')}")
        return body

    @staticmethod
    def _rows(body: dict[str, Any], key: str) -> list[dict[str, Any]]:
        rows = body.get(key) or []
        if not isinstance(rows, list):
            raise UpstreamUnavailableError(f"Record store field '{key}' is not a list")
        return [row for row in rows if isinstance(row, dict)]

    # ==================== Reads ====================

    async def fetch_services(self) -> list[ServiceRecord]:
        body = await self._request("GET")
        services = normalize_services(self._rows(body, "data"))
        logger.info(f"Loaded {len(services)} services from record store")
        return services

    async def fetch_members(self) -> list[Member]:
        body = await self._request("GET", params={"action": "getMembers"})
        members = [normalize_member(row) for row in self._rows(body, "members")]
        return [m for m in members if m is not None]

    async def fetch_favorites(self, email: Optional[str] = None) -> list[Favorite]:
        if email is None:
            params = {"action": "getAllFavorites"}
        else:
            params = {"action": "getFavorites", "email": email}
        body = await self._request("GET", params=params)
        favorites = [normalize_favorite(row) for row in self._rows(body, "favorites")]
        return [f for f in favorites if f is not None]

    # ==================== Mutations ====================

    async def add_member(self, email: str, group: str) -> None:
        await self._request("POST", payload={"action": "addMember", "email": email, "group": group})

    async def delete_member(self, email: str, group: str) -> None:
        await self._request("POST", payload={"action": "deleteMember", "email": email, "group": group})

    async def add_favorite(self, email: str, service_id: str, service_name: str) -> None:
        await self._request(
            "POST",
            payload={
                "action": "addFavorite",
                "email": email,
                "serviceId": service_id,
                "serviceName": service_name,
            },
        )

    async def remove_favorite(self, email: str, service_id: str) -> None:
        await self._request(
            "POST",
            payload={"action": "removeFavorite", "email": email, "serviceId": service_id},
        )


DEFAULT_MOCK_SERVICES: list[dict[str, Any]] = [
    {
        "id": "service-1",
        "serviceName": "AWS Console",
        "url": "https://console.aws.amazon.com",
        "accountId": "admin@example.com",
        "password": "aws-admin-2024!@#",
        "usage": "Cloud infrastructure",
        "lastModified": "2024-02-15",
    },
    {
        "id": "service-2",
        "serviceName": "GitHub",
        "url": "https://github.com",
        "accountId": "devops@example.com",
        "password": "gh-devops-2024",
        "usage": "Source hosting",
        "lastModified": "2024-03-02",
    },
]


class InMemoryRecordStore(RecordStore):
    """
    Record store kept in process memory.

    Used when no web app URL is configured (mock mode) and in tests.
    Rows go through the same normalization as the HTTP adapter.
    """

    def __init__(
        self,
        services: Optional[list[dict[str, Any]]] = None,
        members: Optional[list[dict[str, Any]]] = None,
        favorites: Optional[list[dict[str, Any]]] = None,
    ):
        self.service_rows = list(DEFAULT_MOCK_SERVICES if services is None else services)
        self.member_rows = list(members or [])
        self.favorite_rows = list(favorites or [])
        self.fetch_count = 0

    async def fetch_services(self) -> list[ServiceRecord]:
        self.fetch_count += 1
        return normalize_services(self.service_rows)

    async def fetch_members(self) -> list[Member]:
        members = [normalize_member(row) for row in self.member_rows]
        return [m for m in members if m is not None]

    async def fetch_favorites(self, email: Optional[str] = None) -> list[Favorite]:
        favorites = [normalize_favorite(row) for row in self.favorite_rows]
        return [
            f for f in favorites
            if f is not None and (email is None or f.email == email.lower())
        ]

    async def add_member(self, email: str, group: str) -> None:
        self.member_rows.append({"email": email, "group": group})

    async def delete_member(self, email: str, group: str) -> None:
        self.member_rows = [
            row for row in self.member_rows
            if not (row.get("email") == email and row.get("group") == group)
        ]

    async def add_favorite(self, email: str, service_id: str, service_name: str) -> None:
        email = email.lower()
        for row in self.favorite_rows:
            if str(row.get("email", "")).lower() == email and row.get("serviceId") == service_id:
                return
        self.favorite_rows.append({
            "email": email,
            "serviceId": service_id,
            "serviceName": service_name or service_id,
            "createdAt": datetime.now(timezone.utc).isoformat(),
        })

    async def remove_favorite(self, email: str, service_id: str) -> None:
        email = email.lower()
        self.favorite_rows = [
            row for row in self.favorite_rows
            if not (str(row.get("email", "")).lower() == email and row.get("serviceId") == service_id)
        ]


def create_record_store(settings: Optional[Settings] = None) -> RecordStore:
    """Build the record store selected by configuration."""
    settings = settings or get_settings()
    if settings.mock_mode:
        logger.info("No record store URL configured, serving in-memory mock data")
        return InMemoryRecordStore()
    return AppsScriptRecordStore(
        settings.apps_script_url,
        timeout=settings.record_store_timeout_seconds,
    )
