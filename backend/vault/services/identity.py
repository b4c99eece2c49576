"""
Identity provider client.

The sign-in redirect flow runs in the browser; the API only receives
the provider's ID token and asks the provider's tokeninfo endpoint
whether it is genuine.
"""
import logging
from typing import Any, Optional

import httpx

from vault.config import get_settings
from vault.core.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


class GoogleIdentityVerifier:
    """
    Async verifier for Google ID tokens.
    """

    def __init__(
        self,
        tokeninfo_url: Optional[str] = None,
        client_id: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.tokeninfo_url = tokeninfo_url or settings.google_tokeninfo_url
        self.client_id = client_id if client_id is not None else settings.google_client_id
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=10.0, transport=self._transport)
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def verify(self, id_token: str) -> str:
        """
        Validate an ID token and return its lowercased email.

        Raises:
            UnauthorizedError: Token rejected, wrong audience or unverified email
        """
        if not id_token:
            raise UnauthorizedError("Missing identity token")

        client = await self._get_client()
        try:
            response = await client.get(self.tokeninfo_url, params={"id_token": id_token})
        except httpx.HTTPError as e:
            logger.error(f"Identity provider unreachable: {e}")
            raise UnauthorizedError("Identity provider unavailable") from e

        if response.status_code != 200:
            raise UnauthorizedError("Invalid identity token")

        claims: dict[str, Any] = response.json()

        if self.client_id and claims.get("aud") != self.client_id:
            raise UnauthorizedError("Identity token issued for another client")
        if str(claims.get("email_verified", "")).lower() != "true":
            raise UnauthorizedError("Email address not verified")

        email = str(claims.get("email", "")).lower()
        if not email:
            raise UnauthorizedError("Identity token carries no email")
        return email


# Singleton instance for shared use
_identity_verifier: Optional[GoogleIdentityVerifier] = None


async def get_identity_verifier() -> GoogleIdentityVerifier:
    """Get shared GoogleIdentityVerifier instance."""
    global _identity_verifier
    if _identity_verifier is None:
        _identity_verifier = GoogleIdentityVerifier()
    return _identity_verifier
