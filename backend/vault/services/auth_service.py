"""
Sign-in rules and session issuance.
"""
import logging

from vault.config import get_settings
from vault.core.exceptions import UnauthorizedError
from vault.core.security import create_access_token
from vault.schemas.auth import SessionResponse
from vault.services.directory import DirectoryService
from vault.services.identity import GoogleIdentityVerifier

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, directory: DirectoryService, verifier: GoogleIdentityVerifier):
        self.directory = directory
        self.verifier = verifier
        self.settings = get_settings()

    async def check_sign_in(self, email: str) -> None:
        """
        Decide whether an identity-provider email may sign in.

        Rules:
        - the address must belong to the allowed domain
        - administrators are always let in
        - everyone else must be a registered member

        Raises:
            UnauthorizedError: If any rule rejects the email
        """
        email = email.lower()
        if not email.endswith(f"@{self.settings.allowed_domain.lower()}"):
            logger.info(f"Sign-in rejected, foreign domain: {email}")
            raise UnauthorizedError("Email domain not allowed")

        if self.directory.is_admin(email):
            logger.info(f"Admin sign-in: {email}")
            return

        if not await self.directory.members.is_member(email):
            logger.info(f"Sign-in rejected, not a member: {email}")
            raise UnauthorizedError("Not a registered member")

        logger.info(f"Member sign-in: {email}")

    async def sign_in(self, id_token: str) -> SessionResponse:
        """
        Exchange an identity-provider token for a session token.

        Raises:
            UnauthorizedError: If the token is invalid or sign-in is refused
        """
        email = await self.verifier.verify(id_token)
        await self.check_sign_in(email)

        groups = await self.directory.resolve_groups(email)
        return SessionResponse(
            access_token=create_access_token(email),
            token_type="bearer",
            expires_in=self.settings.jwt_access_token_expire_minutes * 60,
            email=email,
            is_admin=self.directory.is_admin(email),
            groups=groups,
        )
