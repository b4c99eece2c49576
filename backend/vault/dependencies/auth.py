"""
Authentication dependencies for route protection.
"""
import logging
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Query, status
from jose import JWTError

from vault.config import get_settings
from vault.core.security import session_email
from vault.dependencies.directory import get_directory
from vault.models.user import SessionUser, WILDCARD_GROUP
from vault.services.directory import DirectoryService

logger = logging.getLogger(__name__)

SKIP_AUTH_EMAIL = "test-mode@local"


async def get_current_user(
    directory: Annotated[DirectoryService, Depends(get_directory)],
    token: Annotated[Optional[str], Query(description="Session JWT")] = None,
) -> SessionUser:
    """
    Dependency to get the signed-in user from the session token.

    Token is passed as query parameter: ?token=xxx

    Groups are resolved on every request so membership edits apply
    without re-login. In skip-auth mode (development only) every caller
    is a wildcard test user.

    Raises:
        HTTPException 401: If token is missing, invalid or expired
    """
    if get_settings().skip_auth:
        return SessionUser(email=SKIP_AUTH_EMAIL, is_admin=True, groups=[WILDCARD_GROUP])

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Authentication required",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise credentials_exception

    try:
        email = session_email(token)
    except JWTError as e:
        logger.info(f"Rejected session token: {e}")
        raise credentials_exception

    return SessionUser(
        email=email,
        is_admin=directory.is_admin(email),
        groups=await directory.resolve_groups(email),
    )


# Type alias for cleaner route signatures
CurrentUser = Annotated[SessionUser, Depends(get_current_user)]
