"""
Authentication router: identity-provider sign-in and session info.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from vault.core.exceptions import UnauthorizedError
from vault.dependencies.auth import CurrentUser
from vault.dependencies.directory import get_directory
from vault.schemas.auth import GoogleSignInRequest, MeResponse, SessionResponse
from vault.services.auth_service import AuthService
from vault.services.directory import DirectoryService
from vault.services.identity import GoogleIdentityVerifier, get_identity_verifier

router = APIRouter(prefix="/auth", tags=["Authentication"])


async def get_auth_service(
    directory: DirectoryService = Depends(get_directory),
    verifier: GoogleIdentityVerifier = Depends(get_identity_verifier),
) -> AuthService:
    """Dependency to get AuthService instance."""
    return AuthService(directory, verifier)


@router.post(
    "/google",
    response_model=SessionResponse,
    summary="Sign in with an identity provider token",
)
async def sign_in_with_google(
    request: GoogleSignInRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Exchange a Google ID token for a session token.

    - Address must belong to the allowed domain
    - Administrators are always admitted
    - Everyone else must be a registered member

    Returns JWT to pass as `?token=` on every other request.
    """
    try:
        return await auth_service.sign_in(request.id_token)
    except UnauthorizedError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e),
        )


@router.get(
    "/me",
    response_model=MeResponse,
    summary="Get current user",
)
async def get_me(current_user: CurrentUser):
    """Email, admin flag and resolved groups of the caller."""
    return MeResponse(
        email=current_user.email,
        is_admin=current_user.is_admin,
        groups=current_user.groups,
    )
