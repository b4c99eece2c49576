"""
Administrator-only access control.
"""
from typing import Callable

from fastapi import Depends, HTTPException, status

from vault.dependencies.auth import get_current_user
from vault.models.user import SessionUser


def require_admin() -> Callable:
    """
    Dependency factory for admin-only routes.

    Usage:
        @router.get("/admin-only")
        async def admin_route(user: SessionUser = Depends(require_admin())):
            ...
    """
    async def admin_checker(
        current_user: SessionUser = Depends(get_current_user)
    ) -> SessionUser:
        if not current_user.is_admin:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Administrator privileges required",
            )
        return current_user

    return admin_checker
