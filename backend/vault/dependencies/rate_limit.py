"""
Rate limiting dependency.
"""
from typing import Callable

from fastapi import HTTPException, Request, Response, status

from vault.core.rate_limit import check_rate_limit
from vault.dependencies.directory import get_client_ip


def rate_limited(api_name: str) -> Callable:
    """
    Dependency factory applying the named per-IP limit.

    Usage:
        @router.get("/search", dependencies=[Depends(rate_limited("search"))])
    """
    async def limiter(request: Request, response: Response) -> None:
        result = await check_rate_limit(get_client_ip(request), api_name)
        if not result.allowed:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests, please try again later",
                headers=result.headers(),
            )
        response.headers.update(result.headers())

    return limiter
