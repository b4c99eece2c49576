"""
Client configuration router.
"""
from fastapi import APIRouter

from vault.config import get_settings

router = APIRouter(tags=["Config"])


@router.get("/config", summary="Client configuration")
async def client_config():
    """
    Flags the web client needs before sign-in.

    `skip_auth` is never reported as true in production.
    """
    settings = get_settings()
    return {"skip_auth": settings.skip_auth and not settings.is_production}
