"""
Liveness and readiness probes.
"""
import logging
from typing import Awaitable, Callable

from fastapi import APIRouter, Depends

from vault.database.connections import ping_mongo, ping_redis
from vault.dependencies.directory import get_directory
from vault.services.directory import DirectoryService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


async def _probe(name: str, check: Callable[[], Awaitable[object]]) -> str:
    try:
        await check()
    except Exception as e:
        logger.warning(f"Readiness probe '{name}' failed: {e}")
        return f"unhealthy: {e}"
    return "healthy"


@router.get("/health", summary="Liveness probe")
async def health_check():
    """Returns 200 whenever the process can serve requests."""
    return {"status": "healthy"}


@router.get("/health/ready", summary="Readiness probe")
async def readiness_check(directory: DirectoryService = Depends(get_directory)):
    """
    Probe every upstream the directory depends on.

    The record store is read directly, bypassing the snapshot cache,
    so a stale-but-served catalog still shows up as degraded.
    """
    checks = {
        "record_store": await _probe("record_store", directory.store.fetch_services),
        "mongodb": await _probe("mongodb", ping_mongo),
        "redis": await _probe("redis", ping_redis),
    }
    degraded = any(status != "healthy" for status in checks.values())

    return {
        "status": "degraded" if degraded else "healthy",
        "checks": checks,
        "cache": {
            "services": directory.services.stats(),
            "permissions": len(directory.permissions),
            "search_logs": len(directory.search_logs),
        },
    }
