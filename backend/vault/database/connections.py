"""
Shared clients for the audit store (MongoDB) and rate-limit counters (Redis).

Both clients are created on first use and reused for the process
lifetime; close_connections() runs at shutdown.
"""
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from redis.asyncio import Redis

from vault.config import get_settings
from vault.database.databases import audit_db

MONGO_SERVER_SELECTION_TIMEOUT_MS = 5000
REDIS_SOCKET_TIMEOUT_SECONDS = 2.0

_mongo_client: Optional[AsyncIOMotorClient] = None
_redis_client: Optional[Redis] = None


async def get_mongo_client() -> AsyncIOMotorClient:
    """Get or create MongoDB client."""
    global _mongo_client
    if _mongo_client is None:
        _mongo_client = AsyncIOMotorClient(
            get_settings().mongo_uri,
            serverSelectionTimeoutMS=MONGO_SERVER_SELECTION_TIMEOUT_MS,
        )
    return _mongo_client


async def get_redis_client() -> Redis:
    """Get or create Redis client."""
    global _redis_client
    if _redis_client is None:
        settings = get_settings()
        _redis_client = Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            decode_responses=True,
            socket_timeout=REDIS_SOCKET_TIMEOUT_SECONDS,
            socket_connect_timeout=REDIS_SOCKET_TIMEOUT_SECONDS,
        )
    return _redis_client


async def get_audit_database() -> AsyncIOMotorDatabase:
    client = await get_mongo_client()
    return client[audit_db.DB_NAME]


async def ping_mongo() -> None:
    """Raise if MongoDB does not answer."""
    client = await get_mongo_client()
    await client.admin.command("ping")


async def ping_redis() -> None:
    """Raise if Redis does not answer."""
    redis = await get_redis_client()
    await redis.ping()


async def close_connections() -> None:
    global _mongo_client, _redis_client

    if _mongo_client is not None:
        _mongo_client.close()
        _mongo_client = None

    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
