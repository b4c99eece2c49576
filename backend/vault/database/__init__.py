"""
Database module - MongoDB and Redis connections and database definitions.
"""
from vault.database.connections import (
    close_connections,
    get_audit_database,
    get_mongo_client,
    get_redis_client,
    ping_mongo,
    ping_redis,
)
from vault.database.databases import audit_db

__all__ = [
    "audit_db",
    "close_connections",
    "get_audit_database",
    "get_mongo_client",
    "get_redis_client",
    "ping_mongo",
    "ping_redis",
]
