"""
Audit database configuration.
Stores the trail of administrative actions.
"""
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

DB_NAME = "audit_db"


class Collections:
    """Collection names in audit_db."""
    ADMIN_ACTIONS = "admin_actions"

    INDEXES = {
        "admin_actions": [
            {"keys": [("timestamp", DESCENDING)]},
            {"keys": [("admin_email", ASCENDING), ("timestamp", DESCENDING)]},
            {"keys": [("action", ASCENDING)]},
        ],
    }


async def create_audit_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create indexes for audit database collections."""
    for collection_name, indexes in Collections.INDEXES.items():
        collection = db[collection_name]
        for index_def in indexes:
            keys = index_def["keys"]
            kwargs = {k: v for k, v in index_def.items() if k != "keys"}
            await collection.create_index(keys, **kwargs)
