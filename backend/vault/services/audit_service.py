"""
Audit service: the sink for administrative action logs.
"""
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING

from vault.database.databases import audit_db
from vault.models.logs import AdminAction, AdminActionLog

logger = logging.getLogger(__name__)


class AuditService:
    """Append-only writer and reader for audit_db.admin_actions."""

    def __init__(self, db: AsyncIOMotorDatabase):
        """Initialize with audit database."""
        self.db = db
        self.actions_col = db[audit_db.Collections.ADMIN_ACTIONS]

    async def record(
        self,
        admin_email: str,
        action: AdminAction,
        target: Optional[str] = None,
        details: str = "",
        client_ip: str = "unknown",
    ) -> AdminActionLog:
        """
        Append an audit entry.

        A failed write is logged and does not undo the action it records.
        """
        entry = AdminActionLog(
            admin_email=admin_email,
            action=action,
            target=target,
            details=details,
            client_ip=client_ip,
        )
        try:
            await self.actions_col.insert_one(entry.to_mongo_doc())
        except Exception:
            logger.exception(f"Failed to write audit entry {entry.action} for {entry.target}")
        return entry

    async def list_logs(self, limit: int = 100) -> list[AdminActionLog]:
        """Most recent audit entries first."""
        cursor = self.actions_col.find({}, {"_id": 0}).sort("timestamp", DESCENDING).limit(limit)
        return [AdminActionLog(**doc) async for doc in cursor]
