"""
Log models: search history and administrator audit trail.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SearchLogEntry(BaseModel):
    """A single search performed through the search surface."""
    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=_utcnow)
    actor_email: str
    query: str
    client_ip: str = "unknown"
    user_agent: str = "unknown"
    success: bool = Field(..., description="True when the search returned results")


class AdminAction(str, Enum):
    """Administrative mutations recorded in the audit trail."""
    MEMBER_ADD = "MEMBER_ADD"
    MEMBER_DELETE = "MEMBER_DELETE"
    PERMISSION_UPDATE = "PERMISSION_UPDATE"
    CACHE_REFRESH = "CACHE_REFRESH"


class AdminActionLog(BaseModel):
    """
    Audit document for audit_db.admin_actions.
    """
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    timestamp: datetime = Field(default_factory=_utcnow)
    admin_email: str
    action: AdminAction
    target: Optional[str] = Field(None, description="Affected service id or member email")
    details: str = ""
    client_ip: str = "unknown"

    def to_mongo_doc(self) -> dict:
        return self.model_dump()
