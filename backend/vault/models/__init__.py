"""
Pydantic models for directory records and log documents.
"""
from vault.models.favorite import Favorite, FavoriteStat
from vault.models.logs import AdminAction, AdminActionLog, SearchLogEntry
from vault.models.member import Member
from vault.models.service import ServiceRecord
from vault.models.user import SessionUser, WILDCARD_GROUP

__all__ = [
    "ServiceRecord",
    "Member",
    "Favorite",
    "FavoriteStat",
    "SearchLogEntry",
    "AdminAction",
    "AdminActionLog",
    "SessionUser",
    "WILDCARD_GROUP",
]
