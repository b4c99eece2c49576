"""
Service layer for business logic.
"""
from vault.services.audit_service import AuditService
from vault.services.auth_service import AuthService
from vault.services.directory import DirectoryService
from vault.services.record_store import (
    AppsScriptRecordStore,
    InMemoryRecordStore,
    RecordStore,
    create_record_store,
)

__all__ = [
    "AuditService",
    "AuthService",
    "DirectoryService",
    "RecordStore",
    "AppsScriptRecordStore",
    "InMemoryRecordStore",
    "create_record_store",
]
