"""
Database definitions and collection constants.
"""
from vault.database.databases import audit_db

__all__ = ["audit_db"]
