"""
API Routers module.
"""
from vault.routers import admin, auth, config, favorites, health, search

__all__ = ["admin", "auth", "config", "favorites", "health", "search"]
