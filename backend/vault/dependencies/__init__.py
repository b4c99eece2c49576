"""
Dependencies for dependency injection in routes.
"""
from vault.dependencies.auth import CurrentUser, get_current_user
from vault.dependencies.directory import get_client_ip, get_directory, get_user_agent
from vault.dependencies.rate_limit import rate_limited
from vault.dependencies.roles import require_admin

__all__ = [
    "CurrentUser",
    "get_current_user",
    "get_directory",
    "get_client_ip",
    "get_user_agent",
    "rate_limited",
    "require_admin",
]
