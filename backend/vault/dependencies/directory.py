"""
Access to the application-wide DirectoryService.
"""
from fastapi import Request

from vault.services.directory import DirectoryService


def get_directory(request: Request) -> DirectoryService:
    """Dependency returning the DirectoryService created at startup."""
    return request.app.state.directory


def get_client_ip(request: Request) -> str:
    """First X-Forwarded-For hop, else the peer address."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip() or "unknown"
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def get_user_agent(request: Request) -> str:
    return request.headers.get("user-agent") or "unknown"
