"""
Core module - Security, rate limiting, logging and exceptions.
"""
from vault.core.security import create_access_token, decode_token, session_email
from vault.core.rate_limit import RateLimitResult, check_rate_limit
from vault.core.exceptions import (
    VaultError,
    UpstreamUnavailableError,
    InvalidInputError,
    UnauthorizedError,
)

__all__ = [
    "create_access_token",
    "decode_token",
    "session_email",
    "RateLimitResult",
    "check_rate_limit",
    "VaultError",
    "UpstreamUnavailableError",
    "InvalidInputError",
    "UnauthorizedError",
]
