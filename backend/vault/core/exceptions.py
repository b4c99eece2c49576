"""
Exception hierarchy for the service directory.

Services raise these; routers translate them into HTTP errors.
"""

__all__ = [
    "VaultError",
    "UpstreamUnavailableError",
    "InvalidInputError",
    "UnauthorizedError",
]


class VaultError(Exception):
    """Root exception for all service-vault errors."""


class UpstreamUnavailableError(VaultError):
    """Raised when the record store cannot be reached or returns garbage."""


class InvalidInputError(VaultError):
    """Raised when a request is missing required fields or is malformed."""


class UnauthorizedError(VaultError):
    """Raised when the caller lacks the group or role an operation needs."""
