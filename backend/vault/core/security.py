"""
Session tokens.

Sign-in is delegated to the identity provider; once an email passes the
sign-in rules the API issues its own short-lived JWT whose subject is
that email. Nothing else is stored in the token: groups and the admin
flag are resolved again on every request.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt

from vault.config import get_settings


def create_access_token(email: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Issue a session JWT for a signed-in email.

    Args:
        email: Lowercased email verified by the identity provider
        expires_delta: Lifetime override, defaults to the configured one
    """
    settings = get_settings()
    lifetime = expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes)
    issued_at = datetime.now(timezone.utc)

    claims = {"sub": email, "iat": issued_at, "exp": issued_at + lifetime}
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """
    Verify signature and expiry, returning the claims.

    Raises:
        JWTError: If token is invalid or expired
    """
    settings = get_settings()
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])


def session_email(token: str) -> str:
    """
    Lowercased email carried by a session token.

    Raises:
        JWTError: If the token is invalid, expired or has no subject
    """
    subject = decode_token(token).get("sub")
    if not subject:
        raise JWTError("Session token has no subject")
    return str(subject).lower()


__all__ = ["create_access_token", "decode_token", "session_email", "JWTError"]
