# app/core/security.py
"""
Security module for authentication.
Handles password hashing, session token creation/validation, the session cookie
description, and the request-time auth gate that turns a token into a user.
"""
import datetime as dt
import logging
import uuid

import jwt  # PyJWT
from passlib.context import CryptContext

from app.config import settings
from app.core.errors import Unauthenticated

logger = logging.getLogger("uvicorn.error")

# Password hashing context
# Argon2 is salted and memory-hard; verification compares in constant time
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
)

JWT_ALG = "HS256"  # HMAC SHA-256; PyJWT compares signatures with hmac.compare_digest
SESSION_TTL = dt.timedelta(days=settings.session_ttl_days)

_dummy_hash: str | None = None


def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Never store plain text passwords. Always use this function before saving.
    """
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text password against a hashed password.

    Returns False for malformed hashes instead of raising.
    """
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False


def burn_password_check(plain: str) -> None:
    """
    Run one throwaway verification so a login for an unknown email costs the
    same as a login with a wrong password.
    """
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password(uuid.uuid4().hex)
    verify_password(plain, _dummy_hash)


def create_session_token(user_id: str, expires_in: dt.timedelta | None = None) -> str:
    """
    Create a signed session token for a user.

    Payload:
        - sub: Subject (user ID)
        - iat: Issued at timestamp
        - exp: Expiration timestamp (default: now + SESSION_TTL_DAYS)
    """
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + (expires_in if expires_in is not None else SESSION_TTL),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=JWT_ALG)


def decode_session_token(token: str) -> dict:
    """
    Decode and validate a session token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid, malformed or lacks a claim
    """
    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[JWT_ALG],
        options={"require": ["sub", "iat", "exp"]},
    )


def session_cookie_params() -> dict:
    """Keyword arguments for ``Response.set_cookie`` when issuing a session."""
    return {
        "key": settings.session_cookie_name,
        "max_age": int(SESSION_TTL.total_seconds()),
        "httponly": True,
        "samesite": "strict",
        "secure": settings.cookie_secure,
    }


async def authenticate(token: str | None, credentials):
    """
    Resolve a session token to a stored user.

    NoToken -> TokenPresent -> TokenValid -> Authenticated. Every failed step
    raises Unauthenticated; a user deleted after issuance is a rejection, not
    a crash.

    Args:
        token: Raw token string from the session cookie (may be None)
        credentials: CredentialStore used to resolve the subject
    """
    if not token:
        raise Unauthenticated("Unauthorized - no token provided")

    try:
        payload = decode_session_token(token)
    except jwt.ExpiredSignatureError:
        raise Unauthenticated("Unauthorized - session expired")
    except jwt.InvalidTokenError:
        raise Unauthenticated("Unauthorized - invalid token")

    user = await credentials.find_by_id(payload["sub"])
    if user is None:
        logger.warning("[auth] token subject %s no longer exists", payload["sub"])
        raise Unauthenticated("Unauthorized - user not found")
    return user
