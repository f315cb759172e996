"""
Security utilities for authentication.

This module provides:
- Password hashing and verification using bcrypt
- JWT access token generation and verification
"""

import asyncio
import base64
import hashlib
from datetime import UTC, datetime, timedelta

import bcrypt
import jwt

from app.config import settings


def _prepare_password_for_bcrypt(password: str) -> str:
    """
    Prepare password for bcrypt by handling long passwords.

    Bcrypt has a 72 byte limit. For passwords longer than 72 bytes,
    we SHA256 hash them first and encode as base64.
    """
    password_bytes = password.encode("utf-8")

    if len(password_bytes) <= 72:
        return password

    # SHA256 produces 32 bytes, base64 encoding produces 44 chars (well under 72)
    hashed = hashlib.sha256(password_bytes).digest()
    return base64.b64encode(hashed).decode("ascii")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Args:
        plain_password: The plain text password to verify
        hashed_password: The bcrypt hashed password

    Returns:
        True if password matches, False otherwise
    """
    prepared_password = _prepare_password_for_bcrypt(plain_password)
    return bcrypt.checkpw(prepared_password.encode("utf-8"), hashed_password.encode("utf-8"))


def get_password_hash(password: str, rounds: int | None = None) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: The plain text password to hash
        rounds: Cost factor, defaults to settings.BCRYPT_ROUNDS

    Returns:
        The bcrypt hashed password
    """
    prepared_password = _prepare_password_for_bcrypt(password)
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(prepared_password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


async def hash_password(password: str, delay_ms: int | None = None) -> str:
    """
    Hash a password without blocking the event loop.

    Waits ``delay_ms`` (settings.PASSWORD_HASH_DELAY_MS by default) before
    hashing, which puts a floor under the latency of password changes.
    """
    if delay_ms is None:
        delay_ms = settings.PASSWORD_HASH_DELAY_MS
    if delay_ms > 0:
        await asyncio.sleep(delay_ms / 1000)

    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, get_password_hash, password)


def create_access_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT access token.

    Args:
        user_id: The user ID to encode in the token
        expires_delta: Optional custom expiration time (defaults to settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    Returns:
        Encoded JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    expire = datetime.now(UTC) + expires_delta

    payload = {
        "sub": str(user_id),
        "exp": expire,
        "type": "access",
    }

    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_access_token(token: str) -> int | None:
    """
    Verify and decode a JWT access token.

    Returns:
        User ID if token is valid, None otherwise
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"verify_exp": True, "verify_signature": True},
        )

        if payload.get("type") != "access":
            return None

        user_id: str | None = payload.get("sub")
        if user_id is None:
            return None

        return int(user_id)

    except jwt.ExpiredSignatureError:
        return None
    except jwt.DecodeError:
        return None
    except (ValueError, TypeError):
        return None
