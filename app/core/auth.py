"""
Authentication dependencies for FastAPI route protection.

This module provides dependency functions for:
- Extracting and verifying JWT tokens from requests
- Loading the current caller's identity from the user store
"""

from typing import Annotated

from fastapi import Cookie, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.errors import Unauthorized
from app.core.handlers import Identity
from app.core.logging import bind_user
from app.core.security import verify_access_token
from app.repositories.user import SqlUserRepository, UserLookup

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
    access_token: Annotated[str | None, Cookie()] = None,
) -> int:
    """
    Extract and verify the JWT access token.

    The Authorization bearer header is preferred; the ``access_token``
    cookie is accepted as a fallback.

    Raises:
        Unauthorized: if token is missing, invalid, or expired
    """
    token = credentials.credentials if credentials else access_token
    if not token:
        raise Unauthorized("Not authenticated")

    user_id = verify_access_token(token)
    if user_id is None:
        raise Unauthorized("Could not validate credentials")

    return user_id


async def get_current_identity(
    user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Identity:
    """
    Load the caller's identity using the verified token.

    Raises:
        Unauthorized: if the user no longer exists
    """
    user = await SqlUserRepository(db).find(UserLookup.by_id(user_id))
    if user is None or user.id is None:
        raise Unauthorized("User not found")

    bind_user(user.id)
    return Identity(id=user.id, email=user.email, name=user.name)
