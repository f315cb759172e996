"""
Profile and theme update pipelines.
"""

from typing import Any

from app.core.errors import Conflict, HttpError, NotFound, RepositoryError
from app.core.logging import get_logger
from app.core.security import hash_password
from app.models.user import Users
from app.repositories.user import UserLookup, UserRepository

logger = get_logger(__name__)


async def _require_user(users: UserRepository, email: str) -> Users:
    user = await users.find(UserLookup.by_email(email))
    if user is None:
        raise NotFound("User not found")
    return user


async def _apply(users: UserRepository, email: str, patch: dict[str, Any]) -> Users:
    """Write ``patch`` to the user keyed by ``email``; storage failures become RepositoryError."""
    try:
        return await users.update(UserLookup.by_email(email), patch)
    except HttpError:
        raise
    except Exception as e:
        raise RepositoryError("Failed to update user") from e


async def update_profile(
    users: UserRepository,
    *,
    email: str,
    changes: dict[str, Any],
    hash_delay_ms: int | None = None,
) -> dict[str, str]:
    """
    Apply profile changes for the user identified by ``email``.

    A new password is hashed with bcrypt before it is stored. The result
    only exposes the public projection (name and email) of the committed
    record.

    Args:
        users: User repository
        email: Email of the authenticated caller
        changes: Submitted fields (name, email, password)
        hash_delay_ms: Override of settings.PASSWORD_HASH_DELAY_MS

    Raises:
        NotFound: no user has ``email``
        Conflict: the new email belongs to another user
        RepositoryError: the record could not be updated
    """
    user = await _require_user(users, email)

    patch = dict(changes)

    new_email = patch.get("email")
    if new_email is not None and new_email != user.email:
        existing = await users.find(UserLookup.by_email(new_email))
        if existing is not None and existing.id != user.id:
            raise Conflict("Email already in use")

    password = patch.pop("password", None)
    if password is not None:
        patch["password"] = await hash_password(password, delay_ms=hash_delay_ms)

    result = await _apply(users, email, patch)

    logger.info("profile_updated", user_id=result.id, password_changed=password is not None)
    return {"name": result.name, "email": result.email}


async def update_theme(users: UserRepository, *, email: str, theme: str) -> str:
    """
    Store the theme preference of the user identified by ``email``.

    Raises:
        NotFound: no user has ``email``
    """
    await _require_user(users, email)
    result = await _apply(users, email, {"theme": theme})
    return result.theme
