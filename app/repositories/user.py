"""
User repository adapter.

Lookup and partial update of user records, keyed by email or by id.
"""

from dataclasses import dataclass
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import BadRequest, NotFound, RepositoryError
from app.core.logging import get_logger
from app.models.user import Users

logger = get_logger(__name__)

# Columns a patch may touch; id is never rewritten
UPDATABLE_FIELDS = frozenset({"name", "email", "password", "theme", "avatar_url"})


@dataclass(frozen=True)
class UserLookup:
    """Lookup key for a user record: exactly one of ``id`` or ``email``."""

    id: int | None = None
    email: str | None = None

    def __post_init__(self) -> None:
        if (self.id is None) == (self.email is None):
            raise ValueError("UserLookup needs exactly one of id or email")

    @classmethod
    def by_id(cls, user_id: int) -> "UserLookup":
        return cls(id=user_id)

    @classmethod
    def by_email(cls, email: str) -> "UserLookup":
        return cls(email=email)

    def describe(self) -> dict[str, Any]:
        return {"id": self.id} if self.id is not None else {"email": self.email}


class UserRepository(Protocol):
    """Lookup/update operations against the persisted user record."""

    async def find(self, by: UserLookup) -> Users | None: ...

    async def update(self, by: UserLookup, patch: dict[str, Any]) -> Users:
        """Apply ``patch`` and return the committed record.

        Raises NotFound when no record matches ``by``.
        """
        ...


class SqlUserRepository:
    """UserRepository backed by an async SQLAlchemy session."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    def _where(self, by: UserLookup) -> Any:
        if by.id is not None:
            return Users.id == by.id  # type: ignore[arg-type]
        return Users.email == by.email  # type: ignore[arg-type]

    async def find(self, by: UserLookup) -> Users | None:
        try:
            result = await self.db.execute(select(Users).where(self._where(by)))
        except SQLAlchemyError as e:
            logger.error("user_lookup_failed", lookup=by.describe(), error=str(e))
            raise RepositoryError("Failed to load user") from e
        return result.scalar_one_or_none()

    async def update(self, by: UserLookup, patch: dict[str, Any]) -> Users:
        unknown = set(patch) - UPDATABLE_FIELDS
        if unknown:
            raise BadRequest(f"Cannot update fields: {', '.join(sorted(unknown))}")

        user = await self.find(by)
        if user is None:
            raise NotFound("User not found")

        for field, value in patch.items():
            setattr(user, field, value)

        try:
            await self.db.commit()
            await self.db.refresh(user)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                "user_update_failed",
                lookup=by.describe(),
                fields=sorted(patch),
                error=str(e),
            )
            raise RepositoryError("Failed to update user") from e

        logger.info("user_updated", user_id=user.id, fields=sorted(patch))
        return user
