"""
Integration tests for the SQL user repository against SQLite.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import BadRequest, NotFound
from app.repositories.user import SqlUserRepository, UserLookup


@pytest.mark.integration
class TestSqlUserRepository:
    async def test_find_by_email(self, db_session: AsyncSession):
        user = await SqlUserRepository(db_session).find(UserLookup.by_email("a@x.com"))

        assert user is not None
        assert user.id == 1
        assert user.name == "Ann"

    async def test_find_by_id(self, db_session: AsyncSession):
        user = await SqlUserRepository(db_session).find(UserLookup.by_id(2))

        assert user is not None
        assert user.email == "bob@x.com"

    async def test_find_missing_returns_none(self, db_session: AsyncSession):
        assert await SqlUserRepository(db_session).find(UserLookup.by_id(99)) is None

    async def test_update_applies_patch(self, db_session: AsyncSession):
        repo = SqlUserRepository(db_session)

        user = await repo.update(UserLookup.by_email("a@x.com"), {"theme": "dark"})

        assert user.theme == "dark"
        reloaded = await repo.find(UserLookup.by_id(1))
        assert reloaded is not None
        assert reloaded.theme == "dark"

    async def test_update_missing_raises_not_found(self, db_session: AsyncSession):
        with pytest.raises(NotFound):
            await SqlUserRepository(db_session).update(UserLookup.by_id(99), {"theme": "dark"})

    async def test_update_rejects_unknown_fields(self, db_session: AsyncSession):
        with pytest.raises(BadRequest):
            await SqlUserRepository(db_session).update(UserLookup.by_id(1), {"id": 5})


@pytest.mark.unit
class TestUserLookup:
    def test_requires_exactly_one_key(self):
        with pytest.raises(ValueError):
            UserLookup()
        with pytest.raises(ValueError):
            UserLookup(id=1, email="a@x.com")
