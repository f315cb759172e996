"""
Pytest configuration and shared fixtures.

Tests run against an in-memory SQLite database created from the SQLModel
metadata. The media store and the email transport are replaced by
recording fakes.
"""

import os

# Settings are read at import time, so the test environment must be in place
# before anything from app is imported.
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("PASSWORD_HASH_DELAY_MS", "0")
os.environ.setdefault("SUPPORT_EMAIL", "support@lumentask.test")
os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "demo")

from collections.abc import AsyncGenerator  # noqa: E402
from pathlib import Path  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

from app.api.dependencies import get_email_sender, get_media_store  # noqa: E402
from app.core.database import get_db  # noqa: E402
from app.core.errors import NotFound  # noqa: E402
from app.core.security import create_access_token, get_password_hash  # noqa: E402
from app.main import app as main_app  # noqa: E402
from app.models.user import Users  # noqa: E402
from app.repositories.user import UserLookup  # noqa: E402
from app.services.container import Services  # noqa: E402
from app.services.media import AvatarTransformation, UploadedMedia, delivery_url  # noqa: E402

TEST_PASSWORD = "Secret123!"


def make_users() -> list[Users]:
    """Users present in every test: Ann (id 1) and Bob (id 2)."""
    password = get_password_hash(TEST_PASSWORD, rounds=4)
    return [
        Users(id=1, name="Ann", email="a@x.com", password=password),
        Users(id=2, name="Bob", email="bob@x.com", password=password, theme="dark"),
    ]


# =============================================================================
# Fakes
# =============================================================================


class InMemoryUserRepository:
    """UserRepository keeping records in a dict and recording every call."""

    def __init__(self, users: list[Users]) -> None:
        self.records = {user.id: user for user in users}
        self.find_calls: list[UserLookup] = []
        self.update_calls: list[tuple[UserLookup, dict[str, Any]]] = []
        self.fail_updates_with: Exception | None = None

    def _match(self, by: UserLookup) -> Users | None:
        for user in self.records.values():
            if by.id is not None and user.id == by.id:
                return user
            if by.email is not None and user.email == by.email:
                return user
        return None

    async def find(self, by: UserLookup) -> Users | None:
        self.find_calls.append(by)
        return self._match(by)

    async def update(self, by: UserLookup, patch: dict[str, Any]) -> Users:
        self.update_calls.append((by, dict(patch)))
        if self.fail_updates_with is not None:
            raise self.fail_updates_with
        user = self._match(by)
        if user is None:
            raise NotFound("User not found")
        for field, value in patch.items():
            setattr(user, field, value)
        return user


class FakeMediaStore:
    """MediaStore recording uploads; checks the file exists while uploading."""

    def __init__(self) -> None:
        self.uploads: list[dict[str, Any]] = []
        self.fail_with: Exception | None = None

    async def upload(
        self, path: Path, *, namespace: str, object_id: str | None = None
    ) -> UploadedMedia:
        self.uploads.append(
            {
                "path": path,
                "namespace": namespace,
                "object_id": object_id,
                "existed": path.exists(),
            }
        )
        if self.fail_with is not None:
            raise self.fail_with
        public_id = f"{namespace}/{object_id or 'generated'}"
        return UploadedMedia(
            public_url=f"https://res.cloudinary.com/demo/image/upload/v1/{public_id}.png",
            object_id=public_id,
            version=1,
        )

    def build_transformed_url(
        self, media: UploadedMedia, transformation: AvatarTransformation
    ) -> str:
        return delivery_url("demo", media, transformation)


class FakeEmailSender:
    """EmailSender recording messages; recipients in ``failing`` report failure."""

    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []
        self.failing: set[str] = set()

    async def __call__(
        self,
        to: str | list[str],
        subject: str,
        html: str,
        body: str | None = None,
    ) -> bool:
        self.sent.append({"to": to, "subject": subject, "html": html, "body": body})
        return to not in self.failing


# =============================================================================
# Unit fixtures
# =============================================================================


@pytest.fixture
def users_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository(make_users())


@pytest.fixture
def media_store() -> FakeMediaStore:
    return FakeMediaStore()


@pytest.fixture
def outbox() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture
def services(
    users_repo: InMemoryUserRepository,
    media_store: FakeMediaStore,
    outbox: FakeEmailSender,
) -> Services:
    return Services(users=users_repo, media=media_store, send_email=outbox)


@pytest.fixture
def upload_file(tmp_path: Path) -> Path:
    """A temporary file standing in for an uploaded avatar."""
    path = tmp_path / "upload-avatar.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\nfake-image-bytes")
    return path


# =============================================================================
# Database and API fixtures
# =============================================================================


@pytest.fixture
async def engine():
    """In-memory SQLite engine with the schema created from SQLModel metadata."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Database session with the test users committed."""
    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        session.add_all(make_users())
        await session.commit()

        yield session

        await session.rollback()


@pytest.fixture
def app(
    db_session: AsyncSession,
    media_store: FakeMediaStore,
    outbox: FakeEmailSender,
) -> FastAPI:
    """FastAPI app wired to the test database and the fakes."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    main_app.dependency_overrides[get_db] = override_get_db
    main_app.dependency_overrides[get_media_store] = lambda: media_store
    main_app.dependency_overrides[get_email_sender] = lambda: outbox

    yield main_app

    main_app.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client for testing API endpoints.

    Usage:
        async def test_endpoint(client):
            response = await client.get("/health")
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Authorization header for Ann (user 1)."""
    return {"Authorization": f"Bearer {create_access_token(1)}"}
