"""
Shared FastAPI dependencies providing the request collaborators.

Tests override ``get_media_store`` and ``get_email_sender`` through
``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.repositories.user import SqlUserRepository, UserRepository
from app.services.container import Services
from app.services.email import EmailSender, send_email
from app.services.media import CloudinaryMediaStore, MediaStore


async def get_user_repository(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserRepository:
    return SqlUserRepository(db)


def get_media_store() -> MediaStore:
    return CloudinaryMediaStore.from_settings()


def get_email_sender() -> EmailSender:
    return send_email


async def get_services(
    users: Annotated[UserRepository, Depends(get_user_repository)],
    media: Annotated[MediaStore, Depends(get_media_store)],
    email_sender: Annotated[EmailSender, Depends(get_email_sender)],
) -> Services:
    """Bundle the collaborators for one request."""
    return Services(users=users, media=media, send_email=email_sender)
