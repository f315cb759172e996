"""Collaborators handed to controllers with every request."""

from dataclasses import dataclass

from app.repositories.user import UserRepository
from app.services.email import EmailSender
from app.services.media import MediaStore


@dataclass(frozen=True)
class Services:
    """External collaborators used by the request pipelines."""

    users: UserRepository
    media: MediaStore
    send_email: EmailSender
