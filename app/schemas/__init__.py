"""
Pydantic schemas for API responses and requests
"""

from app.schemas.help import HelpRequest, MessageResponse
from app.schemas.user import (
    AvatarResponse,
    ProfileResponse,
    ProfileUpdate,
    ThemeResponse,
    ThemeUpdate,
)

__all__ = [
    "AvatarResponse",
    "HelpRequest",
    "MessageResponse",
    "ProfileResponse",
    "ProfileUpdate",
    "ThemeResponse",
    "ThemeUpdate",
]
