"""
Pydantic schemas for User endpoints
"""

from typing import Literal

from pydantic import BaseModel, EmailStr, Field, field_validator

ThemeName = Literal["light", "dark", "violet"]


class ProfileUpdate(BaseModel):
    """Schema for updating the caller's profile - all fields optional"""

    name: str | None = Field(default=None, min_length=2, max_length=100)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=8, max_length=64)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: object) -> object:
        """Trim surrounding whitespace before the length checks run."""
        if isinstance(v, str):
            return v.strip()
        return v


class ThemeUpdate(BaseModel):
    """Schema for updating the theme preference"""

    theme: ThemeName


class ProfileProjection(BaseModel):
    """Public projection of a user returned after a profile update"""

    name: str
    email: str


class ProfileResponse(BaseModel):
    user: ProfileProjection


class ThemeProjection(BaseModel):
    theme: ThemeName


class ThemeResponse(BaseModel):
    user: ThemeProjection


class AvatarResponse(BaseModel):
    avatar: str | None
