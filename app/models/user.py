"""
SQLModel-based User models with inheritance for security

UserBase (shared public fields)
    └─> Users (database table, adds sensitive fields)

API schemas for the profile, theme and avatar endpoints live in
app/schemas/user.py and never include the password hash.
"""

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from app.config import Theme


class UserBase(SQLModel):
    """
    Base model with shared public fields for Users.
    """

    name: str = Field(max_length=100)
    email: str = Field(max_length=120)

    # Preferences
    theme: str = Field(default=Theme.LIGHT, max_length=20)

    # Avatar (remote media URL)
    avatar_url: str | None = Field(default=None, max_length=512)


class Users(UserBase, table=True):
    """
    Database table for users.

    Internal/sensitive fields (should NOT be exposed via the API):
    - password: bcrypt credential hash
    """

    __tablename__ = "users"

    __table_args__ = (Index("ix_users_email", "email", unique=True),)

    # Primary key
    id: int | None = Field(default=None, primary_key=True)

    # Authentication (highly sensitive - never expose)
    password: str = Field(max_length=255)
