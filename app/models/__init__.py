"""
SQLModel models - database schema models.
"""

from app.models.user import UserBase, Users

__all__ = ["UserBase", "Users"]
