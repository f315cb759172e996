"""Persistence adapters for domain records."""

from app.repositories.user import SqlUserRepository, UserLookup, UserRepository

__all__ = ["SqlUserRepository", "UserLookup", "UserRepository"]
