"""Persistence layer: database session management, ORM models and repositories."""

from freshspot.infrastructure.persistence.database import Database
from freshspot.infrastructure.persistence.models import Base, ResolvedItemModel
from freshspot.infrastructure.persistence.repositories import ResolvedItemRepository

__all__ = ["Base", "Database", "ResolvedItemModel", "ResolvedItemRepository"]
