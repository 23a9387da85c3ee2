"""Infrastructure layer for memory-mcp."""

from .database import DatabaseConnection, ResultSet
from .repositories import TagRepository

__all__ = ["DatabaseConnection", "ResultSet", "TagRepository"]
