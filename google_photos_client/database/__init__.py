"""Photo cache storage for Google Photos Client."""

from .db_manager import DatabaseManager
from .repository import PhotoRepository

__all__ = ["DatabaseManager", "PhotoRepository"]
