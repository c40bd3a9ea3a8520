"""Google Photos Client."""

from .client import GooglePhotosClient

__all__ = ["GooglePhotosClient"]
