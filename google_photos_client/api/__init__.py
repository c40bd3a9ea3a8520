"""Google Photos Library API access."""

from .base import DEFAULT_PAGE_SIZE, PhotosApi
from .google_api import GooglePhotosApi

__all__ = ["DEFAULT_PAGE_SIZE", "GooglePhotosApi", "PhotosApi"]
