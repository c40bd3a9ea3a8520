"""Utility functions for Google Photos Client."""

from .auth import get_credentials, refresh_access_token

__all__ = ["get_credentials", "refresh_access_token"]
