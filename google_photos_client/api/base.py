"""Remote service interface for Google Photos Client."""

from typing import List, Protocol

from google_photos_client.models import Album, Photo

DEFAULT_PAGE_SIZE = 100


class PhotosApi(Protocol):
    """Low-level calls against the photo library service.

    Every call except ``url_is_valid`` raises an ``ApiError`` subclass on
    failure; an expired access token surfaces as ``UnauthorizedError``.
    """

    def refresh_access_token(self, client_id: str, client_secret: str, refresh_token: str) -> str:
        """Mint a new access token from the refresh token."""

    def list_albums(self, access_token: str) -> List[Album]:
        """Get the albums of the authorized user."""

    def search_photos(
        self, access_token: str, album_id: str, page_size: int = DEFAULT_PAGE_SIZE
    ) -> List[Photo]:
        """Get the photos of an album."""

    def url_is_valid(self, url: str) -> bool:
        """Check whether a media link can still be served."""
