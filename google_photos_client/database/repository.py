"""Cache store interface for Google Photos Client."""

from typing import List, Protocol

from google_photos_client.models import Photo


class PhotoRepository(Protocol):
    """Transactional store of cached album photos.

    Implementations keep one namespace per album. Each method runs as a
    single transaction and raises ``DatabaseError`` subclasses on failure.
    """

    def save_photos(self, album: str, photos: List[Photo]) -> None:
        """Append photos to the album namespace, creating it if needed."""

    def list_photos(self, album: str) -> List[Photo]:
        """Return cached photos in save order.

        Raises:
            AlbumNotExistsError: If nothing is cached for the album
        """

    def truncate_album(self, album: str) -> None:
        """Drop the album namespace. A missing namespace is not an error."""

    def close(self) -> None:
        """Release the underlying store."""
