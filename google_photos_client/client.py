"""Google Photos client combining token refresh with a local photo cache."""

import logging
from typing import Callable, List, Optional, Type, TypeVar

from google_photos_client.api import GooglePhotosApi, PhotosApi
from google_photos_client.database import DatabaseManager, PhotoRepository
from google_photos_client.models import (
    Album,
    AlbumNotExistsError,
    ApiError,
    ClientError,
    DatabaseError,
    GetAlbumError,
    Photo,
    RefreshTokenError,
    SaveError,
    SearchPhotosError,
    TruncateError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GooglePhotosClient:
    """Lists albums and album photos, hiding token expiry and expiring media links.

    Album photos are served from the repository as long as the first cached
    photo's media link is still valid. Otherwise they are fetched again and the
    album's cache is replaced as a whole.

    An instance is meant to be used by one caller at a time: the access token
    and the read-then-refill of an album are not guarded against interleaving.
    """

    def __init__(self, client_id: str, client_secret: str, refresh_token: str,
                 repository: PhotoRepository, api: Optional[PhotosApi] = None,
                 access_token: str = ""):
        """Initialize the client.

        Args:
            client_id: OAuth client ID
            client_secret: OAuth client secret
            refresh_token: Refresh token used to mint access tokens
            repository: Photo cache
            api: Photo library API, GooglePhotosApi if not given
            access_token: Access token to start with, refreshed on demand
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.refresh_token = refresh_token
        self.access_token = access_token
        self.repository = repository
        self.api: PhotosApi = api if api is not None else GooglePhotosApi()

    @classmethod
    def open(cls, client_id: str, client_secret: str, refresh_token: str,
             db_path: str, api: Optional[PhotosApi] = None,
             access_token: str = "") -> "GooglePhotosClient":
        """Create a client caching photos in the SQLite file at db_path."""
        repository = DatabaseManager(db_path)
        repository.connect()
        return cls(client_id, client_secret, refresh_token, repository,
                   api=api, access_token=access_token)

    def close(self) -> None:
        """Release the photo cache."""
        self.repository.close()

    def __enter__(self) -> "GooglePhotosClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def refresh_access_token(self) -> str:
        """Replace the access token using the refresh token.

        Raises:
            RefreshTokenError: If the token exchange fails
        """
        try:
            token = self.api.refresh_access_token(
                self.client_id, self.client_secret, self.refresh_token
            )
        except ApiError as e:
            logger.error("Failed to refresh access token: %s", e)
            raise RefreshTokenError(f"Failed to refresh access token: {e}") from e
        self.access_token = token
        return token

    def list_albums(self) -> List[Album]:
        """Get albums from Google Photos. Albums are never cached.

        Raises:
            RefreshTokenError: If the token had to be refreshed and that failed
            GetAlbumError: If the albums could not be fetched
        """
        return self._call_authorized(self.api.list_albums, GetAlbumError)

    def get_photos_by_album(self, album_id: str) -> List[Photo]:
        """Get photos of an album, from the cache while its media links are valid.

        Only the first cached photo is probed: links of one fetch expire
        together, so one probe stands in for the whole album.

        Raises:
            RefreshTokenError: If the token had to be refreshed and that failed
            SearchPhotosError: If the photos could not be fetched
            TruncateError: If the stale cache could not be cleared
            SaveError: If the fetched photos could not be cached
        """
        try:
            cached = self.repository.list_photos(album_id)
        except AlbumNotExistsError:
            cached = []
        except DatabaseError as e:
            logger.warning("Failed to read cached photos of album %s: %s", album_id, e)
            cached = []

        if cached and self.api.url_is_valid(cached[0].base_url):
            logger.debug("Cache hit for album %s", album_id)
            return cached

        logger.info("Fetching photos of album %s", album_id)
        photos = self._call_authorized(
            lambda token: self.api.search_photos(token, album_id), SearchPhotosError
        )
        self._replace_cached_photos(album_id, photos)
        return photos

    def _replace_cached_photos(self, album_id: str, photos: List[Photo]) -> None:
        try:
            self.repository.truncate_album(album_id)
        except DatabaseError as e:
            raise TruncateError(f"Failed to truncate album {album_id}: {e}") from e

        if not photos:
            return
        try:
            self.repository.save_photos(album_id, photos)
        except DatabaseError as e:
            raise SaveError(f"Failed to save photos of album {album_id}: {e}") from e

    def _call_authorized(self, call: Callable[[str], T], error: Type[ClientError]) -> T:
        """Run an API call, refreshing the token and retrying once if it is rejected."""
        try:
            return call(self.access_token)
        except UnauthorizedError:
            logger.info("Access token rejected, refreshing")
        except ApiError as e:
            raise error(str(e)) from e

        self.refresh_access_token()
        try:
            return call(self.access_token)
        except ApiError as e:
            raise error(str(e)) from e
