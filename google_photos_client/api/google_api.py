"""Low-level requests to the Google Photos Library API."""

import logging
from typing import Any, Callable, Dict, List, Optional

import httplib2
import requests
from googleapiclient.discovery import Resource, build
from googleapiclient.errors import Error as ApiClientError
from googleapiclient.errors import HttpError
from googleapiclient.http import HttpRequest

from google_photos_client.api.base import DEFAULT_PAGE_SIZE
from google_photos_client.models import (
    Album,
    BadStatusError,
    DecodeError,
    Photo,
    TransportError,
    UnauthorizedError,
)
from google_photos_client.utils.auth import TOKEN_URI, refresh_access_token

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
ALBUM_PAGE_SIZE = 50


class GooglePhotosApi:
    """Calls the Google Photos Library API with a caller supplied access token."""

    def __init__(self, session: Optional[requests.Session] = None,
                 timeout: float = DEFAULT_TIMEOUT, token_uri: str = TOKEN_URI):
        """Initialize the API.

        Args:
            session: Session used for token exchange and media link probes
            timeout: Timeout in seconds for every HTTP call
            token_uri: OAuth token endpoint
        """
        self.session = session or requests.Session()
        self.timeout = timeout
        self.token_uri = token_uri
        self.service: Optional[Resource] = None

    def refresh_access_token(self, client_id: str, client_secret: str, refresh_token: str) -> str:
        """Mint a new access token from the refresh token."""
        return refresh_access_token(
            client_id,
            client_secret,
            refresh_token,
            session=self.session,
            token_uri=self.token_uri,
        )

    def list_albums(self, access_token: str) -> List[Album]:
        """Get albums of the authorized user."""
        response = self._execute(
            lambda service: service.albums().list(pageSize=ALBUM_PAGE_SIZE), access_token
        )
        try:
            return [Album.from_dict(item) for item in response.get("albums", [])]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise DecodeError(f"Unexpected albums response: {e}") from e

    def search_photos(
        self, access_token: str, album_id: str, page_size: int = DEFAULT_PAGE_SIZE
    ) -> List[Photo]:
        """Get the first page of photos in an album."""
        response = self._execute(
            lambda service: service.mediaItems().search(
                body={"albumId": album_id, "pageSize": page_size}
            ),
            access_token,
        )
        try:
            photos = [Photo.from_dict(item) for item in response.get("mediaItems", [])]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise DecodeError(f"Unexpected media items response: {e}") from e

        logger.debug("Fetched %d photos for album %s from api", len(photos), album_id)
        return photos

    def url_is_valid(self, url: str) -> bool:
        """Check that a media link is still served. Any failure counts as expired."""
        try:
            response = self.session.get(url, stream=True, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Failed to probe media link: %s", e)
            return False
        try:
            return response.status_code == requests.codes.ok
        finally:
            response.close()

    def _get_service(self) -> Resource:
        if self.service is None:
            # No credentials on the transport: the token goes on each request,
            # so a 401 reaches the caller instead of being refreshed here.
            self.service = build(
                "photoslibrary",
                "v1",
                http=httplib2.Http(timeout=self.timeout),
                static_discovery=False,
            )
        return self.service

    def _execute(
        self, make_request: Callable[[Resource], HttpRequest], access_token: str
    ) -> Dict[str, Any]:
        try:
            request = make_request(self._get_service())
            request.headers["Authorization"] = f"Bearer {access_token}"
            request.headers["cache-control"] = "no-cache"
            return request.execute()
        except HttpError as e:
            if e.resp.status == 401:
                raise UnauthorizedError("unauthorized") from e
            logger.error("Bad status %s from Google Photos API", e.resp.status)
            raise BadStatusError(f"bad status: {e.resp.status}", status=e.resp.status) from e
        except ValueError as e:
            raise DecodeError(f"Failed to decode response: {e}") from e
        except (ApiClientError, httplib2.HttpLib2Error, OSError) as e:
            raise TransportError(f"Error calling Google Photos API: {e}") from e
