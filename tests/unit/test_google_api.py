"""Unit tests for the Google Photos API wrapper."""

import json
import socket
from unittest.mock import MagicMock

import httplib2
import pytest
import requests
from googleapiclient.errors import HttpError

from google_photos_client.api.google_api import GooglePhotosApi
from google_photos_client.models import (
    BadStatusError,
    DecodeError,
    TransportError,
    UnauthorizedError,
)


def http_error(status: int) -> HttpError:
    """Build the error googleapiclient raises for a status code."""
    return HttpError(httplib2.Response({"status": status}), b"{}")


@pytest.fixture
def mock_service():
    """Create a mock Google Photos service."""
    service = MagicMock()
    service.albums.return_value.list.return_value.execute.return_value = {
        "albums": [{"id": "album_id", "title": "album title", "mediaItemsCount": "1"}]
    }
    service.mediaItems.return_value.search.return_value.execute.return_value = {
        "mediaItems": [{"id": "photo_id", "baseUrl": "photo_path.png"}]
    }
    return service


@pytest.fixture
def mock_build(mocker, mock_service):
    """Replace service discovery with the mock service."""
    return mocker.patch("google_photos_client.api.google_api.build", return_value=mock_service)


@pytest.fixture
def api(mock_build):
    """Create an API object with a mock session."""
    return GooglePhotosApi(session=MagicMock())


def test_list_albums(api, mock_service, mock_build):
    """Test listing albums."""
    albums = api.list_albums("accesstoken")

    assert len(albums) == 1
    assert albums[0].title == "album title"
    assert albums[0].media_items_count == 1
    mock_service.albums.return_value.list.assert_called_once_with(pageSize=50)
    request = mock_service.albums.return_value.list.return_value
    request.headers.__setitem__.assert_any_call("Authorization", "Bearer accesstoken")
    assert mock_build.call_args[0] == ("photoslibrary", "v1")
    assert mock_build.call_args[1]["static_discovery"] is False


def test_service_is_built_once(api, mock_build):
    """Test that discovery runs only once per API object."""
    api.list_albums("accesstoken")
    api.search_photos("accesstoken", "album_id")
    mock_build.assert_called_once()


def test_list_albums_empty(api, mock_service):
    """Test an account without albums."""
    mock_service.albums.return_value.list.return_value.execute.return_value = {}
    assert api.list_albums("accesstoken") == []


def test_search_photos(api, mock_service):
    """Test searching photos of an album."""
    photos = api.search_photos("accesstoken", "album_id")

    assert len(photos) == 1
    assert photos[0].base_url == "photo_path.png"
    mock_service.mediaItems.return_value.search.assert_called_once_with(
        body={"albumId": "album_id", "pageSize": 100}
    )
    request = mock_service.mediaItems.return_value.search.return_value
    request.headers.__setitem__.assert_any_call("Authorization", "Bearer accesstoken")


def test_search_photos_page_size(api, mock_service):
    """Test overriding the page size."""
    api.search_photos("accesstoken", "album_id", page_size=25)
    mock_service.mediaItems.return_value.search.assert_called_once_with(
        body={"albumId": "album_id", "pageSize": 25}
    )


def test_search_photos_empty_album(api, mock_service):
    """Test that an empty album has no mediaItems key."""
    mock_service.mediaItems.return_value.search.return_value.execute.return_value = {}
    assert api.search_photos("accesstoken", "album_id") == []


@pytest.mark.parametrize(
    "error, expected",
    [
        (http_error(401), UnauthorizedError),
        (http_error(403), BadStatusError),
        (http_error(404), BadStatusError),
        (http_error(500), BadStatusError),
        (json.JSONDecodeError("Expecting value", "", 0), DecodeError),
        (socket.timeout("timed out"), TransportError),
        (httplib2.ServerNotFoundError("no server"), TransportError),
    ],
)
def test_search_photos_errors(api, mock_service, error, expected):
    """Test mapping of request failures."""
    mock_service.mediaItems.return_value.search.return_value.execute.side_effect = error
    with pytest.raises(expected):
        api.search_photos("accesstoken", "album_id")


def test_list_albums_unauthorized(api, mock_service):
    """Test that an expired token is reported as unauthorized."""
    mock_service.albums.return_value.list.return_value.execute.side_effect = http_error(401)
    with pytest.raises(UnauthorizedError):
        api.list_albums("accesstoken")


def test_bad_status_keeps_status(api, mock_service):
    """Test that the HTTP status is kept on the error."""
    mock_service.albums.return_value.list.return_value.execute.side_effect = http_error(404)
    with pytest.raises(BadStatusError) as exc_info:
        api.list_albums("accesstoken")
    assert exc_info.value.status == 404


def test_discovery_failure(mock_build):
    """Test that a failing discovery is a transport error."""
    mock_build.side_effect = httplib2.ServerNotFoundError("no server")
    api = GooglePhotosApi(session=MagicMock())
    with pytest.raises(TransportError):
        api.list_albums("accesstoken")


def test_malformed_media_item(api, mock_service):
    """Test a media item without id."""
    mock_service.mediaItems.return_value.search.return_value.execute.return_value = {
        "mediaItems": [{"baseUrl": "photo_path.png"}]
    }
    with pytest.raises(DecodeError):
        api.search_photos("accesstoken", "album_id")


@pytest.mark.parametrize("status_code, expected", [(200, True), (401, False), (403, False)])
def test_url_is_valid(api, status_code, expected):
    """Test probing a media link."""
    api.session.get.return_value.status_code = status_code

    assert api.url_is_valid("https://lh3.googleusercontent.com/check") is expected
    api.session.get.assert_called_once_with(
        "https://lh3.googleusercontent.com/check", stream=True, timeout=api.timeout
    )
    api.session.get.return_value.close.assert_called_once()


def test_url_is_valid_transport_error(api):
    """Test that an unreachable link counts as expired."""
    api.session.get.side_effect = requests.ConnectionError("refused")
    assert api.url_is_valid("https://lh3.googleusercontent.com/check") is False


def test_refresh_access_token(mocker):
    """Test that token refresh goes through the API session."""
    session = MagicMock()
    mock_refresh = mocker.patch(
        "google_photos_client.api.google_api.refresh_access_token", return_value="new_token"
    )
    api = GooglePhotosApi(session=session, token_uri="http://localhost/token")

    assert api.refresh_access_token("CLIENT_ID", "SECRET_ID", "TOKEN") == "new_token"
    mock_refresh.assert_called_once_with(
        "CLIENT_ID", "SECRET_ID", "TOKEN", session=session, token_uri="http://localhost/token"
    )
