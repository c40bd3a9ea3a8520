"""Authentication utilities for Google Photos API."""

import logging
import os
from typing import Optional

import requests
from google.auth import exceptions as auth_exceptions
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

from google_photos_client.models import BadStatusError, DecodeError, TransportError

logger = logging.getLogger(__name__)

SCOPES = ['https://www.googleapis.com/auth/photoslibrary.readonly']
TOKEN_URI = 'https://oauth2.googleapis.com/token'


def get_credentials(token_path: str) -> Credentials:
    """Load stored user credentials.

    The file is the authorized user JSON written by Google's installed app
    flow and must carry ``client_id``, ``client_secret`` and ``refresh_token``.

    Args:
        token_path: Path to token.json file

    Returns:
        Credentials object, possibly with an expired access token

    Raises:
        FileNotFoundError: If token.json is not found
    """
    if not os.path.exists(token_path):
        raise FileNotFoundError(f"Missing token file at {token_path}")
    return Credentials.from_authorized_user_file(token_path, SCOPES)


def refresh_access_token(client_id: str, client_secret: str, refresh_token: str,
                         session: Optional[requests.Session] = None,
                         token_uri: str = TOKEN_URI) -> str:
    """Exchange a refresh token for a new access token.

    google-auth may repeat the token request with backoff when the endpoint
    answers 429 or 5xx; the exchange still counts as one refresh.

    Args:
        client_id: OAuth client ID
        client_secret: OAuth client secret
        refresh_token: Long-lived refresh token
        session: Optional requests session to send the exchange through
        token_uri: Token endpoint

    Returns:
        New access token

    Raises:
        BadStatusError: If the token endpoint rejects the exchange
        TransportError: If the token endpoint cannot be reached
        DecodeError: If the response carries no access token
    """
    creds = Credentials(
        token=None,
        refresh_token=refresh_token,
        token_uri=token_uri,
        client_id=client_id,
        client_secret=client_secret,
    )
    try:
        creds.refresh(Request(session=session))
    except auth_exceptions.TransportError as e:
        raise TransportError(f"Error reaching token endpoint: {e}") from e
    except auth_exceptions.RefreshError as e:
        logger.error("Token refresh rejected: %s", e)
        raise BadStatusError(f"Error refreshing access token: {e}") from e

    if not creds.token:
        raise DecodeError("Token response carries no access token")
    logger.info("Access token refreshed, expires %s", creds.expiry)
    return creds.token
