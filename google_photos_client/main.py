"""Command line entry point for Google Photos Client."""

import argparse
import logging
import sys
from typing import List, Optional

from tabulate import tabulate

from google_photos_client.client import GooglePhotosClient
from google_photos_client.database.db_manager import DEFAULT_DB_PATH
from google_photos_client.models import Album, ClientError, DatabaseError, Photo
from google_photos_client.utils.auth import get_credentials

logger = logging.getLogger(__name__)


def print_albums(albums: List[Album]) -> None:
    """Print albums as a table."""
    if not albums:
        print("No albums found")
        return

    rows = [[album.id, album.title, album.media_items_count, album.product_url] for album in albums]
    print(tabulate(rows, headers=["ID", "Title", "Items", "URL"], tablefmt="psql"))
    print(f"\nTotal albums: {len(albums)}")


def print_photos(photos: List[Photo]) -> None:
    """Print photos as a table."""
    if not photos:
        print("No photos found")
        return

    rows = []
    for photo in photos:
        metadata = photo.metadata
        camera = metadata.camera
        rows.append(
            [
                photo.filename,
                metadata.creation_time,
                photo.mime_type,
                f"{metadata.width}x{metadata.height}",
                f"{camera.camera_make} {camera.camera_model}".strip() if camera else "",
                photo.base_url,
            ]
        )
    print(
        tabulate(
            rows,
            headers=["Filename", "Creation Time", "MIME Type", "Dimensions", "Camera", "URL"],
            tablefmt="psql",
        )
    )
    print(f"\nTotal photos: {len(photos)}")


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Google Photos Client")

    # Global arguments
    parser.add_argument(
        "--token-file", type=str, default="token.json", help="Authorized user token file"
    )
    parser.add_argument(
        "--db-path", type=str, default=DEFAULT_DB_PATH, help="Photo cache database file"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands", required=True)

    subparsers.add_parser("albums", help="List albums")

    photos_parser = subparsers.add_parser("photos", help="List photos of an album")
    photos_parser.add_argument("album_id", type=str, help="Album ID")

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the Google Photos Client CLI."""
    args = parse_arguments(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        creds = get_credentials(args.token_file)
        client = GooglePhotosClient.open(
            creds.client_id,
            creds.client_secret,
            creds.refresh_token,
            args.db_path,
            access_token=creds.token or "",
        )
    except (FileNotFoundError, ValueError, DatabaseError) as e:
        logger.error("Failed to start client: %s", e)
        return 1

    with client:
        try:
            if args.command == "albums":
                print_albums(client.list_albums())
            elif args.command == "photos":
                print_photos(client.get_photos_by_album(args.album_id))
        except ClientError as e:
            logger.error("%s failed: %s", args.command, e)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
