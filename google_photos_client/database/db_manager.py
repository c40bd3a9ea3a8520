"""Database operations for Google Photos Client."""

import json
import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator, List, Optional

from google_photos_client.models import (
    AlbumNotExistsError,
    DatabaseError,
    Photo,
    PhotoDecodeError,
)

logger = logging.getLogger(__name__)

PHOTO_BUCKET = "photo"
DEFAULT_DB_PATH = "gphoto.db"


class DatabaseManager:
    """Manages the photo cache database.

    Records are kept in nested buckets: a top-level ``photo`` bucket holds one
    child bucket per album, and every album bucket maps a decimal sequence
    number to a JSON encoded photo. A bucket's sequence only grows until the
    bucket itself is deleted.

    Every public method runs in exactly one transaction.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        """Initialize database manager.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self.conn: Optional[sqlite3.Connection] = None

    def connect(self) -> None:
        """Connect to the database and make sure the schema exists.

        Does nothing when a connection is already open.
        """
        if self.conn is not None:
            return
        try:
            # Transactions are opened explicitly in _transaction.
            self.conn = sqlite3.connect(self.db_path, isolation_level=None)
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to connect to database: {e}") from e
        self.init_database()

    def init_database(self) -> None:
        """Create the bucket tables and the top-level photo bucket."""
        try:
            with self._transaction() as cursor:
                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS buckets (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        parent_id INTEGER,
                        name TEXT NOT NULL,
                        sequence INTEGER NOT NULL DEFAULT 0,
                        FOREIGN KEY (parent_id) REFERENCES buckets (id)
                    )
                """
                )
                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS entries (
                        bucket_id INTEGER NOT NULL,
                        key TEXT NOT NULL,
                        value TEXT NOT NULL,
                        FOREIGN KEY (bucket_id) REFERENCES buckets (id),
                        PRIMARY KEY (bucket_id, key)
                    )
                """
                )
                cursor.execute(
                    """
                    CREATE INDEX IF NOT EXISTS idx_buckets_parent_name
                    ON buckets(parent_id, name)
                """
                )
                self._create_bucket_if_not_exists(cursor, None, PHOTO_BUCKET)
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to initialize database: {e}") from e

    def close(self) -> None:
        """Close the database connection. Closing twice is a no-op."""
        if self.conn is not None:
            self.conn.close()
            self.conn = None

    def save_photos(self, album: str, photos: List[Photo]) -> None:
        """Append photos to the album bucket, creating the bucket if needed.

        Nothing is written unless every photo is stored.

        Args:
            album: Album ID
            photos: Photos in the order they should be listed
        """
        try:
            with self._transaction() as cursor:
                album_bucket = self._create_bucket_if_not_exists(
                    cursor, self._photo_bucket(cursor), album
                )
                for photo in photos:
                    sequence = self._next_sequence(cursor, album_bucket)
                    cursor.execute(
                        "INSERT INTO entries (bucket_id, key, value) VALUES (?, ?, ?)",
                        (album_bucket, str(sequence), json.dumps(photo.to_dict())),
                    )
        except (sqlite3.Error, TypeError, ValueError) as e:
            raise DatabaseError(f"Failed to save photos: {e}") from e
        logger.debug("Saved %d photos for album %s", len(photos), album)

    def list_photos(self, album: str) -> List[Photo]:
        """Get cached photos of an album in the order they were saved.

        Args:
            album: Album ID

        Returns:
            List of cached photos

        Raises:
            AlbumNotExistsError: If the album has no bucket
            PhotoDecodeError: If a stored photo cannot be decoded
        """
        photos = []
        try:
            with self._transaction(writable=False) as cursor:
                album_bucket = self._bucket_id(cursor, self._photo_bucket(cursor), album)
                if album_bucket is None:
                    logger.debug("Album %s not exists", album)
                    raise AlbumNotExistsError(f"album not exists: {album}")

                cursor.execute(
                    """
                    SELECT key, value FROM entries
                    WHERE bucket_id = ?
                    ORDER BY CAST(key AS INTEGER)
                    """,
                    (album_bucket,),
                )
                for key, value in cursor.fetchall():
                    try:
                        photos.append(Photo.from_dict(json.loads(value)))
                    except (AttributeError, KeyError, TypeError, ValueError) as e:
                        logger.error("Failed to decode photo %s of album %s: %s", key, album, e)
                        raise PhotoDecodeError(f"Failed to decode photo {key}: {e}") from e
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to list photos: {e}") from e

        logger.debug("Listed %d photos for album %s", len(photos), album)
        return photos

    def truncate_album(self, album: str) -> None:
        """Delete the album bucket with all of its photos.

        Args:
            album: Album ID
        """
        try:
            with self._transaction() as cursor:
                album_bucket = self._bucket_id(cursor, self._photo_bucket(cursor), album)
                if album_bucket is None:
                    return
                self._delete_bucket(cursor, album_bucket)
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to truncate album: {e}") from e
        logger.debug("Truncated album %s", album)

    def _connection(self) -> sqlite3.Connection:
        if self.conn is None:
            self.connect()
        return self.conn

    @contextmanager
    def _transaction(self, writable: bool = True) -> Iterator[sqlite3.Cursor]:
        """Run the block in one transaction, rolling back on any error.

        Args:
            writable: Take the write lock up front so writers are serialized
        """
        conn = self._connection()
        cursor = conn.cursor()
        try:
            cursor.execute("BEGIN IMMEDIATE" if writable else "BEGIN")
            yield cursor
            cursor.execute("COMMIT")
        except BaseException:
            if conn.in_transaction:
                cursor.execute("ROLLBACK")
            raise
        finally:
            cursor.close()

    def _bucket_id(
        self, cursor: sqlite3.Cursor, parent_id: Optional[int], name: str
    ) -> Optional[int]:
        cursor.execute(
            "SELECT id FROM buckets WHERE parent_id IS ? AND name = ?",
            (parent_id, name),
        )
        row = cursor.fetchone()
        return row[0] if row else None

    def _photo_bucket(self, cursor: sqlite3.Cursor) -> int:
        bucket_id = self._bucket_id(cursor, None, PHOTO_BUCKET)
        if bucket_id is None:
            raise DatabaseError(f"Bucket {PHOTO_BUCKET} is missing")
        return bucket_id

    def _create_bucket_if_not_exists(
        self, cursor: sqlite3.Cursor, parent_id: Optional[int], name: str
    ) -> int:
        bucket_id = self._bucket_id(cursor, parent_id, name)
        if bucket_id is not None:
            return bucket_id
        cursor.execute(
            "INSERT INTO buckets (parent_id, name) VALUES (?, ?)",
            (parent_id, name),
        )
        return cursor.lastrowid

    def _next_sequence(self, cursor: sqlite3.Cursor, bucket_id: int) -> int:
        cursor.execute("UPDATE buckets SET sequence = sequence + 1 WHERE id = ?", (bucket_id,))
        cursor.execute("SELECT sequence FROM buckets WHERE id = ?", (bucket_id,))
        return cursor.fetchone()[0]

    def _delete_bucket(self, cursor: sqlite3.Cursor, bucket_id: int) -> None:
        cursor.execute("SELECT id FROM buckets WHERE parent_id = ?", (bucket_id,))
        for (child_id,) in cursor.fetchall():
            self._delete_bucket(cursor, child_id)
        cursor.execute("DELETE FROM entries WHERE bucket_id = ?", (bucket_id,))
        cursor.execute("DELETE FROM buckets WHERE id = ?", (bucket_id,))
