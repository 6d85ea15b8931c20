"""
SQLite storage for archived plays.

Schema:
    play:   One row per archived listen (time, track/artist/album mbid and name)

The connection is opened once per run and owned by this class. The schema
is created with CREATE ... IF NOT EXISTS, so ensure_schema() is safe on a
database that already holds plays from earlier runs. Every insert is
committed on its own: an interrupted run leaves a consistent prefix of the
history on disk.

There is no uniqueness constraint, so archiving the same user twice stores
each play twice.

Usage:
    with Database(Path("plays.db")) as db:
        db.ensure_schema()
        db.insert(track)
"""

import sqlite3
from datetime import datetime
from pathlib import Path

from lastfm_archiver.core.exceptions import StorageError
from lastfm_archiver.lastfm.models import Track, timestamp_from_uts


_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS play (
    id INTEGER PRIMARY KEY,
    time INTEGER NOT NULL,
    track_mbid VARCHAR(36),
    track_name TEXT,
    artist_mbid VARCHAR(36),
    artist_name TEXT,
    album_mbid VARCHAR(36),
    album_name TEXT
);

CREATE INDEX IF NOT EXISTS index_track_mbid ON play(track_mbid);
CREATE INDEX IF NOT EXISTS index_artist_mbid ON play(artist_mbid);
CREATE INDEX IF NOT EXISTS index_album_mbid ON play(album_mbid);
"""

_INSERT_SQL = """
INSERT INTO play (
    time, track_mbid, track_name, artist_mbid, artist_name, album_mbid, album_name
) VALUES (
    :time, :track_mbid, :track_name, :artist_mbid, :artist_name, :album_mbid, :album_name
)
"""


class Database:
    """
    Single-connection SQLite store for plays.

    Only one writer exists per run, so no locking is done.
    """

    def __init__(self, db_path: Path) -> None:
        """
        Open (or create) the database file.

        Args:
            db_path: Path of the SQLite file. Its parent directory must exist.

        Raises:
            StorageError: If the parent directory is missing or SQLite
                          cannot open the file.
        """
        self.db_path = db_path

        if not db_path.parent.exists():
            raise StorageError(
                f"Parent directory does not exist: {db_path.parent}",
                details={"path": str(db_path.parent)}
            )

        try:
            self._conn: sqlite3.Connection | None = sqlite3.connect(str(db_path))
        except sqlite3.Error as e:
            raise StorageError(
                f"Failed to open database: {e}",
                details={"path": str(db_path), "original_error": str(e)}
            ) from e

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StorageError(
                "Database connection is closed",
                details={"path": str(self.db_path)}
            )
        return self._conn

    def close(self) -> None:
        """Close the database connection. Safe to call more than once."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def ensure_schema(self) -> None:
        """
        Create the play table and its indexes if they don't exist.

        Raises:
            StorageError: If the schema script fails (e.g. not a database file).
        """
        try:
            self.connection.executescript(_SCHEMA_SQL)
            self.connection.commit()
        except sqlite3.Error as e:
            raise StorageError(
                f"Failed to set up database schema: {e}",
                details={"path": str(self.db_path), "original_error": str(e)}
            ) from e

    def insert(self, track: Track) -> None:
        """
        Store one play and commit it.

        Raises:
            StorageError: If the insert or commit fails.
        """
        try:
            self.connection.execute(_INSERT_SQL, track.to_database_dict())
            self.connection.commit()
        except sqlite3.Error as e:
            raise StorageError(
                f"Failed to store play '{track}': {e}",
                details={"time": track.unix_time, "original_error": str(e)}
            ) from e

    def count_plays(self) -> int:
        """Number of rows in the play table."""
        try:
            cursor = self.connection.execute("SELECT COUNT(*) FROM play")
            return cursor.fetchone()[0]
        except sqlite3.Error as e:
            raise StorageError(
                f"Failed to count plays: {e}",
                details={"original_error": str(e)}
            ) from e

    def latest_play_time(self) -> datetime | None:
        """Timestamp of the most recent stored play, None if the table is empty."""
        try:
            cursor = self.connection.execute("SELECT MAX(time) FROM play")
            row = cursor.fetchone()
        except sqlite3.Error as e:
            raise StorageError(
                f"Failed to read latest play: {e}",
                details={"original_error": str(e)}
            ) from e
        if row is None or row[0] is None:
            return None
        return timestamp_from_uts(row[0])
