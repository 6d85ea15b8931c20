"""
Data models for Last.fm listening history.

Immutable dataclasses for the entities found in a user.getrecenttracks
response. A Page and its Tracks are created fresh per HTTP response,
persisted immediately and then discarded.

Normalization rules:
    - An empty MusicBrainz identifier is stored as None, never as "".
    - Timestamps are timezone-aware UTC datetimes with second precision,
      built from the unix seconds of <date uts="...">.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone


def normalize_mbid(value: str | None) -> str | None:
    """
    Normalize a MusicBrainz identifier.

    Args:
        value: Raw attribute or element text, possibly None or empty.

    Returns:
        The stripped identifier, or None if it is missing or blank.

    Example:
        normalize_mbid("")          # None
        normalize_mbid("a74b1b7f")  # "a74b1b7f"
    """
    if value is None:
        return None
    value = value.strip()
    return value or None


def timestamp_from_uts(seconds: int) -> datetime:
    """Convert unix seconds to an aware UTC datetime, without rounding."""
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


@dataclass(frozen=True)
class Artist:
    """
    Artist credited on a scrobble.

    Attributes:
        name: Artist name as shown by Last.fm.
        mbid: MusicBrainz artist ID, None when Last.fm has none.
    """
    name: str
    mbid: str | None = None


@dataclass(frozen=True)
class Album:
    """
    Album a scrobble was played from. Same shape as Artist.
    """
    name: str
    mbid: str | None = None


@dataclass(frozen=True)
class Track:
    """
    One completed listen.

    Attributes:
        name: Track title. Always non-empty.
        timestamp: When the listen was scrobbled (UTC, second precision).
        artist: Artist, or None if the feed had no artist name.
        album: Album, or None if the feed had no album name.
        mbid: MusicBrainz recording ID, or None.

    Example:
        track = Track(
            name="Paranoid Android",
            timestamp=timestamp_from_uts(1325376000),
            artist=Artist("Radiohead", "a74b1b7f-71a5-4011-9441-d0b5e4122711"),
        )
        track.unix_time  # 1325376000
    """
    name: str
    timestamp: datetime
    artist: Artist | None = None
    album: Album | None = None
    mbid: str | None = None

    @property
    def unix_time(self) -> int:
        """Timestamp as integer unix seconds."""
        return int(self.timestamp.timestamp())

    @property
    def artist_name(self) -> str | None:
        return self.artist.name if self.artist else None

    @property
    def album_name(self) -> str | None:
        return self.album.name if self.album else None

    def to_database_dict(self) -> dict[str, object]:
        """
        Flatten the track into the columns of the play table.

        Returns:
            Dictionary keyed by column name: time, track_mbid, track_name,
            artist_mbid, artist_name, album_mbid, album_name.
        """
        return {
            "time": self.unix_time,
            "track_mbid": self.mbid,
            "track_name": self.name,
            "artist_mbid": self.artist.mbid if self.artist else None,
            "artist_name": self.artist_name,
            "album_mbid": self.album.mbid if self.album else None,
            "album_name": self.album_name,
        }

    def __str__(self) -> str:
        if self.artist:
            return f"{self.artist.name} - {self.name}"
        return self.name


@dataclass(frozen=True)
class Page:
    """
    One user.getrecenttracks response.

    Attributes:
        page_number: 1-indexed page number reported by the API.
        total_pages: Number of pages reported by the API.
        total_records: Total number of scrobbles, None when the response
                       does not report it.
        tracks: Completed listens on this page, most recent first.
                Now-playing entries are never included.
    """
    page_number: int
    total_pages: int
    total_records: int | None = None
    tracks: tuple[Track, ...] = field(default_factory=tuple)

    @property
    def is_last(self) -> bool:
        return self.page_number >= self.total_pages

    def __len__(self) -> int:
        return len(self.tracks)
