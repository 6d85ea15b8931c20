"""
Archive run: fetch every page of a user's history and store each play.

Workflow:
    1. Ensure the play table exists
    2. Walk pages 1..totalPages with iter_pages()
    3. Store every play of a page before the next page is requested
    4. Report counts and month changes to the progress observer

Any error aborts the run at once. Plays stored before the error stay in
the database.
"""

from dataclasses import dataclass

from lastfm_archiver.core.database import Database
from lastfm_archiver.core.logger import get_logger
from lastfm_archiver.core.progress import MonthTracker, ProgressObserver
from lastfm_archiver.lastfm.pager import PageSource, iter_pages

logger = get_logger(__name__)


@dataclass(frozen=True)
class ArchiveResult:
    """
    Summary of a finished run.

    Attributes:
        pages: Number of pages fetched.
        tracks: Number of plays stored.
        total_records: Scrobble count reported by the API, if any.
    """
    pages: int
    tracks: int
    total_records: int | None = None


def archive_history(
    client: PageSource,
    database: Database,
    user: str,
    progress: ProgressObserver | None = None
) -> ArchiveResult:
    """
    Archive a user's complete listening history.

    Args:
        client: Source of parsed pages (LastfmClient).
        database: Open database; the schema is ensured here.
        user: Last.fm username.
        progress: Optional observer for counts and month milestones.

    Returns:
        ArchiveResult with page and play counts.

    Raises:
        NetworkError, ParseError, APIError: From fetching a page.
        StorageError: From the schema setup or an insert.
    """
    if progress is None:
        progress = ProgressObserver()

    database.ensure_schema()

    months = MonthTracker()
    total_records: int | None = None
    pages = 0
    tracks = 0

    for page in iter_pages(client, user):
        pages += 1

        if total_records is None and page.total_records is not None:
            total_records = page.total_records
            logger.info(f"{user} has {total_records} scrobbles over {page.total_pages} pages")
            progress.set_total(total_records)

        for track in page.tracks:
            if months.crossed(track.timestamp):
                logger.debug(f"Archiving {track.timestamp:%B %Y}")
                progress.milestone(track.timestamp)

            database.insert(track)
            tracks += 1
            progress.advance()

        logger.debug(f"Stored page {page.page_number}/{page.total_pages}")

    logger.info(f"Archived {tracks} plays from {pages} pages")
    return ArchiveResult(pages=pages, tracks=tracks, total_records=total_records)
