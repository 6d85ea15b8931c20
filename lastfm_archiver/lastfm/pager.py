"""
Pagination over a user's listening history.

iter_pages() is a lazy, finite, forward-only generator: every next() call
performs exactly one request, starting at page 1, and the following page
is not requested until the consumer pulls again. To start over, create a
new generator.

    for page in iter_pages(client, "rj"):
        for track in page.tracks:
            database.insert(track)   # page N is stored before N+1 is fetched
"""

from typing import Iterator, Protocol

from lastfm_archiver.core.exceptions import ParseError
from lastfm_archiver.core.logger import get_logger
from lastfm_archiver.lastfm.models import Page, Track

logger = get_logger(__name__)


class PageSource(Protocol):
    """Anything that can return a parsed page, e.g. LastfmClient."""

    def recent_tracks(self, user: str, page_number: int) -> Page:
        ...


def next_page_number(page: Page) -> int | None:
    """
    Page number to request after this one, or None when done.

    iter_pages() only calls this on a page whose number matches the
    one requested.
    """
    if page.is_last:
        return None
    return page.page_number + 1


def iter_pages(client: PageSource, user: str) -> Iterator[Page]:
    """
    Yield every page of a user's recent tracks, from page 1 onwards.

    Args:
        client: Source of parsed pages.
        user: Last.fm username.

    Yields:
        Page objects in order 1, 2, ..., totalPages.

    Raises:
        ParseError: If a response reports a page other than the one
                    requested.
        Whatever the client raises; the generator stops at the first error.
    """
    cursor: int | None = 1
    while cursor is not None:
        page = client.recent_tracks(user, cursor)
        if page.page_number != cursor:
            raise ParseError(
                "unexpected page",
                details={"requested": cursor, "page": page.page_number}
            )
        logger.debug(
            f"Fetched page {page.page_number}/{page.total_pages} "
            f"({len(page)} tracks)"
        )
        cursor = next_page_number(page)
        yield page


def iter_tracks(client: PageSource, user: str) -> Iterator[Track]:
    """Flattened view of iter_pages(): every track, most recent first."""
    for page in iter_pages(client, user):
        yield from page.tracks
