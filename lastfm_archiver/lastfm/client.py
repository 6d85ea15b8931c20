"""
HTTP client for the Last.fm user.getrecenttracks method.

One GET request per page, through a single requests.Session that carries
the User-Agent header for the whole run.

URL layout:
    {base_url}/2.0/?method=user.getrecenttracks&limit=200&user={user}&api_key={key}&page={n}

The username and API key are percent-encoded; the page size is fixed at
200, the maximum Last.fm accepts.

Error Handling:
    Transport failures (connection, TLS, timeout, unreadable body) raise
    NetworkError. HTTP status codes are NOT checked: Last.fm reports
    failures like "User not found" as a status="failed" XML body on a 4xx
    response, so every received body goes to the parser unchanged.

Usage:
    with LastfmClient(api_key) as client:
        page = client.recent_tracks("rj", 1)
"""

from urllib.parse import quote

import requests

from lastfm_archiver import __version__
from lastfm_archiver.core.config import DEFAULT_BASE_URL
from lastfm_archiver.core.exceptions import NetworkError
from lastfm_archiver.core.logger import get_logger
from lastfm_archiver.lastfm.models import Page
from lastfm_archiver.lastfm.parser import parse_page

logger = get_logger(__name__)


RECENT_TRACKS_METHOD = "user.getrecenttracks"
PAGE_SIZE = 200
USER_AGENT = f"lastfm-archiver/{__version__}"


class LastfmClient:
    """
    Client for fetching pages of a user's listening history.

    Attributes:
        base_url: Scheme and host of the API, without trailing slash.
        timeout: Per-request timeout in seconds, None to wait forever.
        session: The requests.Session used for every request.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float | None = None,
        session: requests.Session | None = None
    ) -> None:
        """
        Args:
            api_key: Last.fm API key, used as an opaque string.
            base_url: API host, e.g. "https://ws.audioscrobbler.com".
            timeout: Optional per-request timeout in seconds.
            session: Optional pre-built session (tests inject a mock here).
        """
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    def __enter__(self) -> "LastfmClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    def build_url(self, user: str, page_number: int) -> str:
        """
        Build the request URL for one page of a user's recent tracks.

        Example:
            client.build_url("some user", 2)
            # https://ws.audioscrobbler.com/2.0/?method=user.getrecenttracks
            #   &limit=200&user=some%20user&api_key=...&page=2
        """
        return (
            f"{self.base_url}/2.0/?method={RECENT_TRACKS_METHOD}"
            f"&limit={PAGE_SIZE}"
            f"&user={quote(user, safe='')}"
            f"&api_key={quote(self._api_key, safe='')}"
            f"&page={page_number}"
        )

    def fetch_page(self, user: str, page_number: int) -> bytes:
        """
        Fetch the raw body of one page.

        Args:
            user: Last.fm username.
            page_number: 1-indexed page to request.

        Returns:
            The response body as received, whatever the HTTP status.

        Raises:
            NetworkError: On any transport-level failure.
        """
        logger.debug(f"Requesting page {page_number} for user {user}")

        try:
            response = self.session.get(
                self.build_url(user, page_number),
                timeout=self.timeout
            )
            body = response.content
        except requests.exceptions.RequestException as e:
            raise NetworkError(
                f"Failed to fetch page {page_number}: {e}",
                details={"page": page_number, "original_error": str(e)}
            ) from e

        logger.debug(
            f"Page {page_number}: HTTP {response.status_code}, {len(body)} bytes"
        )
        return body

    def recent_tracks(self, user: str, page_number: int) -> Page:
        """
        Fetch and parse one page.

        Raises:
            NetworkError: On transport failure.
            ParseError: If the body is malformed or incomplete.
            APIError: If the API reports a failure.
        """
        return parse_page(self.fetch_page(user, page_number))
