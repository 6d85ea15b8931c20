"""Test configuration and fixtures"""

from unittest.mock import Mock

import pytest


def track_xml(
    name="Test Track",
    uts=1325376000,
    artist="Test Artist",
    artist_mbid="",
    album="Test Album",
    album_mbid="",
    mbid="",
    nowplaying=False,
    omit=(),
):
    """Build one <track> element as Last.fm serializes it."""
    parts = []
    if "artist" not in omit:
        parts.append(f'<artist mbid="{artist_mbid}">{artist}</artist>')
    if "name" not in omit:
        parts.append(f"<name>{name}</name>")
    parts.append('<streamable>0</streamable>')
    if "mbid" not in omit:
        parts.append(f"<mbid>{mbid}</mbid>")
    if "album" not in omit:
        parts.append(f'<album mbid="{album_mbid}">{album}</album>')
    parts.append("<url>https://www.last.fm/music/x/_/y</url>")
    if "date" not in omit and not nowplaying:
        parts.append(f'<date uts="{uts}">01 Jan 2012, 00:00</date>')
    flag = ' nowplaying="true"' if nowplaying else ""
    return f"<track{flag}>{''.join(parts)}</track>"


def page_xml(page=1, total_pages=1, total=None, tracks=(), user="tester"):
    """Build a status="ok" response body."""
    total_attr = f' total="{total}"' if total is not None else ""
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<lfm status="ok">\n'
        f'<recenttracks user="{user}" page="{page}" perPage="200" '
        f'totalPages="{total_pages}"{total_attr}>\n'
        + "\n".join(tracks)
        + "\n</recenttracks>\n</lfm>"
    ).encode("utf-8")


def failed_xml(message="User not found", code=6):
    """Build a status="failed" response body."""
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        f'<lfm status="failed"><error code="{code}">{message}</error></lfm>'
    ).encode("utf-8")


class FakeLastfmClient:
    """
    Page source serving pre-built response bodies.

    Records every requested page number in `requests`.
    """

    def __init__(self, bodies):
        self.bodies = dict(bodies)
        self.requests = []

    def recent_tracks(self, user, page_number):
        from lastfm_archiver.lastfm.parser import parse_page

        self.requests.append(page_number)
        return parse_page(self.bodies[page_number])


@pytest.fixture
def make_track_xml():
    return track_xml


@pytest.fixture
def make_page_xml():
    return page_xml


@pytest.fixture
def make_failed_xml():
    return failed_xml


@pytest.fixture
def fake_client_factory():
    return FakeLastfmClient


@pytest.fixture
def two_page_history():
    """
    Two pages, 205 reported scrobbles: 200 track elements on page 1 (one of
    them now playing) and 5 on page 2.
    """
    base = 1700000000
    page1_tracks = [track_xml(name="Now Playing", nowplaying=True)] + [
        track_xml(name=f"Track {i}", uts=base - i * 3600)
        for i in range(199)
    ]
    page2_tracks = [
        track_xml(name=f"Track {199 + i}", uts=base - (199 + i) * 3600)
        for i in range(5)
    ]
    return {
        1: page_xml(page=1, total_pages=2, total=205, tracks=page1_tracks),
        2: page_xml(page=2, total_pages=2, total=205, tracks=page2_tracks),
    }


@pytest.fixture
def mock_session():
    """requests.Session stand-in with a settable response."""
    session = Mock()
    session.headers = {}
    response = Mock()
    response.status_code = 200
    response.content = page_xml()
    session.get.return_value = response
    return session
