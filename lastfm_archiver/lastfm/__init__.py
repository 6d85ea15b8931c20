"""
Last.fm API access: record models, response parser, HTTP client and pager.

Usage:
    from lastfm_archiver.lastfm import LastfmClient, iter_pages

    with LastfmClient(api_key) as client:
        for page in iter_pages(client, "rj"):
            ...
"""

from lastfm_archiver.lastfm.client import LastfmClient, PAGE_SIZE, USER_AGENT
from lastfm_archiver.lastfm.models import (
    Album,
    Artist,
    Page,
    Track,
    normalize_mbid,
    timestamp_from_uts,
)
from lastfm_archiver.lastfm.pager import iter_pages, iter_tracks, next_page_number
from lastfm_archiver.lastfm.parser import parse_page

__all__ = [
    # Client
    "LastfmClient",
    "PAGE_SIZE",
    "USER_AGENT",
    # Models
    "Artist",
    "Album",
    "Track",
    "Page",
    "normalize_mbid",
    "timestamp_from_uts",
    # Parsing and pagination
    "parse_page",
    "iter_pages",
    "iter_tracks",
    "next_page_number",
]
