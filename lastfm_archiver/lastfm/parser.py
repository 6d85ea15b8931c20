"""
Parser for user.getrecenttracks XML responses.

Response shapes:

    <lfm status="ok">
      <recenttracks user="rj" page="1" perPage="200" totalPages="12" total="2301">
        <track nowplaying="true">...</track>
        <track>
          <artist mbid="...">Radiohead</artist>
          <name>Airbag</name>
          <mbid></mbid>
          <album mbid="">OK Computer</album>
          <date uts="1325376000">01 Jan 2012, 00:00</date>
        </track>
      </recenttracks>
    </lfm>

    <lfm status="failed">
      <error code="6">User not found</error>
    </lfm>

The <artist>, <album>, <mbid>, <name> and <date> children must all exist
on every completed track, even when empty. A missing child means the
response is not the shape we archive, so the whole page is rejected.
"""

import xml.etree.ElementTree as ET

from lastfm_archiver.core.exceptions import APIError, ParseError
from lastfm_archiver.lastfm.models import (
    Album,
    Artist,
    Page,
    Track,
    normalize_mbid,
    timestamp_from_uts,
)


def parse_page(raw_body: bytes) -> Page:
    """
    Turn one raw response body into a Page.

    Args:
        raw_body: The HTTP response body, unmodified.

    Returns:
        Page with pagination metadata and the completed tracks, in feed order.

    Raises:
        ParseError: Malformed XML or a missing/invalid required field.
        APIError: status="failed" (message from <error>) or an unknown status.
    """
    try:
        root = ET.fromstring(raw_body)
    except ET.ParseError as e:
        raise ParseError(
            f"Invalid XML in response: {e}",
            details={"original_error": str(e)}
        ) from e

    status = root.get("status")
    if status is None:
        raise ParseError("missing status", details={"field": "status"})

    if status == "ok":
        container = root.find("recenttracks")
        if container is None:
            raise ParseError("missing recenttracks", details={"field": "recenttracks"})
        return _build_page(container)

    if status == "failed":
        raise _build_api_error(root)

    raise APIError("unknown status", details={"status": status})


def _build_api_error(root: ET.Element) -> APIError:
    error = root.find("error")
    if error is None:
        raise ParseError("missing error", details={"field": "error"})

    message = _text(error)
    if message is None:
        raise ParseError("missing error message", details={"field": "error"})

    code = error.get("code")
    code = int(code) if code is not None and code.isascii() and code.isdigit() else None
    return APIError(message.strip(), details={"code": code}, code=code)


def _build_page(container: ET.Element) -> Page:
    page_number = _count_attribute(container, "page")
    total_pages = _count_attribute(container, "totalPages")
    total_records = None
    if container.get("total") is not None:
        total_records = _count_attribute(container, "total")

    tracks = tuple(
        _build_track(element)
        for element in container
        if element.get("nowplaying") != "true"
    )

    return Page(
        page_number=page_number,
        total_pages=total_pages,
        total_records=total_records,
        tracks=tracks,
    )


def _build_track(element: ET.Element) -> Track:
    artist_element = _child(element, "artist")
    artist_name = _text(artist_element)
    artist = None
    if artist_name is not None:
        artist = Artist(name=artist_name, mbid=normalize_mbid(artist_element.get("mbid")))

    album_element = _child(element, "album")
    album_name = _text(album_element)
    album = None
    if album_name is not None:
        album = Album(name=album_name, mbid=normalize_mbid(album_element.get("mbid")))

    mbid = normalize_mbid(_child(element, "mbid").text)

    name = _text(_child(element, "name"))
    if name is None:
        raise ParseError("empty name", details={"field": "name"})

    date = _child(element, "date")
    uts = date.get("uts")
    if uts is None:
        raise ParseError("missing timestamp", details={"field": "date.uts"})
    try:
        timestamp = timestamp_from_uts(int(uts))
    except (ValueError, OverflowError, OSError) as e:
        # Non-integer, or outside the range datetime can represent
        raise ParseError(
            f"invalid timestamp: {uts!r}",
            details={"field": "date.uts", "value": uts}
        ) from e

    return Track(
        name=name,
        timestamp=timestamp,
        artist=artist,
        album=album,
        mbid=mbid,
    )


def _child(element: ET.Element, tag: str) -> ET.Element:
    child = element.find(tag)
    if child is None:
        raise ParseError(f"missing {tag}", details={"field": tag})
    return child


def _text(element: ET.Element) -> str | None:
    """Text content of an element as received, None when blank."""
    if element.text is None or not element.text.strip():
        return None
    return element.text


def _count_attribute(element: ET.Element, name: str) -> int:
    value = element.get(name)
    if value is None:
        raise ParseError(f"missing {name}", details={"field": name})
    value = value.strip()
    if not (value.isascii() and value.isdigit()):
        raise ParseError(
            f"invalid {name}: {value!r}",
            details={"field": name, "value": value}
        )
    return int(value)
