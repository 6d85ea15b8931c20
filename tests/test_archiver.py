"""Test the archive run end to end"""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from lastfm_archiver.archiver import ArchiveResult, archive_history
from lastfm_archiver.core.database import Database
from lastfm_archiver.core.exceptions import APIError, NetworkError, ParseError, StorageError
from lastfm_archiver.core.progress import ProgressObserver

from conftest import FakeLastfmClient, failed_xml, page_xml, track_xml


def utc(year, month, day):
    return int(datetime(year, month, day, tzinfo=timezone.utc).timestamp())


class RecordingProgress(ProgressObserver):
    """Observer that records every hook call."""

    def __init__(self):
        self.totals = []
        self.advanced = 0
        self.milestones = []

    def set_total(self, total):
        self.totals.append(total)

    def advance(self, count=1):
        self.advanced += count

    def milestone(self, when):
        self.milestones.append(when)


class TestArchiveHistory:
    """Test fetching and storing a full history"""

    def test_two_pages_with_now_playing(self, two_page_history):
        client = FakeLastfmClient(two_page_history)
        database = Mock()

        result = archive_history(client, database, "rj")

        assert client.requests == [1, 2]
        assert database.insert.call_count == 204
        assert result == ArchiveResult(pages=2, tracks=204, total_records=205)
        database.ensure_schema.assert_called_once()

    def test_inserts_keep_response_order(self, two_page_history):
        client = FakeLastfmClient(two_page_history)
        database = Mock()

        archive_history(client, database, "rj")

        names = [c.args[0].name for c in database.insert.call_args_list]
        assert names == [f"Track {i}" for i in range(204)]
        assert "Now Playing" not in names

    def test_page_stored_before_next_fetch(self, two_page_history):
        client = FakeLastfmClient(two_page_history)
        database = Mock()
        fetched_at_insert = []
        database.insert.side_effect = lambda track: fetched_at_insert.append(len(client.requests))

        archive_history(client, database, "rj")

        assert fetched_at_insert == [1] * 199 + [2] * 5

    def test_writes_real_database(self, tmp_path, two_page_history):
        client = FakeLastfmClient(two_page_history)

        with Database(tmp_path / "plays.db") as database:
            result = archive_history(client, database, "rj")
            assert database.count_plays() == 204
            assert database.latest_play_time() == datetime.fromtimestamp(1700000000, tz=timezone.utc)

        assert result.tracks == 204

    def test_empty_history(self):
        client = FakeLastfmClient({1: page_xml(page=1, total_pages=0, total=0)})
        database = Mock()

        result = archive_history(client, database, "rj")

        assert client.requests == [1]
        database.insert.assert_not_called()
        assert result == ArchiveResult(pages=1, tracks=0, total_records=0)


class TestArchiveErrors:
    """Test that errors abort the run"""

    def test_missing_date_aborts_before_next_page(self):
        bodies = {
            1: page_xml(page=1, total_pages=2, tracks=[
                track_xml(name="Fine"),
                track_xml(name="Broken", omit=("date",)),
            ]),
            2: page_xml(page=2, total_pages=2, tracks=[track_xml()]),
        }
        client = FakeLastfmClient(bodies)
        database = Mock()

        with pytest.raises(ParseError):
            archive_history(client, database, "rj")

        assert client.requests == [1]
        # The whole page fails to parse, so nothing from it is stored
        database.insert.assert_not_called()

    def test_error_on_second_page_keeps_first(self, tmp_path):
        bodies = {
            1: page_xml(page=1, total_pages=2, tracks=[track_xml(name="Kept", uts=500)]),
            2: failed_xml("Operation failed", code=8),
        }
        client = FakeLastfmClient(bodies)

        with Database(tmp_path / "plays.db") as database:
            with pytest.raises(APIError) as exc_info:
                archive_history(client, database, "rj")
            assert database.count_plays() == 1

        assert exc_info.value.code == 8
        assert client.requests == [1, 2]

    def test_network_error_propagates(self):
        client = Mock()
        client.recent_tracks.side_effect = NetworkError("Connection refused")

        with pytest.raises(NetworkError):
            archive_history(client, Mock(), "rj")

    def test_storage_error_stops_fetching(self, two_page_history):
        client = FakeLastfmClient(two_page_history)
        database = Mock()
        database.insert.side_effect = StorageError("disk full")

        with pytest.raises(StorageError):
            archive_history(client, database, "rj")

        assert client.requests == [1]
        assert database.insert.call_count == 1


class TestArchiveProgress:
    """Test progress notifications"""

    def test_total_and_advance(self, two_page_history):
        progress = RecordingProgress()

        archive_history(FakeLastfmClient(two_page_history), Mock(), "rj", progress)

        assert progress.totals == [205]
        assert progress.advanced == 204

    def test_total_unknown(self):
        bodies = {1: page_xml(page=1, total_pages=1, tracks=[track_xml()])}
        progress = RecordingProgress()

        result = archive_history(FakeLastfmClient(bodies), Mock(), "rj", progress)

        assert progress.totals == []
        assert result.total_records is None

    def test_milestone_on_month_change(self):
        tracks = [
            track_xml(name="a", uts=utc(2021, 3, 30)),
            track_xml(name="b", uts=utc(2021, 3, 2)),
            track_xml(name="c", uts=utc(2021, 2, 27)),
            track_xml(name="d", uts=utc(2020, 2, 10)),
        ]
        bodies = {1: page_xml(page=1, total_pages=1, tracks=tracks)}
        progress = RecordingProgress()

        archive_history(FakeLastfmClient(bodies), Mock(), "rj", progress)

        assert [(m.year, m.month) for m in progress.milestones] == [
            (2021, 3), (2021, 2), (2020, 2)
        ]

    def test_milestone_reported_before_insert(self):
        bodies = {1: page_xml(page=1, total_pages=1, tracks=[track_xml(uts=utc(2019, 7, 4))])}
        manager = Mock()

        archive_history(FakeLastfmClient(bodies), manager.database, "rj", manager.progress)

        names = [c[0] for c in manager.mock_calls]
        assert names.index("progress.milestone") < names.index("database.insert")
        assert names.index("database.insert") < names.index("progress.advance")

    def test_default_observer(self, two_page_history):
        result = archive_history(FakeLastfmClient(two_page_history), Mock(), "rj", None)
        assert result.tracks == 204
