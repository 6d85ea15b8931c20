"""Test progress reporting"""

from datetime import datetime, timezone

from lastfm_archiver.core.progress import ArchiveProgressBar, MonthTracker, ProgressObserver


class TestMonthTracker:
    """Test month change detection"""

    def test_first_play_counts(self):
        tracker = MonthTracker()
        assert tracker.current is None
        assert tracker.crossed(datetime(2021, 3, 30, tzinfo=timezone.utc))
        assert tracker.current == (2021, 3)

    def test_same_month(self):
        tracker = MonthTracker()
        tracker.crossed(datetime(2021, 3, 30))
        assert not tracker.crossed(datetime(2021, 3, 1))

    def test_same_month_other_year(self):
        tracker = MonthTracker()
        tracker.crossed(datetime(2021, 3, 1))
        assert tracker.crossed(datetime(2020, 3, 1))

    def test_month_change(self):
        tracker = MonthTracker()
        tracker.crossed(datetime(2021, 3, 1))
        assert tracker.crossed(datetime(2021, 2, 28))
        assert tracker.current == (2021, 2)


class TestProgressObserver:
    """Test the no-op observer"""

    def test_hooks_do_nothing(self):
        with ProgressObserver() as progress:
            progress.set_total(10)
            progress.advance()
            progress.advance(5)
            progress.milestone(datetime(2021, 1, 1))


class TestArchiveProgressBar:
    """Test the Rich progress bar"""

    def test_tracks_counts(self):
        bar = ArchiveProgressBar()
        bar.start()
        try:
            bar.set_total(20)
            bar.advance()
            bar.advance(2)
            bar.milestone(datetime(2021, 3, 5, tzinfo=timezone.utc))

            task = bar.progress.tasks[0]
            assert task.total == 20
            assert task.completed == 3
            assert task.fields["month"] == "March 2021"
        finally:
            bar.stop()

    def test_updates_before_start_are_kept(self):
        bar = ArchiveProgressBar()
        bar.set_total(5)
        bar.advance()
        with bar:
            assert bar.progress.tasks[0].total == 5
            bar.advance()
            assert bar.progress.tasks[0].completed == 2

    def test_stop_is_idempotent(self):
        bar = ArchiveProgressBar()
        bar.stop()
        bar.start()
        bar.stop()
        bar.stop()
