"""
Progress reporting for archive runs.

The archive loop reports to a ProgressObserver:
    - set_total(total): once, when the first page reports the scrobble count
    - advance(): once per stored play
    - milestone(when): when the calendar month of the current play differs
      from the previous play's month (the first play always counts)

ProgressObserver itself ignores everything and is used when no display is
wanted. ArchiveProgressBar draws a Rich progress bar.

Usage:
    with ArchiveProgressBar() as progress:
        archive_history(client, database, user, progress)
"""

from datetime import datetime

from rich import get_console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.theme import Theme


PROGRESS_THEME = Theme({
    "bar.back": "grey23",
    "bar.complete": "rgb(165,66,129)",  # Magenta/purple
    "bar.finished": "rgb(114,156,31)",  # Green when done
    "bar.pulse": "rgb(165,66,129)",
    "progress.percentage": "white",
})


class MonthTracker:
    """
    Detects calendar-month changes in a stream of play timestamps.

    Plays arrive most recent first, but only equality of (year, month) is
    checked, so plays within the same month never trigger.

    Example:
        tracker = MonthTracker()
        tracker.crossed(datetime(2021, 3, 30))  # True (first play)
        tracker.crossed(datetime(2021, 3, 2))   # False
        tracker.crossed(datetime(2021, 2, 27))  # True
    """

    def __init__(self) -> None:
        self.current: tuple[int, int] | None = None

    def crossed(self, when: datetime) -> bool:
        """Record this play's month; True if it differs from the previous one."""
        month = (when.year, when.month)
        if month == self.current:
            return False
        self.current = month
        return True


class ProgressObserver:
    """
    Base observer. Every hook is a no-op.

    Subclasses override the hooks they care about. Works as a context
    manager so callers can treat every observer the same way.
    """

    def __enter__(self) -> "ProgressObserver":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    def start(self) -> None:
        pass

    def stop(self) -> None:
        pass

    def set_total(self, total: int) -> None:
        pass

    def advance(self, count: int = 1) -> None:
        pass

    def milestone(self, when: datetime) -> None:
        pass


class ArchiveProgressBar(ProgressObserver):
    """
    Rich progress bar for an archive run.

    Displays:
    - Description ("Archiving")
    - Month currently being archived
    - Progress bar (pulsing until the total is known)
    - Archived / total count and elapsed time

    Example:
        Archiving   March 2021   ━━━━━━━━━━━━━━━━━━━━━━━━  5321/20133  0:01:12
    """

    def __init__(self, description: str = "Archiving") -> None:
        self.description = description
        self.total: int | None = None
        self.completed = 0
        self.month = ""

        self.console = get_console()

        self.progress = Progress(
            TextColumn("[white]{task.description}"),
            TextColumn("{task.fields[month]}", style="cyan"),
            BarColumn(bar_width=40, finished_style="green"),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=False,
            refresh_per_second=10,
        )

        self.task_id: TaskID | None = None
        self._started = False

    def start(self) -> None:
        if not self._started:
            self.console.push_theme(PROGRESS_THEME)
            self.progress.start()
            self.task_id = self.progress.add_task(
                description=self.description,
                total=self.total,
                completed=self.completed,
                month=self.month,
            )
            self._started = True

    def stop(self) -> None:
        if self._started:
            self.progress.stop()
            self.console.pop_theme()
            self._started = False

    def set_total(self, total: int) -> None:
        self.total = total
        self._update_progress()

    def advance(self, count: int = 1) -> None:
        self.completed += count
        self._update_progress()

    def milestone(self, when: datetime) -> None:
        self.month = when.strftime("%B %Y")
        self._update_progress()

    def _update_progress(self) -> None:
        if self.task_id is not None:
            self.progress.update(
                self.task_id,
                total=self.total,
                completed=self.completed,
                month=self.month,
            )
