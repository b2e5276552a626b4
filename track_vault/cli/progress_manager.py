"""
Manages a Rich progress display for export runs.
"""

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from track_vault.models.track import TrackRecord


class ProgressManager:
    """
    Shows one overall bar for the tracks of an export. Use as a context manager
    around ExportPipeline.run().
    """

    def __init__(self, console: Console, description: str = "Exporting"):
        self.console = console
        self.description = description
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(bar_width=40),
            MofNCompleteColumn(),
            "•",
            TextColumn("[dim]{task.fields[current]}[/dim]"),
            "•",
            TimeElapsedColumn(),
            console=console,
            transient=True,
        )
        self._task_id: TaskID | None = None
        self.failed = 0

    def __enter__(self) -> "ProgressManager":
        self.progress.start()
        self._task_id = self.progress.add_task(
            self.description, total=None, current=""
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.progress.stop()
        return False

    def set_total(self, total: int) -> None:
        if self._task_id is not None:
            self.progress.update(self._task_id, total=total)

    def on_track_processed(self, record: TrackRecord, success: bool) -> None:
        """Progress callback for ExportPipeline."""
        if not success:
            self.failed += 1
        if self._task_id is not None:
            description = self.description
            if self.failed:
                description += f" [red]({self.failed} failed)[/red]"
            self.progress.update(
                self._task_id,
                advance=1,
                description=description,
                current=escape(f"{record.primary_artist} - {record.track_title}"),
            )
