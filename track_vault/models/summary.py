"""
Dataclass for reporting the outcome of an export run.
"""

from dataclasses import dataclass, field
from pathlib import Path

from track_vault.exceptions import ExportItemError
from track_vault.models.track import ExportedTrack


@dataclass
class ExportSummary:
    """Counts and per-item results for a single export run."""

    container_path: Path
    total: int = 0
    succeeded: int = 0
    failed: int = 0
    exported: list[ExportedTrack] = field(default_factory=list, repr=False)
    failures: list[ExportItemError] = field(default_factory=list, repr=False)

    def record_success(self, exported_track: ExportedTrack) -> None:
        self.exported.append(exported_track)
        self.succeeded += 1

    def record_failure(self, error: ExportItemError) -> None:
        self.failures.append(error)
        self.failed += 1

    @property
    def total_size_exported(self) -> int:
        """Sum of the payload sizes of all successfully exported tracks."""
        return sum(track.file_size_bytes for track in self.exported)
