"""
Copies every stored track into a fresh, self-contained export bundle.
"""

import logging
import time
from collections.abc import Callable
from pathlib import Path

from rich.markup import escape

from track_vault.exceptions import ExportItemError, ExportSetupError, ExportWriteError
from track_vault.models.summary import ExportSummary
from track_vault.models.track import ExportedTrack, TrackRecord
from track_vault.storage.content_store import ContentStore
from track_vault.storage.track_store import TrackStore
from track_vault.utils.formatting import format_track_label
from track_vault.utils.path import derive_export_filename, export_folder_name
from track_vault.utils.structured_logger import ExportLogger

from .manifest import write_csv_manifest, write_json_manifest

log = logging.getLogger(__name__)

ProgressCallback = Callable[[TrackRecord, bool], None]


class ExportPipeline:
    """
    Materializes all stored tracks under human-readable names, plus a JSON and a
    CSV manifest, inside a timestamped folder.

    A missing or uncopyable payload only fails that track; the run carries on and
    reports it in the summary. Only container creation and manifest writing are
    fatal.
    """

    def __init__(
        self,
        track_store: TrackStore,
        content_store: ContentStore,
        exports_dir: Path,
        event_logger: ExportLogger | None = None,
        progress_callback: ProgressCallback | None = None,
    ):
        self.track_store = track_store
        self.content_store = content_store
        self.exports_dir = exports_dir
        self.event_logger = event_logger
        self.progress_callback = progress_callback

    def _create_container(self) -> Path:
        """Creates the per-run folder, suffixing '-1', '-2'... if the second is taken."""
        base_name = export_folder_name()
        try:
            self.exports_dir.mkdir(parents=True, exist_ok=True)
            candidate = self.exports_dir / base_name
            attempt = 0
            while True:
                try:
                    candidate.mkdir()
                    return candidate
                except FileExistsError:
                    attempt += 1
                    candidate = self.exports_dir / f"{base_name}-{attempt}"
        except OSError as e:
            raise ExportSetupError(
                f"Could not create export folder in '{self.exports_dir}': {e}"
            ) from e

    def _export_track(self, record: TrackRecord, container: Path) -> ExportedTrack:
        """Copies one payload into the container. Raises ExportItemError."""
        if not self.content_store.exists(record.stored_filename):
            raise ExportItemError(record.id, record.stored_filename, "file not found")

        export_filename = derive_export_filename(
            record.primary_artist,
            record.track_title,
            record.mix_name,
            record.stored_filename,
        )
        destination = container / export_filename
        if destination.exists():
            log.debug(f"Overwriting '{export_filename}' with track {record.id}.")

        try:
            self.content_store.copy(record.stored_filename, destination)
        except OSError as e:
            raise ExportItemError(
                record.id, record.stored_filename, f"copy failed: {e}"
            ) from e

        return ExportedTrack.from_record(record, export_filename, str(destination))

    def _write_manifests(self, container: Path, exported: list[ExportedTrack]) -> None:
        try:
            write_json_manifest(container, exported)
            log.info("[green]✓ Metadata saved to: metadata.json[/green]")
            write_csv_manifest(container, exported)
            log.info("[green]✓ CSV metadata saved to: metadata.csv[/green]")
        except (OSError, ValueError) as e:
            raise ExportWriteError(
                f"Could not write export manifest in '{container}': {e}"
            ) from e

    def run(self) -> ExportSummary:
        """
        Exports every track in the store.

        Returns:
            The summary of the run; per-track failures are listed in it.

        Raises:
            ExportSetupError: If the export folder cannot be created.
            ExportWriteError: If either manifest cannot be written.
        """
        start_time = time.monotonic()
        container = self._create_container()
        log.info(f"Exporting tracks to: [dim]{escape(str(container))}[/dim]")

        records = self.track_store.list_all()
        summary = ExportSummary(container_path=container, total=len(records))
        if self.event_logger:
            self.event_logger.export_started(str(container), len(records))

        if not records:
            log.info("No tracks found to export.")
        else:
            log.info(f"Found {len(records)} track(s) to export.")

        for index, record in enumerate(records, 1):
            label = escape(
                format_track_label(
                    record.primary_artist, record.track_title, record.mix_name
                )
            )
            try:
                exported_track = self._export_track(record, container)
            except ExportItemError as e:
                summary.record_failure(e)
                log.warning(
                    f"  [yellow]⚠ Skipped:[/] {label} "
                    f"([dim]{escape(record.stored_filename)}[/dim]: {escape(e.reason)})"
                )
                if self.event_logger:
                    self.event_logger.track_failed(
                        e.track_id, e.stored_filename, e.reason
                    )
                if self.progress_callback:
                    self.progress_callback(record, False)
                continue

            summary.record_success(exported_track)
            log.info(f"  [green]✓[/] [{index}/{len(records)}] Exported: {label}")
            if self.event_logger:
                self.event_logger.track_exported(
                    record.id, exported_track.export_filename, record.file_size_bytes
                )
            if self.progress_callback:
                self.progress_callback(record, True)

        self._write_manifests(container, summary.exported)

        if self.event_logger:
            self.event_logger.export_completed(
                str(container),
                summary.total,
                summary.succeeded,
                summary.failed,
                time.monotonic() - start_time,
            )
        return summary
