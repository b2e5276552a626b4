"""
Structured logging system for better log analysis and debugging.
Provides JSON-formatted logs with context and metadata.
"""

import json
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any


class StructuredLogger:
    """
    Logger that outputs both human-readable and machine-parseable logs.

    Usage:
        logger = StructuredLogger("track_vault.events", log_dir=Path("logs"))
        logger.info("track_exported",
                    track_id="6f1c...",
                    export_filename="dj_x_go_club_mix.mp3",
                    size_bytes=4521984)
    """

    def __init__(
        self,
        name: str,
        log_dir: Path | None = None,
        enable_json: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize structured logger.

        Args:
            name: Logger name
            log_dir: Directory for JSON log files (None = disabled)
            enable_json: Enable JSON file logging
            enable_console: Enable console output
        """
        self.name = name
        self.log_dir = log_dir
        self.enable_json = enable_json and log_dir is not None
        self.enable_console = enable_console

        self._logger = logging.getLogger(name)

        self._json_file = None
        self.json_log_path: Path | None = None
        if self.enable_json:
            log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.json_log_path = log_dir / f"track_vault_{timestamp}.jsonl"
            self._json_file = open(self.json_log_path, "a", encoding="utf-8")  # noqa: SIM115

        # Session context (added to all log entries)
        self._session_context: dict[str, Any] = {
            "session_id": f"{int(time.time())}_{id(self)}",
            "start_time": datetime.now().isoformat(),
        }

    def set_session_context(self, **kwargs) -> None:
        """Set session-level context that appears in all logs."""
        self._session_context.update(kwargs)

    def _format_message(self, event: str, **context) -> str:
        """Format message for console output."""
        parts = [f"{event}:"]
        for key, value in context.items():
            if key not in ("level", "timestamp"):
                parts.append(f"{key}={value}")
        return " ".join(parts)

    def _write_json(self, level: str, event: str, **context) -> None:
        """Write structured log entry to JSON file."""
        if not self._json_file or self._json_file.closed:
            return

        entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level,
            "event": event,
            **self._session_context,
            **context,
        }

        try:
            self._json_file.write(json.dumps(entry, default=str) + "\n")
            self._json_file.flush()
        except (OSError, ValueError) as e:
            # Fallback to stderr if JSON logging fails
            print(f"JSON logging failed: {e}", file=sys.stderr)

    def _emit(self, level: int, event: str, **context) -> None:
        if self.enable_console:
            self._logger.log(level, self._format_message(event, **context))
        if self.enable_json:
            self._write_json(logging.getLevelName(level), event, **context)

    def debug(self, event: str, **context) -> None:
        """Log debug event."""
        self._emit(logging.DEBUG, event, **context)

    def info(self, event: str, **context) -> None:
        """Log info event."""
        self._emit(logging.INFO, event, **context)

    def warning(self, event: str, **context) -> None:
        """Log warning event."""
        self._emit(logging.WARNING, event, **context)

    def error(self, event: str, **context) -> None:
        """Log error event."""
        self._emit(logging.ERROR, event, **context)

    def close(self) -> None:
        """Close JSON log file."""
        if self._json_file and not self._json_file.closed:
            self._json_file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class ExportLogger:
    """Specialized logger for export events."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def export_started(self, container_path: str, total_tracks: int):
        self.logger.info(
            "export_started", container_path=container_path, total_tracks=total_tracks
        )

    def track_exported(
        self, track_id: str, export_filename: str, size_bytes: int
    ):
        self.logger.debug(
            "track_exported",
            track_id=track_id,
            export_filename=export_filename,
            size_bytes=size_bytes,
        )

    def track_failed(self, track_id: str, stored_filename: str, reason: str):
        self.logger.warning(
            "track_export_failed",
            track_id=track_id,
            stored_filename=stored_filename,
            reason=reason,
        )

    def export_completed(
        self,
        container_path: str,
        total: int,
        succeeded: int,
        failed: int,
        duration_s: float,
    ):
        self.logger.info(
            "export_completed",
            container_path=container_path,
            total=total,
            succeeded=succeeded,
            failed=failed,
            duration_s=round(duration_s, 2),
        )


class UploadLogger:
    """Specialized logger for upload events."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def track_uploaded(
        self, track_id: str, stored_filename: str, size_bytes: int, mime_type: str
    ):
        """Log a stored upload."""
        self.logger.info(
            "track_uploaded",
            track_id=track_id,
            stored_filename=stored_filename,
            size_bytes=size_bytes,
            size_mb=round(size_bytes / (1024 * 1024), 2),
            mime_type=mime_type,
        )

    def upload_rejected(self, original_filename: str, reason: str):
        """Log an upload that failed validation or storage."""
        self.logger.warning(
            "upload_rejected", original_filename=original_filename, reason=reason
        )


def create_structured_logger(
    log_dir: Path | None = None, enable_json: bool = False
) -> tuple[StructuredLogger, ExportLogger, UploadLogger]:
    """
    Create all structured loggers.

    Returns:
        Tuple of (base_logger, export_logger, upload_logger)
    """
    base = StructuredLogger(
        "track_vault.events", log_dir=log_dir, enable_json=enable_json
    )
    return base, ExportLogger(base), UploadLogger(base)
