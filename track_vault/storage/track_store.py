"""
Manages the JSON document that records every uploaded track.
"""

import asyncio
import json
import logging
import os
import threading
from collections import Counter
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from track_vault.exceptions import (
    DuplicateTrackError,
    StorageIOError,
    StorageReadCorruption,
)
from track_vault.models.track import TrackRecord

log = logging.getLogger(__name__)

# One lock per database file, shared by every TrackStore in the process.
_path_locks: dict[Path, threading.Lock] = {}
_path_locks_guard = threading.Lock()


def _lock_for(db_path: Path) -> threading.Lock:
    with _path_locks_guard:
        key = db_path.resolve()
        if key not in _path_locks:
            _path_locks[key] = threading.Lock()
        return _path_locks[key]


class TrackStore:
    """
    A durable, ordered collection of track records backed by one JSON file.

    Appends are a read-modify-write of the whole document, serialized by a
    process-wide lock so concurrent uploads cannot lose each other's records.
    """

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self._lock = _lock_for(db_path)
        self._initialize_db()

    def _initialize_db(self) -> None:
        """Creates the database directory and an empty document if missing."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            with self._lock:
                if not self.db_path.exists():
                    self._write_records([])
        except (OSError, StorageIOError) as e:
            log.error(f"Failed to initialize track store at '{self.db_path}': {e}")

    def _read_records(self) -> list[TrackRecord]:
        """Reads every record in insertion order. Raises StorageReadCorruption."""
        if not self.db_path.is_file():
            return []
        try:
            with open(self.db_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StorageReadCorruption(
                f"Could not read track store '{self.db_path}': {e}"
            ) from e

        if not isinstance(data, list):
            raise StorageReadCorruption(
                f"Track store '{self.db_path}' does not contain a list of records."
            )
        try:
            return [TrackRecord.model_validate(item) for item in data]
        except ValidationError as e:
            raise StorageReadCorruption(
                f"Track store '{self.db_path}' contains an invalid record:\n{e}"
            ) from e

    def _write_records(self, records: list[TrackRecord]) -> None:
        """Atomically replaces the document with the given records."""
        payload = json.dumps(
            [record.to_json_dict() for record in records],
            indent=2,
            ensure_ascii=False,
        )
        tmp_path = self.db_path.with_name(f"{self.db_path.name}.tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.db_path)
        except OSError as e:
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError:
                log.debug(f"Could not remove temporary store file '{tmp_path}'.")
            raise StorageIOError(
                f"Could not write track store '{self.db_path}': {e}"
            ) from e

    def append(self, record: TrackRecord) -> None:
        """
        Durably adds a record to the store.

        Raises:
            DuplicateTrackError: If a record with the same ID is already stored.
            StorageReadCorruption: If the existing document cannot be read; it is
                left untouched rather than overwritten.
            StorageIOError: If the document cannot be written.
        """
        with self._lock:
            records = self._read_records()
            if any(existing.id == record.id for existing in records):
                raise DuplicateTrackError(f"Track ID '{record.id}' already exists.")
            records.append(record)
            self._write_records(records)
        log.debug(f"Stored track record {record.id} ({record.stored_filename}).")

    def list_all(self) -> list[TrackRecord]:
        """
        Returns every record, most recent upload first.

        Records sharing a timestamp keep their insertion order. A store that cannot
        be read yields an empty list; the failure is logged at ERROR level.
        """
        try:
            records = self._read_records()
        except StorageReadCorruption as e:
            log.error(f"[red]{e}[/red]")
            return []
        # sorted() stays stable with reverse=True
        return sorted(records, key=lambda r: r.upload_timestamp, reverse=True)

    async def append_async(self, record: TrackRecord) -> None:
        """Runs append() in a worker thread."""
        await asyncio.to_thread(self.append, record)

    async def list_all_async(self) -> list[TrackRecord]:
        """Runs list_all() in a worker thread."""
        return await asyncio.to_thread(self.list_all)

    def get_stats(self) -> dict[str, Any]:
        """Returns the track count, total payload size and the top 10 artists."""
        records = self.list_all()
        artist_counts = Counter(record.primary_artist for record in records)
        return {
            "total_tracks": len(records),
            "total_size_bytes": sum(record.file_size_bytes for record in records),
            "top_artists": artist_counts.most_common(10),
        }
