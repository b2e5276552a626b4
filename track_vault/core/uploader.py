"""
Ingests local audio files: validates metadata, stores the payload and appends
the track record.
"""

import asyncio
import json
import logging
import mimetypes
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.markup import escape

from track_vault.exceptions import (
    StorageError,
    TrackVaultError,
    UploadValidationError,
)
from track_vault.models.track import TrackRecord
from track_vault.storage.content_store import ContentStore
from track_vault.storage.track_store import TrackStore
from track_vault.utils.path import make_stored_filename
from track_vault.utils.structured_logger import UploadLogger

log = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass
class UploadRequest:
    """A file plus the metadata supplied for it."""

    source_path: Path
    track_title: str
    mix_name: str
    primary_artist: str
    featured_artists: list[str] | str | None = None
    mime_type: str | None = None


@dataclass
class UploadResult:
    """Outcome of one request in a batch upload."""

    request: UploadRequest
    record: TrackRecord | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.record is not None


def parse_featured_artists(value: list[str] | str | None) -> list[str] | None:
    """
    Normalizes the optional featured-artist list.

    Accepts a list or a JSON-encoded list string. Blank names are dropped; an
    empty or unparsable value means "not specified" and yields None.
    """
    if value is None:
        return None
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            log.debug(f"Ignoring unparsable featured_artists value: {value!r}")
            return None
        if not isinstance(value, list):
            return None

    artists = [str(name).strip() for name in value if str(name).strip()]
    return artists or None


def _require(field_name: str, value: str | None) -> str:
    if not value or not value.strip():
        raise UploadValidationError(f"{field_name} is required")
    return value.strip()


class TrackUploader:
    """Turns local audio files into stored payloads plus track records."""

    def __init__(
        self,
        track_store: TrackStore,
        content_store: ContentStore,
        max_upload_bytes: int = 100 * 1024 * 1024,
        max_workers: int = 4,
        event_logger: UploadLogger | None = None,
    ):
        self.track_store = track_store
        self.content_store = content_store
        self.max_upload_bytes = max_upload_bytes
        self.max_workers = max_workers
        self.event_logger = event_logger

    def _validate(self, request: UploadRequest) -> dict[str, Any]:
        source = Path(request.source_path)
        if not source.is_file():
            raise UploadValidationError("audio_file is required")

        fields = {
            "track_title": _require("track_title", request.track_title),
            "mix_name": _require("mix_name", request.mix_name),
            "primary_artist": _require("primary_artist", request.primary_artist),
        }

        size = source.stat().st_size
        if size > self.max_upload_bytes:
            limit_mb = self.max_upload_bytes // (1024 * 1024)
            raise UploadValidationError(
                f"File too large. Maximum size is {limit_mb}MB."
            )
        return fields

    async def upload(self, request: UploadRequest) -> TrackRecord:
        """
        Stores one file and appends its record.

        Raises:
            UploadValidationError: If the file or required metadata is missing, or
                the file exceeds the size limit.
            OSError: If the payload cannot be copied; any partial copy is removed.
            StorageError: If the record cannot be saved; the stored payload is
                removed again.
        """
        original_filename = Path(request.source_path).name
        try:
            fields = self._validate(request)
        except UploadValidationError as e:
            if self.event_logger:
                self.event_logger.upload_rejected(original_filename, str(e))
            raise

        stored_filename = make_stored_filename(original_filename)
        try:
            size = await self.content_store.store_file(
                stored_filename, Path(request.source_path)
            )
        except OSError as e:
            log.error(
                f"[red]Could not store '{escape(original_filename)}': "
                f"{escape(str(e))}[/red]"
            )
            self.content_store.remove(stored_filename)
            if self.event_logger:
                self.event_logger.upload_rejected(original_filename, str(e))
            raise

        record = TrackRecord(
            id=str(uuid.uuid4()),
            original_filename=original_filename,
            stored_filename=stored_filename,
            featured_artists=parse_featured_artists(request.featured_artists),
            upload_timestamp=datetime.now(timezone.utc),
            file_size_bytes=size,
            mime_type=request.mime_type
            or mimetypes.guess_type(original_filename)[0]
            or DEFAULT_MIME_TYPE,
            **fields,
        )

        try:
            await self.track_store.append_async(record)
        except StorageError as e:
            log.error(
                f"[red]Upload of '{escape(original_filename)}' not saved: "
                f"{escape(str(e))}[/red]"
            )
            self.content_store.remove(stored_filename)
            if self.event_logger:
                self.event_logger.upload_rejected(original_filename, str(e))
            raise

        if self.event_logger:
            self.event_logger.track_uploaded(
                record.id, stored_filename, size, record.mime_type
            )
        log.info(
            f"[green]✓ Uploaded:[/] {escape(record.primary_artist)} - "
            f"{escape(record.track_title)} "
            f"([dim]{record.id}[/dim])"
        )
        return record

    async def upload_many(self, requests: list[UploadRequest]) -> list[UploadResult]:
        """
        Uploads several files concurrently, bounded by max_workers.

        Failures are reported per request and do not stop the other uploads.
        """
        semaphore = asyncio.Semaphore(self.max_workers)

        async def _upload_one(request: UploadRequest) -> UploadResult:
            async with semaphore:
                try:
                    return UploadResult(request, record=await self.upload(request))
                except (TrackVaultError, OSError) as e:
                    log.error(
                        f"[red]✗ Failed:[/] {escape(Path(request.source_path).name)} "
                        f"({escape(str(e))})"
                    )
                    return UploadResult(request, error=e)

        return await asyncio.gather(*(_upload_one(r) for r in requests))
