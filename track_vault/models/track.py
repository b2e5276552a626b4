"""
Pydantic models for persisted track records and their per-export counterparts.
"""

import json
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, field_validator


class TrackRecord(BaseModel):
    """Metadata describing one uploaded audio file. Immutable once created."""

    id: str = Field(..., min_length=1)
    original_filename: str
    stored_filename: str = Field(..., min_length=1)
    track_title: str = Field(..., min_length=1)
    mix_name: str = Field(..., min_length=1)
    primary_artist: str = Field(..., min_length=1)
    featured_artists: list[str] | None = None
    upload_timestamp: datetime
    file_size_bytes: int = Field(..., ge=0)
    mime_type: str

    class Config:
        """Pydantic model configuration."""

        frozen = True
        str_strip_whitespace = True

    @field_validator("featured_artists", mode="before")
    @classmethod
    def decode_featured_artists(cls, v: Any) -> Any:
        """
        Accepts the legacy encoding, where the list was persisted as a JSON
        string (e.g. '["A", "B"]'), alongside a plain list or null.
        """
        if isinstance(v, str):
            try:
                decoded = json.loads(v)
            except json.JSONDecodeError as e:
                raise ValueError(f"featured_artists is not a valid list: {e}") from e
            if decoded is not None and not isinstance(decoded, list):
                raise ValueError("featured_artists must decode to a list.")
            return decoded
        return v

    @field_validator("upload_timestamp")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Naive timestamps are interpreted as UTC so ordering is well defined."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def to_json_dict(self) -> dict[str, Any]:
        """Serializes the record to JSON-compatible primitives."""
        return self.model_dump(mode="json")


class ExportedTrack(TrackRecord):
    """A track record enriched with where and when it was exported."""

    export_filename: str
    export_path: str
    exported_at: datetime

    @classmethod
    def from_record(
        cls, record: TrackRecord, export_filename: str, export_path: str
    ) -> "ExportedTrack":
        """Builds an exported entry for a record, stamped with the current instant."""
        return cls(
            **record.model_dump(),
            export_filename=export_filename,
            export_path=export_path,
            exported_at=datetime.now(timezone.utc),
        )
