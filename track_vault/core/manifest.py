"""
Writes the JSON and CSV manifests that describe an export bundle.
"""

import csv
import json
from pathlib import Path

from track_vault.models.track import ExportedTrack
from track_vault.utils.formatting import join_artists

JSON_MANIFEST_NAME = "metadata.json"
CSV_MANIFEST_NAME = "metadata.csv"

CSV_HEADERS = [
    "ID",
    "Original Filename",
    "Export Filename",
    "Track Title",
    "Mix Name",
    "Primary Artist",
    "Featured Artists",
    "Upload Timestamp",
    "File Size (bytes)",
    "MIME Type",
]


def csv_row(track: ExportedTrack) -> list[str | int]:
    """Maps an exported track onto the CSV manifest columns."""
    return [
        track.id,
        track.original_filename,
        track.export_filename,
        track.track_title,
        track.mix_name,
        track.primary_artist,
        join_artists(track.featured_artists),
        track.to_json_dict()["upload_timestamp"],
        track.file_size_bytes,
        track.mime_type,
    ]


def write_json_manifest(container: Path, tracks: list[ExportedTrack]) -> Path:
    """Writes the full exported-track list as indented JSON, preserving order."""
    path = container / JSON_MANIFEST_NAME
    with open(path, "w", encoding="utf-8") as f:
        json.dump(
            [track.to_json_dict() for track in tracks], f, indent=2, ensure_ascii=False
        )
    return path


def write_csv_manifest(container: Path, tracks: list[ExportedTrack]) -> Path:
    """
    Writes one row per exported track under a fixed header.

    Every text field is quoted and embedded quotes are doubled, so titles or
    artist lists containing commas or quotes stay in a single column. The file
    size is the only bare value.
    """
    path = container / CSV_MANIFEST_NAME
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
        writer.writerow(CSV_HEADERS)
        writer.writerows(csv_row(track) for track in tracks)
    return path
