"""
Utilities for handling file paths and deriving safe file names.
"""

import random
import re
import time
from datetime import datetime, timezone
from pathlib import Path

from pathvalidate import sanitize_filename

EXPORT_FOLDER_PREFIX = "tracks-export-"

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9]")


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)


def safe_component(value: str) -> str:
    """
    Replaces every character outside [a-zA-Z0-9] with '_' and lower-cases the result.

    The substitution runs before case folding so that characters whose lower-case
    form expands (e.g. 'İ') still map to a single underscore.
    """
    return _UNSAFE_CHARS.sub("_", value).lower()


def derive_export_filename(
    primary_artist: str, track_title: str, mix_name: str, stored_filename: str
) -> str:
    """
    Builds the '{artist}_{title}_{mix}{ext}' name used for exported copies.

    The extension is taken verbatim from the stored payload name. Two tracks with
    the same artist, title and mix map to the same name.
    """
    ext = Path(stored_filename).suffix
    return (
        f"{safe_component(primary_artist)}_{safe_component(track_title)}"
        f"_{safe_component(mix_name)}{ext}"
    )


def make_stored_filename(original_filename: str) -> str:
    """
    Generates a unique content-store name such as 'track-1700000000000-123456789.mp3',
    keeping the (sanitized) extension of the uploaded file.
    """
    ext = sanitize_filename(Path(original_filename).suffix, replacement_text="_")
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return f"track-{unique_suffix}{ext}"


def export_folder_name(moment: datetime | None = None) -> str:
    """Returns the timestamped export container name, precise to the second."""
    moment = moment or datetime.now(timezone.utc)
    return f"{EXPORT_FOLDER_PREFIX}{moment.strftime('%Y-%m-%dT%H-%M-%S')}"
