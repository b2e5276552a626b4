"""
The directory holding raw uploaded payloads, addressed by their stored filename.
"""

import logging
import shutil
from pathlib import Path

import aiofiles

from track_vault.exceptions import ContentStoreError

log = logging.getLogger(__name__)


class ContentStore:
    """Reads, writes and copies payload files below a single root directory."""

    CHUNK_SIZE = 262144  # 256 KB

    def __init__(self, root: Path):
        self.root = root

    def path_for(self, name: str) -> Path:
        """
        Resolves a stored filename to its location inside the store.

        Raises:
            ContentStoreError: If the name is empty or would escape the root.
        """
        if not name or name in (".", "..") or "/" in name or "\\" in name:
            raise ContentStoreError(f"Invalid stored filename: '{name}'")
        return self.root / name

    def exists(self, name: str) -> bool:
        try:
            return self.path_for(name).is_file()
        except ContentStoreError:
            return False

    def read(self, name: str) -> bytes:
        return self.path_for(name).read_bytes()

    def copy(self, name: str, destination: Path) -> Path:
        """Copies the payload bytes verbatim to destination, overwriting it."""
        shutil.copyfile(self.path_for(name), destination)
        return destination

    def write(self, name: str, data: bytes) -> int:
        """Writes a payload and returns its size in bytes."""
        path = self.path_for(name)
        self.root.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return len(data)

    async def store_file(self, name: str, source: Path) -> int:
        """Copies a local file into the store chunk by chunk; returns bytes written."""
        path = self.path_for(name)
        self.root.mkdir(parents=True, exist_ok=True)
        size = 0
        async with aiofiles.open(source, "rb") as src, aiofiles.open(path, "wb") as dst:
            while chunk := await src.read(self.CHUNK_SIZE):
                await dst.write(chunk)
                size += len(chunk)
        log.debug(f"Stored payload '{name}' ({size} bytes).")
        return size

    def remove(self, name: str) -> None:
        """Deletes a payload if it exists."""
        self.path_for(name).unlink(missing_ok=True)
