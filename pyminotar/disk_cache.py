# pyminotar/disk_cache.py
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Keys become file names, so anything outside this set is never touched on disk.
VALID_KEY = re.compile(r"^[A-Za-z0-9_-]{1,36}$")


class DiskCache:
    """
    One PNG per player in a flat directory, holding the raw skin bytes.

    There is no expiry: an entry lives until someone deletes the file.
    Minecraft names are case-insensitive, so keys are lowercased.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Optional[Path]:
        if not VALID_KEY.match(key):
            return None
        return self.directory / f"{key.lower()}.png"

    def get(self, key: str) -> Optional[bytes]:
        path = self.path_for(key)
        if path is None:
            return None
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None

    def put(self, key: str, data: bytes) -> None:
        """Writes an entry, replacing the whole file so readers never see a partial skin."""
        path = self.path_for(key)
        if path is None:
            raise ValueError(f"Invalid cache key: {key!r}")

        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-", suffix=".png")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Cached skin for %s at %s", key, path)
