"""Durable string key-value storage.

Plays the role browser localStorage had for the web app: one key holds one
serialized value. Each key is stored as its own file so a corrupt value never
affects another key. Writes go to a temp file first and are moved into place.
"""

import logging
import os
import tempfile
from pathlib import Path

from digitizer.core.errors import persistence_error

logger = logging.getLogger(__name__)


class LocalStorage:
    """Key-value store backed by one file per key under a directory."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory).expanduser()

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        """Return the stored text, or None if the key was never written.

        Raises:
            PersistenceError: If the file exists but cannot be read.
        """
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise persistence_error(key, e) from e

    def set_item(self, key: str, value: str) -> None:
        """Atomically replace the value stored under key.

        Raises:
            PersistenceError: If the directory or file cannot be written.
        """
        path = self._path(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise persistence_error(key, e) from e
        logger.debug(f"Wrote {len(value)} chars to {path}")

    def remove_item(self, key: str) -> None:
        """Delete a key. Missing keys are ignored."""
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise persistence_error(key, e) from e

    def keys(self) -> list[str]:
        if not self.directory.exists():
            return []
        return sorted(p.stem for p in self.directory.glob("*.json"))
