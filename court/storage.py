"""
Key-value persistence port for Royal Court.

The game persists exactly two JSON records, each under one well-known key:

- ``royalCourtScores``   – the all-time leaderboard (array of score records)
- ``royalCourtSettings`` – the settings blob (language, volumes)

Stores offer whole-value read / write / delete with no transactional
guarantees; single device, single process.  Every I/O or decode problem is
raised as ``StorageError`` so callers can absorb it at their boundary.
"""

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

SCORES_KEY = "royalCourtScores"
SETTINGS_KEY = "royalCourtSettings"


class StorageError(Exception):
    """Raised when a stored value cannot be read, decoded or written."""


class KeyValueStore(ABC):
    """Abstract JSON key-value store."""

    @abstractmethod
    def read(self, key: str) -> Optional[Any]:
        """
        Return the decoded value stored under *key*.

        Returns:
            The JSON value, or ``None`` when nothing is stored.

        Raises:
            StorageError: If the stored data is unreadable or malformed.
        """
        pass

    @abstractmethod
    def write(self, key: str, value: Any) -> None:
        """
        Replace the value under *key*.

        Raises:
            StorageError: If the value cannot be encoded or written.
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove *key*; deleting a missing key is not an error."""
        pass


class MemoryStore(KeyValueStore):
    """In-process store; values are kept JSON-encoded to mimic real storage."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StorageError(f"Malformed JSON under '{key}': {exc}") from exc

    def write(self, key: str, value: Any) -> None:
        try:
            self._data[key] = json.dumps(value)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"Value for '{key}' is not JSON-serialisable: {exc}") from exc

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def raw(self, key: str) -> Optional[str]:
        """Encoded value under *key*, for inspection."""
        return self._data.get(key)


class JsonFileStore(KeyValueStore):
    """
    One ``<key>.json`` file per key inside *directory*.

    Writes go to a temporary file that is then moved over the target, so a
    crash mid-write leaves the previous value intact.
    """

    def __init__(self, directory: str = "./court_data"):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise StorageError(f"Cannot read '{key}' from {path}: {exc}") from exc

    def write(self, key: str, value: Any) -> None:
        path = self._path(key)
        try:
            content = json.dumps(value, indent=2)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"Value for '{key}' is not JSON-serialisable: {exc}") from exc

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(content)
                os.replace(tmp_name, path)
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"Cannot write '{key}' to {path}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot delete '{key}': {exc}") from exc
