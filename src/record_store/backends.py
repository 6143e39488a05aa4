"""Storage backends: one blob of JSON-compatible data per collection key.

A write replaces the whole blob or fails with StorageError; there are no
partial writes.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from record_store.exceptions import StorageError

logger = logging.getLogger(__name__)


class StorageBackend(Protocol):
    """Keyed blob storage used by the collections."""

    def load(self, key: str) -> Any | None:
        """Return the stored blob for *key*, or None if nothing is stored.

        Raises:
            StorageError: If the blob exists but cannot be read.
        """
        ...

    def save(self, key: str, data: Any) -> None:
        """Replace the blob for *key*. Raises StorageError on failure."""
        ...

    def remove(self, key: str) -> None:
        """Delete the blob for *key* if present. Raises StorageError on failure."""
        ...


class JsonFileBackend:
    """Stores each key as ``<data_dir>/<key>.json``.

    Writes go to a temporary file in the same directory which then replaces
    the target, so readers never see a half-written collection.
    """

    def __init__(self, data_dir: Path | str) -> None:
        self.data_dir = Path(data_dir).expanduser()

    def path_for(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def load(self, key: str) -> Any | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Failed to read {path}: {exc}", key=key) from exc

    def save(self, key: str, data: Any) -> None:
        path = self.path_for(key)
        tmp_name: str | None = None
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{key}.", suffix=".tmp", dir=self.data_dir
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_name, path)
            tmp_name = None
        except (OSError, TypeError, ValueError) as exc:
            raise StorageError(f"Failed to write {path}: {exc}", key=key) from exc
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
        logger.debug("Wrote %s", path)

    def remove(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Failed to remove {path}: {exc}", key=key) from exc


class MemoryBackend:
    """In-process backend. Blobs are deep-copied in and out."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._blobs: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def load(self, key: str) -> Any | None:
        if key not in self._blobs:
            return None
        return copy.deepcopy(self._blobs[key])

    def save(self, key: str, data: Any) -> None:
        self._blobs[key] = copy.deepcopy(data)

    def remove(self, key: str) -> None:
        self._blobs.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._blobs)
