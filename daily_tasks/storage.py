"""Key-value persistence slots for the task store.

The store only needs a string-to-string slot, so backends are tiny:
an in-memory dict (tests, headless use) and a directory of JSON files.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from daily_tasks.errors import StorageError

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """Persistence slot port used by TaskStore."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage with an optional size quota.

    The quota mimics browser storage limits: a write whose encoded size
    exceeds `quota_bytes` raises StorageError and leaves the old value.
    """

    def __init__(self, quota_bytes: int | None = None) -> None:
        """Initialize an empty storage."""
        self._data: dict[str, str] = {}
        self.quota_bytes = quota_bytes

    def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key was never written."""
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value, enforcing the quota."""
        if self.quota_bytes is not None:
            size = len(value.encode("utf-8"))
            if size > self.quota_bytes:
                raise StorageError(
                    f"quota exceeded writing {key!r}: {size} > {self.quota_bytes} bytes"
                )
        self._data[key] = value


class JsonFileStorage:
    """One JSON file per key inside a data directory.

    Writes go to a temporary file in the same directory which then replaces
    the target, so readers never observe a half-written slot.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory).expanduser()
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"cannot create data directory {self.directory}: {exc}") from exc
        logger.info("JsonFileStorage ready dir=%s", self.directory)

    def path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key in {".", ".."}:
            raise ValueError(f"invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"cannot read {path}: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        except OSError as exc:
            raise StorageError(f"cannot write {path}: {exc}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"cannot write {path}: {exc}") from exc
        logger.debug("Wrote %s bytes=%s", path, len(value))
