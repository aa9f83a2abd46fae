"""Key/value persistence used for the schema version record.

Values are strings; callers encode dates and paths themselves. The JSON
implementation writes through a temporary file and an atomic rename so a
crash never leaves a half-written state file behind.
"""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

import orjson

from vehicle_store.logger import get_logger

logger = get_logger(__name__)

CORRUPTED_SUFFIX = ".corrupted"


@runtime_checkable
class KeyValueStore(Protocol):
    """String key/value store."""

    def get(self, key: str) -> str | None:
        """Return the value for key, or None when absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Persist value under key."""
        ...

    def remove(self, key: str) -> None:
        """Delete key if present."""
        ...


class MemoryKeyValueStore:
    """Dict-backed store for embedding and tests."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonKeyValueStore:
    """Key/value store persisted as a single JSON object on disk."""

    def __init__(self, path: Path) -> None:
        """Initialize store.

        Args:
            path: JSON file holding the key/value pairs

        """
        self.path = path

    def load(self) -> dict[str, str]:
        """Load all entries.

        A corrupted file is copied aside with a ``.corrupted`` suffix and
        treated as empty so the next launch can start over.
        """
        if not self.path.exists():
            return {}

        try:
            data = orjson.loads(self.path.read_bytes())
        except orjson.JSONDecodeError as e:
            logger.warning("Corrupted state file %s: %s", self.path, e)
            corrupted_copy = self.path.with_suffix(CORRUPTED_SUFFIX)
            shutil.copy2(self.path, corrupted_copy)
            logger.info("Backed up corrupted state to %s", corrupted_copy)
            return {}

        if not isinstance(data, dict):
            logger.warning("State file %s is not a JSON object", self.path)
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def save(self, data: dict[str, str]) -> None:
        """Write all entries atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        with tempfile.NamedTemporaryFile(
            mode="wb",
            dir=self.path.parent,
            prefix=f".{self.path.name}_",
            suffix=".tmp",
            delete=False,
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            try:
                tmp_file.write(
                    orjson.dumps(
                        data,
                        option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS,
                    )
                )
                tmp_file.flush()
            except (OSError, TypeError):
                tmp_file.close()
                temp_path.unlink(missing_ok=True)
                raise

        try:
            temp_path.replace(self.path)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise
        logger.debug("Saved state to %s", self.path)

    def get(self, key: str) -> str | None:
        return self.load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self.load()
        data[key] = value
        self.save(data)

    def remove(self, key: str) -> None:
        data = self.load()
        if data.pop(key, None) is not None:
            self.save(data)
