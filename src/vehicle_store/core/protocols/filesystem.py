"""Filesystem capability consumed by the backup archiver.

The archiver only ever touches disk through this interface, so tests can
inject failures (a copy that raises halfway, an unknown free-space value)
without monkeypatching ``shutil``.
"""

from __future__ import annotations

import shutil
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from vehicle_store.logger import get_logger

if TYPE_CHECKING:
    from pathlib import Path

logger = get_logger(__name__)


@runtime_checkable
class FileSystem(Protocol):
    """Copy/delete/list/free-space primitives."""

    def exists(self, path: Path) -> bool: ...

    def is_file(self, path: Path) -> bool: ...

    def list_dir(self, path: Path) -> list[Path]:
        """List non-hidden entries of a directory, sorted by name."""
        ...

    def make_dirs(self, path: Path) -> None: ...

    def copy_file(self, source: Path, destination: Path) -> None: ...

    def remove_file(self, path: Path) -> None: ...

    def remove_tree(self, path: Path) -> None: ...

    def modified_time(self, path: Path) -> float: ...

    def free_space(self, path: Path) -> int | None:
        """Free bytes on the volume holding path, or None if unknown."""
        ...


class LocalFileSystem:
    """FileSystem backed by pathlib and shutil."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_file(self, path: Path) -> bool:
        return path.is_file()

    def list_dir(self, path: Path) -> list[Path]:
        return sorted(
            (item for item in path.iterdir() if not item.name.startswith(".")),
            key=lambda item: item.name,
        )

    def make_dirs(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def copy_file(self, source: Path, destination: Path) -> None:
        shutil.copy2(source, destination)

    def remove_file(self, path: Path) -> None:
        path.unlink()

    def remove_tree(self, path: Path) -> None:
        shutil.rmtree(path)

    def modified_time(self, path: Path) -> float:
        return path.stat().st_mtime

    def free_space(self, path: Path) -> int | None:
        try:
            return shutil.disk_usage(path).free
        except OSError as e:
            logger.warning("Could not check storage space: %s", e)
            return None
