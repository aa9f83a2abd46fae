"""Fixtures for backup archiver tests."""

import threading
import time
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from vehicle_store.core.backup import BackupArchiver
from vehicle_store.core.protocols import LocalFileSystem
from vehicle_store.core.version_state import VersionStateStore

STORE_FILES = {
    "default.store": b"main store",
    "default.store-wal": b"write-ahead log",
    "default.store-shm": b"shared memory",
    "cache.sqlite": b"secondary sqlite",
}


class FakeClock:
    """Deterministic clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FlakyFileSystem(LocalFileSystem):
    """LocalFileSystem whose copy fails after a number of successes."""

    def __init__(self, fail_after: int) -> None:
        self.fail_after = fail_after
        self.copies = 0

    def copy_file(self, source: Path, destination: Path) -> None:
        if self.copies >= self.fail_after:
            raise OSError("simulated I/O error")
        super().copy_file(source, destination)
        self.copies += 1


class FixedSpaceFileSystem(LocalFileSystem):
    """LocalFileSystem reporting a fixed free-space value."""

    def __init__(self, free: int | None) -> None:
        self.free = free

    def free_space(self, path: Path) -> int | None:
        return self.free


class SlowFileSystem(LocalFileSystem):
    """LocalFileSystem that copies slowly and tracks copies in flight."""

    def __init__(self, delay: float) -> None:
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0
        self._counter_lock = threading.Lock()

    def copy_file(self, source: Path, destination: Path) -> None:
        with self._counter_lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            time.sleep(self.delay)
            super().copy_file(source, destination)
        finally:
            with self._counter_lock:
                self.in_flight -= 1


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 15, 14, 30, 0).astimezone())


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Data directory holding store files plus unrelated files."""
    directory = tmp_path / "data"
    directory.mkdir()
    for name, content in STORE_FILES.items():
        (directory / name).write_bytes(content)
    (directory / "notes.txt").write_text("not part of the store")
    (directory / ".default.store.lock").write_text("hidden")
    (directory / "default_attachments").mkdir()
    return directory


@pytest.fixture
def backup_root(tmp_path: Path) -> Path:
    return tmp_path / "data_backups"


@pytest.fixture
def make_archiver(
    data_dir: Path,
    backup_root: Path,
    version_state: VersionStateStore,
    clock: FakeClock,
):
    """Factory building archivers over the shared directories."""

    def _make(**kwargs) -> BackupArchiver:
        kwargs.setdefault("min_free_bytes", 0)
        kwargs.setdefault("clock", clock)
        return BackupArchiver(data_dir, backup_root, version_state, **kwargs)

    return _make


@pytest.fixture
def archiver(make_archiver) -> BackupArchiver:
    return make_archiver()


def make_backup_dir(root: Path, name: str) -> Path:
    """Create a pre-existing backup directory with one store file."""
    path = root / name
    path.mkdir(parents=True)
    (path / "default.store").write_bytes(name.encode())
    return path
