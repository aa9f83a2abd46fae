"""Fixtures for migration coordinator tests."""

from datetime import datetime
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from vehicle_store.core.backup import Backup, BackupArchiver, BackupResult
from vehicle_store.core.migration import MigrationState


class RecordingEngine:
    """Migration engine double recording calls."""

    def __init__(
        self,
        error: Exception | None = None,
        verified: bool = True,
    ) -> None:
        self.error = error
        self.verified = verified
        self.applied = 0
        self.verified_calls = 0

    async def apply_migration(self) -> None:
        self.applied += 1
        if self.error is not None:
            raise self.error

    async def verify(self) -> bool:
        self.verified_calls += 1
        return self.verified


class ListenerLog:
    """Collects (state, progress, error) notifications."""

    def __init__(self) -> None:
        self.events: list[tuple[MigrationState, float, object]] = []

    def __call__(self, state, progress, error) -> None:
        self.events.append((state, progress, error))

    @property
    def states(self) -> list[MigrationState]:
        return [state for state, _, _ in self.events]

    @property
    def progress(self) -> list[float]:
        return [progress for _, progress, _ in self.events]


@pytest.fixture
def backup_result(tmp_path: Path) -> BackupResult:
    backup = Backup(
        path=tmp_path / "backup_2024-01-15_143000",
        created=datetime(2024, 1, 15, 14, 30).astimezone(),
    )
    return BackupResult(backup=backup, files=("default.store",))


@pytest.fixture
def archiver(backup_result: BackupResult) -> AsyncMock:
    mock = AsyncMock(spec=BackupArchiver)
    mock.create_pre_migration_backup.return_value = backup_result
    return mock


@pytest.fixture
def engine() -> RecordingEngine:
    return RecordingEngine()


@pytest.fixture
def listener() -> ListenerLog:
    return ListenerLog()
