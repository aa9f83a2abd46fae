"""Tests for MigrationCoordinator."""

import asyncio
import logging
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from vehicle_store.constants import KEY_LAST_MIGRATION_DATE, KEY_SCHEMA_VERSION
from vehicle_store.core.backup import BackupArchiver, BackupResult
from vehicle_store.core.migration import (
    MigrationCoordinator,
    MigrationState,
    NullMigrationEngine,
)
from vehicle_store.core.protocols import (
    JsonKeyValueStore,
    MemoryKeyValueStore,
)
from vehicle_store.core.version_state import VersionStateStore
from vehicle_store.domain.version import SchemaVersion
from vehicle_store.exceptions import (
    BackupFailedError,
    DataCorruptionError,
    InsufficientStorageError,
    MigrationFailedError,
)

from .conftest import ListenerLog, RecordingEngine

S = MigrationState
FULL_RUN = [
    S.IDLE,
    S.CHECKING_VERSION,
    S.CREATING_BACKUP,
    S.MIGRATING,
    S.VERIFYING,
    S.COMPLETED,
]


def _coordinator(
    version_state: VersionStateStore,
    archiver,
    engine=None,
    listener=None,
) -> MigrationCoordinator:
    return MigrationCoordinator(
        version_state, archiver, engine=engine, listener=listener
    )


class TestNoMigrationNeeded:
    """First launch and up-to-date data."""

    @pytest.mark.asyncio
    async def test_fresh_install(
        self,
        kv_store: MemoryKeyValueStore,
        version_state: VersionStateStore,
        archiver: AsyncMock,
        engine: RecordingEngine,
    ) -> None:
        coordinator = _coordinator(version_state, archiver, engine)

        state = await coordinator.perform_migration_if_needed()

        assert state is S.COMPLETED
        assert coordinator.history == [
            S.IDLE,
            S.CHECKING_VERSION,
            S.COMPLETED,
        ]
        assert coordinator.progress == 1.0
        assert coordinator.error is None
        assert version_state.stored_version() == (
            version_state.current_declared_version()
        )
        assert kv_store.get(KEY_LAST_MIGRATION_DATE) is None
        archiver.create_pre_migration_backup.assert_not_awaited()
        assert engine.applied == 0

    @pytest.mark.asyncio
    async def test_up_to_date(
        self,
        kv_store: MemoryKeyValueStore,
        version_state: VersionStateStore,
        archiver: AsyncMock,
        engine: RecordingEngine,
    ) -> None:
        kv_store.set(KEY_SCHEMA_VERSION, "2.0.0")
        coordinator = _coordinator(version_state, archiver, engine)

        state = await coordinator.perform_migration_if_needed()

        assert state is S.COMPLETED
        assert coordinator.history == [
            S.IDLE,
            S.CHECKING_VERSION,
            S.COMPLETED,
        ]
        assert coordinator.progress == 1.0
        assert archiver.create_pre_migration_backup.await_count == 0
        assert engine.applied == 0


class TestMigration:
    """Stored version differs from the declared one."""

    @pytest.fixture(autouse=True)
    def outdated(self, kv_store: MemoryKeyValueStore) -> None:
        kv_store.set(KEY_SCHEMA_VERSION, "1.0.0")

    @pytest.mark.asyncio
    async def test_successful_run(
        self,
        kv_store: MemoryKeyValueStore,
        version_state: VersionStateStore,
        archiver: AsyncMock,
        engine: RecordingEngine,
        listener: ListenerLog,
    ) -> None:
        coordinator = _coordinator(version_state, archiver, engine, listener)

        state = await coordinator.perform_migration_if_needed()

        assert state is S.COMPLETED
        assert coordinator.history == FULL_RUN
        archiver.create_pre_migration_backup.assert_awaited_once()
        assert engine.applied == 1
        assert engine.verified_calls == 1
        assert kv_store.get(KEY_SCHEMA_VERSION) == "2.0.0"
        assert version_state.last_migration_date() is not None

    @pytest.mark.asyncio
    async def test_progress_checkpoints_are_monotonic(
        self,
        version_state: VersionStateStore,
        archiver: AsyncMock,
        listener: ListenerLog,
    ) -> None:
        coordinator = _coordinator(version_state, archiver, None, listener)

        await coordinator.perform_migration_if_needed()

        assert listener.progress == [0.1, 0.2, 0.4, 0.6, 0.8, 1.0]
        assert listener.progress == sorted(listener.progress)
        assert listener.states[-1] is S.COMPLETED

    @pytest.mark.asyncio
    async def test_noop_backup_still_migrates(
        self,
        version_state: VersionStateStore,
        archiver: AsyncMock,
        engine: RecordingEngine,
    ) -> None:
        archiver.create_pre_migration_backup.return_value = BackupResult(
            backup=None
        )
        coordinator = _coordinator(version_state, archiver, engine)

        assert await coordinator.perform_migration_if_needed() is S.COMPLETED
        assert engine.applied == 1

    @pytest.mark.asyncio
    async def test_invalid_stored_version_migrates(
        self,
        kv_store: MemoryKeyValueStore,
        version_state: VersionStateStore,
        archiver: AsyncMock,
    ) -> None:
        kv_store.set(KEY_SCHEMA_VERSION, "not-a-version")
        coordinator = _coordinator(version_state, archiver)

        assert await coordinator.perform_migration_if_needed() is S.COMPLETED
        archiver.create_pre_migration_backup.assert_awaited_once()
        assert kv_store.get(KEY_SCHEMA_VERSION) == "2.0.0"

    @pytest.mark.asyncio
    async def test_default_engine(
        self, version_state: VersionStateStore, archiver: AsyncMock
    ) -> None:
        coordinator = _coordinator(version_state, archiver)

        assert isinstance(coordinator.engine, NullMigrationEngine)
        assert await coordinator.perform_migration_if_needed() is S.COMPLETED


class TestFailures:
    """Backup and engine failures end in FAILED."""

    @pytest.fixture(autouse=True)
    def outdated(self, kv_store: MemoryKeyValueStore) -> None:
        kv_store.set(KEY_SCHEMA_VERSION, "1.0.0")

    @pytest.mark.asyncio
    async def test_insufficient_storage_then_retry(
        self,
        kv_store: MemoryKeyValueStore,
        version_state: VersionStateStore,
        archiver: AsyncMock,
        engine: RecordingEngine,
        backup_result: BackupResult,
        listener: ListenerLog,
    ) -> None:
        storage_error = InsufficientStorageError()
        archiver.create_pre_migration_backup.side_effect = [
            storage_error,
            backup_result,
        ]
        coordinator = _coordinator(version_state, archiver, engine, listener)

        state = await coordinator.perform_migration_if_needed()

        assert state is S.FAILED
        assert coordinator.error is storage_error
        assert coordinator.history == [
            S.IDLE,
            S.CHECKING_VERSION,
            S.CREATING_BACKUP,
            S.FAILED,
        ]
        assert engine.applied == 0
        assert kv_store.get(KEY_SCHEMA_VERSION) == "1.0.0"

        listener.events.clear()
        state = await coordinator.retry_migration()

        assert state is S.COMPLETED
        assert listener.events[0] == (S.IDLE, 0.0, None)
        assert coordinator.history == FULL_RUN
        assert coordinator.error is None
        assert archiver.create_pre_migration_backup.await_count == 2
        assert engine.applied == 1

    @pytest.mark.asyncio
    async def test_failing_retry_then_success(
        self,
        version_state: VersionStateStore,
        archiver: AsyncMock,
        backup_result: BackupResult,
    ) -> None:
        archiver.create_pre_migration_backup.side_effect = [
            InsufficientStorageError(),
            OSError("still full"),
            backup_result,
        ]
        coordinator = _coordinator(version_state, archiver)

        assert await coordinator.perform_migration_if_needed() is S.FAILED
        assert await coordinator.retry_migration() is S.FAILED
        assert isinstance(coordinator.error, BackupFailedError)
        assert await coordinator.retry_migration() is S.COMPLETED

    @pytest.mark.asyncio
    async def test_plain_backup_error_is_wrapped(
        self,
        version_state: VersionStateStore,
        archiver: AsyncMock,
        engine: RecordingEngine,
    ) -> None:
        cause = PermissionError("read-only volume")
        archiver.create_pre_migration_backup.side_effect = cause
        coordinator = _coordinator(version_state, archiver, engine)

        await coordinator.perform_migration_if_needed()

        assert coordinator.state is S.FAILED
        assert isinstance(coordinator.error, BackupFailedError)
        assert coordinator.error.underlying is cause
        assert engine.applied == 0
        assert S.MIGRATING not in coordinator.history

    @pytest.mark.asyncio
    async def test_engine_error_is_wrapped(
        self,
        kv_store: MemoryKeyValueStore,
        version_state: VersionStateStore,
        archiver: AsyncMock,
    ) -> None:
        engine = RecordingEngine(error=RuntimeError("column missing"))
        coordinator = _coordinator(version_state, archiver, engine)

        await coordinator.perform_migration_if_needed()

        assert coordinator.state is S.FAILED
        assert isinstance(coordinator.error, MigrationFailedError)
        assert "column missing" in coordinator.error.description
        assert coordinator.history[-2:] == [S.MIGRATING, S.FAILED]
        assert coordinator.progress == 0.6
        assert kv_store.get(KEY_SCHEMA_VERSION) == "1.0.0"

    @pytest.mark.asyncio
    async def test_verification_failure(
        self,
        kv_store: MemoryKeyValueStore,
        version_state: VersionStateStore,
        archiver: AsyncMock,
    ) -> None:
        engine = RecordingEngine(verified=False)
        coordinator = _coordinator(version_state, archiver, engine)

        await coordinator.perform_migration_if_needed()

        assert coordinator.state is S.FAILED
        assert isinstance(coordinator.error, DataCorruptionError)
        assert coordinator.history[-2:] == [S.VERIFYING, S.FAILED]
        assert kv_store.get(KEY_SCHEMA_VERSION) == "1.0.0"

    @pytest.mark.asyncio
    async def test_unreadable_record_is_not_first_launch(
        self,
        tmp_path: Path,
        archiver: AsyncMock,
        engine: RecordingEngine,
    ) -> None:
        state_file = tmp_path / "state.json"
        state_file.mkdir()
        version_state = VersionStateStore(
            JsonKeyValueStore(state_file), SchemaVersion(2, 0, 0)
        )
        coordinator = _coordinator(version_state, archiver, engine)

        state = await coordinator.perform_migration_if_needed()

        assert state is S.FAILED
        assert isinstance(coordinator.error, DataCorruptionError)
        assert coordinator.history == [
            S.IDLE,
            S.CHECKING_VERSION,
            S.FAILED,
        ]
        assert state_file.is_dir()
        archiver.create_pre_migration_backup.assert_not_awaited()
        assert engine.applied == 0

    @pytest.mark.asyncio
    async def test_retry_ignored_unless_failed(
        self,
        version_state: VersionStateStore,
        archiver: AsyncMock,
    ) -> None:
        coordinator = _coordinator(version_state, archiver)

        assert await coordinator.retry_migration() is S.IDLE
        archiver.create_pre_migration_backup.assert_not_awaited()

        await coordinator.perform_migration_if_needed()
        assert await coordinator.retry_migration() is S.COMPLETED
        archiver.create_pre_migration_backup.assert_awaited_once()


class TestRunControl:
    """Re-entrancy, repeated runs and listener robustness."""

    @pytest.mark.asyncio
    async def test_concurrent_call_is_ignored(
        self,
        kv_store: MemoryKeyValueStore,
        version_state: VersionStateStore,
        archiver: AsyncMock,
        backup_result: BackupResult,
    ) -> None:
        kv_store.set(KEY_SCHEMA_VERSION, "1.0.0")
        release = asyncio.Event()

        async def slow_backup() -> BackupResult:
            await release.wait()
            return backup_result

        archiver.create_pre_migration_backup.side_effect = slow_backup
        coordinator = _coordinator(version_state, archiver)

        first = asyncio.create_task(coordinator.perform_migration_if_needed())
        await asyncio.sleep(0)
        assert coordinator.is_running

        second = await coordinator.perform_migration_if_needed()
        assert second is S.CREATING_BACKUP

        release.set()
        assert await first is S.COMPLETED
        archiver.create_pre_migration_backup.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_terminal_state_starts_new_run(
        self,
        version_state: VersionStateStore,
        archiver: AsyncMock,
    ) -> None:
        coordinator = _coordinator(version_state, archiver)
        await coordinator.perform_migration_if_needed()

        state = await coordinator.perform_migration_if_needed()

        assert state is S.COMPLETED
        assert coordinator.history == [
            S.IDLE,
            S.CHECKING_VERSION,
            S.COMPLETED,
        ]

    @pytest.mark.asyncio
    async def test_listener_errors_do_not_break_run(
        self,
        version_state: VersionStateStore,
        archiver: AsyncMock,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        def broken_listener(state, progress, error) -> None:
            raise ValueError("ui gone")

        coordinator = _coordinator(
            version_state, archiver, listener=broken_listener
        )

        with caplog.at_level(logging.ERROR):
            state = await coordinator.perform_migration_if_needed()

        assert state is S.COMPLETED
        assert "listener raised" in caplog.text


class TestWithRealArchiver:
    """End to end over real directories."""

    @pytest.mark.asyncio
    async def test_backup_exists_before_engine_runs(
        self, tmp_path: Path
    ) -> None:
        data_dir = tmp_path / "data"
        data_dir.mkdir()
        (data_dir / "default.store").write_bytes(b"v1 data")
        backup_root = data_dir / "Backups"
        version_state = VersionStateStore(
            MemoryKeyValueStore({KEY_SCHEMA_VERSION: "0.9.0"})
        )
        archiver = BackupArchiver(
            data_dir, backup_root, version_state, min_free_bytes=0
        )

        class CheckingEngine:
            async def apply_migration(self) -> None:
                backups = list(backup_root.iterdir())
                assert len(backups) == 1
                assert (backups[0] / "default.store").read_bytes() == (
                    b"v1 data"
                )
                (data_dir / "default.store").write_bytes(b"v2 data")

        coordinator = MigrationCoordinator(
            version_state, archiver, engine=CheckingEngine()
        )

        assert await coordinator.perform_migration_if_needed() is S.COMPLETED
        assert version_state.needs_migration() is False
        assert version_state.last_backup_path() is not None
        assert version_state.last_backup_path().parent == backup_root
