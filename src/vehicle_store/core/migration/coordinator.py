"""MigrationCoordinator: the detect, backup, migrate, verify sequence.

The coordinator is the only place migration errors become visible to the
caller, through the FAILED state. Its central guarantee is ordering: the
engine is never asked to migrate unless the backup step of the same run
returned without error.
"""

from collections.abc import Callable

from vehicle_store.core.backup import BackupArchiver
from vehicle_store.core.migration.engine import (
    MigrationEngine,
    NullMigrationEngine,
)
from vehicle_store.core.migration.state import (
    PROGRESS_BACKUP_DONE,
    PROGRESS_CHECKING,
    PROGRESS_COMPLETED,
    PROGRESS_CREATING_BACKUP,
    PROGRESS_MIGRATING,
    PROGRESS_VERIFYING,
    MigrationState,
)
from vehicle_store.core.version_state import VersionStateStore
from vehicle_store.exceptions import (
    BackupFailedError,
    DataCorruptionError,
    MigrationError,
    MigrationFailedError,
)
from vehicle_store.logger import get_logger

logger = get_logger(__name__)

StateListener = Callable[
    [MigrationState, float, MigrationError | None], None
]


class MigrationCoordinator:
    """Drives a single migration run and exposes its progress."""

    def __init__(
        self,
        version_state: VersionStateStore,
        archiver: BackupArchiver,
        engine: MigrationEngine | None = None,
        listener: StateListener | None = None,
    ) -> None:
        """Initialize migration coordinator.

        Args:
            version_state: Persisted schema version record
            archiver: Creates the pre-migration backup
            engine: Performs the structural migration (defaults to
                NullMigrationEngine)
            listener: Called with (state, progress, error) on every
                transition

        """
        self.version_state = version_state
        self.archiver = archiver
        self.engine = engine or NullMigrationEngine()
        self.listener = listener
        self._state = MigrationState.IDLE
        self._progress = 0.0
        self._error: MigrationError | None = None
        self._history: list[MigrationState] = [MigrationState.IDLE]
        self._running = False

    @property
    def state(self) -> MigrationState:
        return self._state

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def error(self) -> MigrationError | None:
        return self._error

    @property
    def history(self) -> list[MigrationState]:
        """States visited in the current run, starting with IDLE."""
        return list(self._history)

    @property
    def is_running(self) -> bool:
        return self._running

    async def perform_migration_if_needed(self) -> MigrationState:
        """Check the stored version and migrate when it differs.

        A call made while a run is in progress is ignored. A call made
        in a terminal state starts a fresh run.

        Returns:
            State at the end of the run

        """
        if self._running:
            logger.warning("Migration already in progress, ignoring call")
            return self._state

        self._running = True
        try:
            if self._state.is_terminal:
                self._reset()
            await self._run()
        finally:
            self._running = False
        return self._state

    async def retry_migration(self) -> MigrationState:
        """Reset a failed run to IDLE and run it again.

        Returns:
            State at the end of the new run, or the current state if the
            coordinator was not in FAILED

        """
        if self._running or self._state is not MigrationState.FAILED:
            logger.warning(
                "Retry ignored: migration state is %s", self._state.value
            )
            return self._state

        logger.info("Retrying migration")
        self._reset()
        return await self.perform_migration_if_needed()

    def _reset(self) -> None:
        self._state = MigrationState.IDLE
        self._progress = 0.0
        self._error = None
        self._history = [MigrationState.IDLE]
        self._notify()

    async def _run(self) -> None:
        self._transition(MigrationState.CHECKING_VERSION, PROGRESS_CHECKING)

        try:
            stored_text = self.version_state.load_stored_version_text()
        except OSError as e:
            logger.error("Cannot read schema version record: %s", e)
            self._fail(
                DataCorruptionError(f"schema version record unreadable: {e}")
            )
            return

        if stored_text is None:
            logger.info(
                "First launch detected - recording initial schema version"
            )
            self.version_state.record_current_version()
            self._transition(MigrationState.COMPLETED, PROGRESS_COMPLETED)
            return

        if not self.version_state.differs_from_declared(stored_text):
            logger.info("No migration needed - schema version is current")
            self._transition(MigrationState.COMPLETED, PROGRESS_COMPLETED)
            return

        target = self.version_state.current_declared_version()
        logger.info("Migration needed: %s -> %s", stored_text, target)

        self._transition(
            MigrationState.CREATING_BACKUP, PROGRESS_CREATING_BACKUP
        )
        try:
            result = await self.archiver.create_pre_migration_backup()
        except Exception as e:
            logger.error("Pre-migration backup failed: %s", e)
            error = (
                e if isinstance(e, MigrationError) else BackupFailedError(e)
            )
            self._fail(error)
            return

        if result.is_noop:
            logger.info("Nothing to back up, continuing with migration")
        self._set_progress(PROGRESS_BACKUP_DONE)

        self._transition(MigrationState.MIGRATING, PROGRESS_MIGRATING)
        try:
            await self.engine.apply_migration()
        except Exception as e:
            logger.error("Schema migration failed: %s", e)
            self._fail(self._as_migration_error(e))
            return

        self._transition(MigrationState.VERIFYING, PROGRESS_VERIFYING)
        try:
            await self._verify()
        except Exception as e:
            logger.error("Migration verification failed: %s", e)
            self._fail(self._as_migration_error(e))
            return

        self.version_state.record_migration_success(stored_text, target)
        self._transition(MigrationState.COMPLETED, PROGRESS_COMPLETED)
        logger.info("Migration completed successfully")

    async def _verify(self) -> None:
        verify = getattr(self.engine, "verify", None)
        if verify is None:
            return
        if not await verify():
            msg = "post-migration verification failed"
            raise DataCorruptionError(msg)

    @staticmethod
    def _as_migration_error(error: Exception) -> MigrationError:
        if isinstance(error, MigrationError):
            return error
        return MigrationFailedError(error)

    def _fail(self, error: MigrationError) -> None:
        self._error = error
        self._transition(MigrationState.FAILED, self._progress)

    def _transition(self, state: MigrationState, progress: float) -> None:
        logger.debug(
            "Migration state: %s -> %s", self._state.value, state.value
        )
        self._state = state
        self._history.append(state)
        self._progress = max(self._progress, progress)
        self._notify()

    def _set_progress(self, progress: float) -> None:
        self._progress = max(self._progress, progress)
        self._notify()

    def _notify(self) -> None:
        if self.listener is None:
            return
        try:
            self.listener(self._state, self._progress, self._error)
        except Exception:
            logger.exception("Migration state listener raised")
