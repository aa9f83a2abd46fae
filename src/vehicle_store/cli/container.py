"""Service wiring for CLI commands.

The CLI is the composition root: settings decide the directories and
limits, and every service is built once per container, on first use.
"""

from pathlib import Path

from vehicle_store.config import Settings, SettingsManager
from vehicle_store.constants import BYTES_PER_MB, STATE_FILE_NAME
from vehicle_store.core.backup import BackupArchiver
from vehicle_store.core.export import ExportSerializer
from vehicle_store.core.migration import (
    MigrationCoordinator,
    MigrationEngine,
    StateListener,
)
from vehicle_store.core.protocols import JsonKeyValueStore
from vehicle_store.core.version_state import VersionStateStore
from vehicle_store.logger import get_logger

logger = get_logger(__name__)


class ServiceContainer:
    """Lazily builds and caches the services a command needs."""

    def __init__(
        self,
        settings_manager: SettingsManager | None = None,
        engine: MigrationEngine | None = None,
    ) -> None:
        """Initialize container.

        Args:
            settings_manager: Settings source (default location if omitted)
            engine: Migration engine handed to the coordinator

        """
        self.settings_manager = settings_manager or SettingsManager()
        self.engine = engine
        self._settings: Settings | None = None
        self._version_state: VersionStateStore | None = None
        self._archiver: BackupArchiver | None = None
        self._serializer: ExportSerializer | None = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = self.settings_manager.load_settings()
        return self._settings

    @property
    def state_file(self) -> Path:
        return self.settings_manager.config_dir / STATE_FILE_NAME

    @property
    def version_state(self) -> VersionStateStore:
        if self._version_state is None:
            store = JsonKeyValueStore(self.state_file)
            self._version_state = VersionStateStore(store)
        return self._version_state

    @property
    def archiver(self) -> BackupArchiver:
        if self._archiver is None:
            directory = self.settings["directory"]
            self._archiver = BackupArchiver(
                directory["data"],
                directory["backup"],
                self.version_state,
                retention=self.settings["max_backup"],
                min_free_bytes=self.settings["min_free_space_mb"]
                * BYTES_PER_MB,
            )
            logger.debug(
                "Backup archiver: data=%s backups=%s",
                directory["data"],
                directory["backup"],
            )
        return self._archiver

    @property
    def serializer(self) -> ExportSerializer:
        if self._serializer is None:
            self._serializer = ExportSerializer(
                self.version_state, self.settings["directory"]["export"]
            )
        return self._serializer

    def create_coordinator(
        self, listener: StateListener | None = None
    ) -> MigrationCoordinator:
        return MigrationCoordinator(
            self.version_state,
            self.archiver,
            engine=self.engine,
            listener=listener,
        )
