"""Schema version bookkeeping.

Tracks which schema version the on-disk data was last written with, when
the last migration happened and where the most recent migration backup
lives. Losing this bookkeeping only costs a redundant migration check on
the next launch, so persistence failures are logged and absorbed here
instead of being raised to callers.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from vehicle_store.constants import (
    CURRENT_SCHEMA_VERSION,
    KEY_LAST_MIGRATION_DATE,
    KEY_MIGRATION_BACKUP_PATH,
    KEY_SCHEMA_VERSION,
)
from vehicle_store.core.protocols import KeyValueStore
from vehicle_store.domain.version import SchemaVersion
from vehicle_store.exceptions import InvalidSchemaVersionError
from vehicle_store.logger import get_logger
from vehicle_store.utils.datetime_utils import get_current_datetime_local_iso

logger = get_logger(__name__)


@dataclass(frozen=True)
class VersionRecord:
    """Point-in-time view of the persisted version entries."""

    stored_version: SchemaVersion | None
    last_migration_date: datetime | None
    last_backup_path: Path | None


class VersionStateStore:
    """Reads and writes the persisted schema version record."""

    def __init__(
        self,
        store: KeyValueStore,
        declared_version: SchemaVersion | None = None,
    ) -> None:
        """Initialize version state store.

        Args:
            store: Key/value layer the record is persisted in
            declared_version: Version this build expects (defaults to
                CURRENT_SCHEMA_VERSION)

        """
        self.store = store
        self._declared = declared_version or SchemaVersion.parse(
            CURRENT_SCHEMA_VERSION
        )

    def current_declared_version(self) -> SchemaVersion:
        return self._declared

    def stored_version_text(self) -> str | None:
        """Raw stored version string, or None when never recorded.

        Read failures are logged and reported as None.
        """
        return self._read(KEY_SCHEMA_VERSION)

    def load_stored_version_text(self) -> str | None:
        """Raw stored version string, letting read failures propagate.

        Used where an unreadable record must not be mistaken for a
        first launch.

        Raises:
            OSError: If the underlying store cannot be read

        """
        return self.store.get(KEY_SCHEMA_VERSION)

    def stored_version(self) -> SchemaVersion | None:
        """Parsed stored version.

        Raises:
            InvalidSchemaVersionError: If the stored string is malformed

        """
        text = self.stored_version_text()
        if text is None:
            return None
        return SchemaVersion.parse(text)

    def needs_migration(self) -> bool:
        """Whether stored data predates (or postdates) this build.

        First launch has nothing to migrate from. An unparsable stored
        value counts as different, so it still gets a backup first.
        """
        return self.differs_from_declared(self.stored_version_text())

    def differs_from_declared(self, text: str | None) -> bool:
        """Whether a stored version string calls for a migration."""
        if text is None:
            return False
        try:
            stored = SchemaVersion.parse(text)
        except InvalidSchemaVersionError:
            logger.warning(
                "Stored schema version %r is invalid, treating as outdated",
                text,
            )
            return True
        return stored != self._declared

    def record_current_version(self) -> None:
        """Persist the declared version (first launch)."""
        if self._write(KEY_SCHEMA_VERSION, str(self._declared)):
            logger.info("Schema version recorded: %s", self._declared)

    def record_migration_success(
        self, from_version: str, to_version: SchemaVersion
    ) -> None:
        """Persist the new version and stamp the migration date.

        Args:
            from_version: Previously stored version text (for the log)
            to_version: Version the data now conforms to

        """
        wrote_version = self._write(KEY_SCHEMA_VERSION, str(to_version))
        wrote_date = self._write(
            KEY_LAST_MIGRATION_DATE,
            get_current_datetime_local_iso(),
        )
        if wrote_version and wrote_date:
            logger.info(
                "Migration completed: %s -> %s", from_version, to_version
            )

    def record_backup_path(self, path: Path) -> None:
        self._write(KEY_MIGRATION_BACKUP_PATH, str(path))

    def last_backup_path(self) -> Path | None:
        value = self._read(KEY_MIGRATION_BACKUP_PATH)
        return Path(value) if value else None

    def last_migration_date(self) -> datetime | None:
        value = self._read(KEY_LAST_MIGRATION_DATE)
        if not value:
            return None
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            logger.warning("Ignoring invalid migration date %r", value)
            return None

    def snapshot(self) -> VersionRecord:
        """Return the whole record; an invalid version reads as None."""
        try:
            stored = self.stored_version()
        except InvalidSchemaVersionError:
            stored = None
        return VersionRecord(
            stored_version=stored,
            last_migration_date=self.last_migration_date(),
            last_backup_path=self.last_backup_path(),
        )

    def _read(self, key: str) -> str | None:
        try:
            return self.store.get(key)
        except OSError:
            logger.exception("Failed to read %s from version state", key)
            return None

    def _write(self, key: str, value: str) -> bool:
        try:
            self.store.set(key, value)
        except OSError:
            logger.exception("Failed to persist %s to version state", key)
            return False
        return True
