"""BackupArchiver for snapshotting and restoring the persistent store.

This module provides the service for:
- Creating timestamped pre-migration backups of the store files
- Listing available backups, newest first
- Pruning old backups according to the retention policy
- Restoring store files from a backup (manual recovery only)

Every public operation runs under one asyncio lock, and the blocking
file work runs in the default executor, so two backup/restore calls never
touch the backup tree at the same time and the event loop stays free.
"""

import asyncio
import contextlib
from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path
from typing import TypeVar

from vehicle_store.constants import (
    BYTES_PER_MB,
    DEFAULT_MAX_BACKUP,
    DEFAULT_MIN_FREE_SPACE_MB,
)
from vehicle_store.core.backup.helpers import (
    backup_dir_name,
    calculate_sha256,
    is_store_file,
    parse_backup_name,
)
from vehicle_store.core.backup.models import Backup, BackupResult
from vehicle_store.core.protocols import FileSystem, LocalFileSystem
from vehicle_store.core.version_state import VersionStateStore
from vehicle_store.exceptions import (
    BackupFailedError,
    InsufficientStorageError,
    RestoreFailedError,
)
from vehicle_store.logger import get_logger
from vehicle_store.utils.datetime_utils import get_current_datetime_local

logger = get_logger(__name__)

T = TypeVar("T")


class BackupArchiver:
    """Creates, lists, prunes and restores store backups."""

    def __init__(
        self,
        data_dir: Path,
        backup_root: Path,
        version_state: VersionStateStore,
        *,
        filesystem: FileSystem | None = None,
        retention: int = DEFAULT_MAX_BACKUP,
        min_free_bytes: int = DEFAULT_MIN_FREE_SPACE_MB * BYTES_PER_MB,
        clock: Callable[[], datetime] = get_current_datetime_local,
    ) -> None:
        """Initialize backup archiver.

        Args:
            data_dir: Directory holding the persistent store files
            backup_root: Directory receiving ``backup_<timestamp>`` folders
            version_state: Where the latest backup path is recorded
            filesystem: File primitives (defaults to LocalFileSystem)
            retention: Number of most recent backups to keep; values
                below 1 are treated as 1 so a fresh backup is never pruned
            min_free_bytes: Free space required before copying
            clock: Source of "now" for backup names

        """
        self.data_dir = data_dir
        self.backup_root = backup_root
        self.version_state = version_state
        self.fs = filesystem or LocalFileSystem()
        self.retention = max(retention, 1)
        self.min_free_bytes = min_free_bytes
        self._clock = clock
        self._lock = asyncio.Lock()

    async def _serialized(self, func: Callable[[], T]) -> T:
        async with self._lock:
            loop = asyncio.get_running_loop()
            future = loop.run_in_executor(None, func)
            try:
                return await asyncio.shield(future)
            except asyncio.CancelledError:
                # Worker threads cannot be interrupted; hold the lock
                # until the file work has actually stopped.
                logger.warning(
                    "Backup operation cancelled, waiting for it to finish"
                )
                while not future.done():
                    with contextlib.suppress(asyncio.CancelledError):
                        await asyncio.wait({future})
                if not future.cancelled() and future.exception():
                    logger.error(
                        "Cancelled backup operation failed: %s",
                        future.exception(),
                    )
                raise

    async def create_pre_migration_backup(self) -> BackupResult:
        """Snapshot all store files into a new timestamped directory.

        Returns:
            BackupResult; ``is_noop`` when there was nothing to back up

        Raises:
            InsufficientStorageError: If the volume is known to be too full
            BackupFailedError: If any filesystem step fails; the partial
                backup directory is removed first

        """
        return await self._serialized(self._create_backup)

    async def restore_from_backup(self, backup: Backup | Path) -> list[str]:
        """Copy a backup's files over the live store files.

        Destructive and intended for user-triggered recovery only. Files
        are replaced one at a time; an interruption can leave a mix of
        restored and current files.

        Returns:
            Names of the restored files

        Raises:
            RestoreFailedError: If the backup is missing or a copy fails

        """
        path = backup.path if isinstance(backup, Backup) else backup
        return await self._serialized(lambda: self._restore(path))

    async def available_backups(self) -> list[Backup]:
        """List backups, most recent first; empty if none exist yet."""
        return await self._serialized(self._list_backups)

    async def prune(self, keep: int | None = None) -> list[Backup]:
        """Apply the retention policy.

        Args:
            keep: Backups to keep (defaults to the configured retention)

        Returns:
            Backups that were deleted

        """
        count = self.retention if keep is None else max(keep, 0)
        return await self._serialized(lambda: self._prune(count))

    async def find_backup(self, name: str) -> Backup | None:
        """Look up a backup by directory name."""
        backups = await self.available_backups()
        return next((b for b in backups if b.name == name), None)

    async def verify_backup(
        self, backup: Backup, against: Path | None = None
    ) -> bool:
        """Compare a backup's files with a directory by SHA-256.

        Args:
            backup: Backup to check
            against: Directory to compare with (defaults to data_dir)

        Returns:
            True if every backup file exists in ``against`` with
            identical content

        """
        target = against or self.data_dir
        return await self._serialized(lambda: self._verify(backup, target))

    def _create_backup(self) -> BackupResult:
        try:
            self.fs.make_dirs(self.backup_root)
        except OSError as e:
            logger.exception(
                "Could not create backup root %s", self.backup_root
            )
            raise BackupFailedError(e) from e

        self._check_storage()

        if not self.fs.exists(self.data_dir):
            logger.info("No existing database to backup - fresh install")
            return BackupResult(backup=None)

        created = self._clock()
        backup_path = self._allocate_backup_path(created)
        copied: list[str] = []

        try:
            self.fs.make_dirs(backup_path)
            for item in self.fs.list_dir(self.data_dir):
                if not is_store_file(item.name) or not self.fs.is_file(item):
                    continue
                self.fs.copy_file(item, backup_path / item.name)
                copied.append(item.name)
                logger.debug("Backed up: %s", item.name)
        except OSError as e:
            logger.error("Failed to create backup: %s", e)
            self._discard(backup_path)
            raise BackupFailedError(e) from e

        if not copied:
            logger.info("No existing database to backup - fresh install")
            self._discard(backup_path)
            return BackupResult(backup=None)

        backup = Backup(path=backup_path, created=created)
        logger.info(
            "Created pre-migration backup at: %s (%d files)",
            backup_path,
            len(copied),
        )
        self.version_state.record_backup_path(backup_path)

        try:
            self._prune(self.retention)
        except OSError:
            logger.exception("Backup cleanup failed after %s", backup.name)

        return BackupResult(backup=backup, files=tuple(copied))

    def _check_storage(self) -> None:
        free = self.fs.free_space(self.backup_root)
        if free is None:
            logger.warning(
                "Free space unknown for %s, proceeding with backup",
                self.backup_root,
            )
            return
        if free <= self.min_free_bytes:
            logger.error(
                "Insufficient storage for backup: %d bytes free, need %d",
                free,
                self.min_free_bytes,
            )
            raise InsufficientStorageError

    def _allocate_backup_path(self, created: datetime) -> Path:
        """Pick an unused ``backup_<timestamp>`` path.

        Calls are serialized, so the only possible clash is a second
        backup within the same second; the name then moves forward one
        second at a time, which keeps names sortable by creation order.
        """
        moment = created
        candidate = self.backup_root / backup_dir_name(moment)
        while self.fs.exists(candidate):
            moment += timedelta(seconds=1)
            candidate = self.backup_root / backup_dir_name(moment)
        return candidate

    def _discard(self, backup_path: Path) -> None:
        if not self.fs.exists(backup_path):
            return
        try:
            self.fs.remove_tree(backup_path)
        except OSError:
            logger.exception(
                "Failed to remove incomplete backup %s", backup_path
            )

    def _list_backups(self) -> list[Backup]:
        if not self.fs.exists(self.backup_root):
            return []

        try:
            entries = self.fs.list_dir(self.backup_root)
        except OSError as e:
            logger.error("Failed to list backups: %s", e)
            return []

        backups = []
        for entry in entries:
            if self.fs.is_file(entry):
                continue
            backups.append(Backup(path=entry, created=self._created_at(entry)))

        return sorted(
            backups, key=lambda b: (b.created, b.name), reverse=True
        )

    def _created_at(self, path: Path) -> datetime:
        parsed = parse_backup_name(path.name)
        if parsed is not None:
            return parsed.astimezone()
        try:
            return datetime.fromtimestamp(
                self.fs.modified_time(path)
            ).astimezone()
        except OSError:
            local_tz = get_current_datetime_local().tzinfo
            return datetime.min.replace(tzinfo=local_tz)

    def _prune(self, keep: int) -> list[Backup]:
        backups = self._list_backups()
        removed = []
        for backup in backups[keep:]:
            try:
                self.fs.remove_tree(backup.path)
            except OSError as e:
                logger.warning(
                    "Failed to delete old backup %s: %s", backup.name, e
                )
                continue
            removed.append(backup)
            logger.debug("Deleted old backup: %s", backup.name)
        return removed

    def _restore(self, backup_path: Path) -> list[str]:
        if not self.fs.exists(backup_path):
            msg = f"Backup not found: {backup_path}"
            logger.error(msg)
            raise RestoreFailedError(FileNotFoundError(msg))

        restored: list[str] = []
        try:
            self.fs.make_dirs(self.data_dir)
            for item in self.fs.list_dir(backup_path):
                if not self.fs.is_file(item):
                    continue
                destination = self.data_dir / item.name
                if self.fs.exists(destination):
                    self.fs.remove_file(destination)
                self.fs.copy_file(item, destination)
                restored.append(item.name)
                logger.debug("Restored: %s", item.name)
        except OSError as e:
            logger.error("Failed to restore from backup: %s", e)
            raise RestoreFailedError(e) from e

        logger.info("Restored database from backup: %s", backup_path)
        return restored

    def _verify(self, backup: Backup, target: Path) -> bool:
        try:
            for item in self.fs.list_dir(backup.path):
                if not self.fs.is_file(item):
                    continue
                counterpart = target / item.name
                if not self.fs.exists(counterpart):
                    logger.warning("Missing from %s: %s", target, item.name)
                    return False
                if calculate_sha256(item) != calculate_sha256(counterpart):
                    logger.warning("Content differs: %s", item.name)
                    return False
        except OSError as e:
            logger.error("Failed to verify backup %s: %s", backup.name, e)
            return False
        return True
