"""Backup command coordinator.

Thin coordinator that delegates to BackupArchiver and displays results.
"""

from argparse import Namespace

from vehicle_store.core.backup import Backup, BackupArchiver
from vehicle_store.exceptions import RestoreFailedError
from vehicle_store.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


class BackupHandler(BaseCommandHandler):
    """Thin coordinator for backup command."""

    async def execute(self, args: Namespace) -> None:
        """Execute the backup command."""
        archiver = self.container.archiver

        if args.list_backups:
            await self._list_backups(archiver)
        elif args.restore:
            await self._restore(archiver, args.restore)
        elif args.verify:
            await self._verify(archiver, args.verify)
        elif args.cleanup:
            await self._cleanup(archiver)
        else:
            await self._create_backup(archiver)

    async def _create_backup(self, archiver: BackupArchiver) -> None:
        logger.info("Creating backup of %s...", archiver.data_dir)
        result = await archiver.create_pre_migration_backup()
        if result.backup is None:
            logger.info("No store files found, nothing to back up")
            return
        logger.info(
            "✅ Backed up %d files to %s",
            len(result.files),
            result.backup.path,
        )

    async def _list_backups(self, archiver: BackupArchiver) -> None:
        backups = await archiver.available_backups()
        if not backups:
            logger.info("No backups found in %s", archiver.backup_root)
            return

        logger.info("Available backups (newest first):")
        for backup in backups:
            logger.info(
                "  %s  (%s)",
                backup.name,
                backup.created.strftime("%Y-%m-%d %H:%M:%S"),
            )

    async def _restore(self, archiver: BackupArchiver, name: str) -> None:
        backup = await self._require_backup(archiver, name)
        logger.info("🔄 Restoring store files from %s...", name)
        restored = await archiver.restore_from_backup(backup)
        logger.info("✅ Restored %d files", len(restored))

    async def _verify(self, archiver: BackupArchiver, name: str) -> None:
        backup = await self._require_backup(archiver, name)
        if await archiver.verify_backup(backup):
            logger.info("✅ Store files match %s", name)
        else:
            logger.warning("Store files differ from %s", name)

    async def _cleanup(self, archiver: BackupArchiver) -> None:
        removed = await archiver.prune()
        if not removed:
            logger.info("Nothing to clean up")
            return
        for backup in removed:
            logger.info("Deleted %s", backup.name)
        logger.info("✅ Removed %d old backups", len(removed))

    @staticmethod
    async def _require_backup(archiver: BackupArchiver, name: str) -> Backup:
        backup = await archiver.find_backup(name)
        if backup is None:
            msg = f"Backup not found: {name}"
            raise RestoreFailedError(FileNotFoundError(msg))
        return backup
