"""Status command: show schema version and backup bookkeeping."""

from argparse import Namespace

from vehicle_store.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


class StatusHandler(BaseCommandHandler):
    """Prints the persisted version record and the backup count."""

    async def execute(self, args: Namespace) -> None:
        version_state = self.container.version_state
        stored = version_state.stored_version_text()
        last_migration = version_state.last_migration_date()
        last_backup = version_state.last_backup_path()
        backups = await self.container.archiver.available_backups()

        logger.info(
            "Declared schema version: %s",
            version_state.current_declared_version(),
        )
        logger.info("Stored schema version:   %s", stored or "(not recorded)")
        logger.info(
            "Migration needed:        %s",
            "yes" if version_state.needs_migration() else "no",
        )
        logger.info(
            "Last migration:          %s",
            last_migration.strftime("%Y-%m-%d %H:%M:%S")
            if last_migration
            else "never",
        )
        logger.info("Last backup:             %s", last_backup or "none")
        logger.info("Available backups:       %d", len(backups))
