"""Migrate command: run the schema migration state machine."""

from argparse import Namespace

from vehicle_store.core.migration import MigrationState
from vehicle_store.exceptions import MigrationError
from vehicle_store.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


class MigrateHandler(BaseCommandHandler):
    """Runs the coordinator and reports each state it passes through."""

    async def execute(self, args: Namespace) -> None:
        coordinator = self.container.create_coordinator(
            listener=self._report
        )
        state = await coordinator.perform_migration_if_needed()

        if args.retry and state is MigrationState.FAILED:
            logger.info("🔄 Retrying migration...")
            state = await coordinator.retry_migration()

        if state is MigrationState.FAILED and coordinator.error is not None:
            raise coordinator.error

        logger.info(
            "✅ Schema version %s",
            self.container.version_state.current_declared_version(),
        )

    @staticmethod
    def _report(
        state: MigrationState,
        progress: float,
        error: MigrationError | None,
    ) -> None:
        if state is MigrationState.FAILED:
            logger.error("❌ %s", error.description if error else "Failed")
            return
        logger.info("[%3d%%] %s", round(progress * 100), state.status_text)
