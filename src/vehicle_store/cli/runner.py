"""CLI runner for vehicle-store.

Orchestrates the execution of CLI commands by routing parsed
arguments to the appropriate command handlers.
"""

import sys
from argparse import Namespace

from vehicle_store import __version__
from vehicle_store.cli.commands import (
    BackupHandler,
    BaseCommandHandler,
    ExportHandler,
    MigrateHandler,
    StatusHandler,
)
from vehicle_store.cli.container import ServiceContainer
from vehicle_store.cli.parser import CLIParser
from vehicle_store.exceptions import MigrationError, VehicleStoreError
from vehicle_store.logger import get_logger, update_logger_from_config

logger = get_logger(__name__)


class CLIRunner:
    """CLI command runner and orchestrator."""

    def __init__(
        self,
        argv: list[str] | None = None,
        container: ServiceContainer | None = None,
    ) -> None:
        """Initialize CLI runner with shared dependencies.

        Args:
            argv: Arguments to parse (defaults to sys.argv[1:])
            container: Service container (built from default settings
                when omitted)

        """
        self.argv = argv
        self.container = container or ServiceContainer()
        update_logger_from_config(self.container.settings)
        self.command_handlers: dict[str, BaseCommandHandler] = {
            "migrate": MigrateHandler(self.container),
            "status": StatusHandler(self.container),
            "backup": BackupHandler(self.container),
            "export": ExportHandler(self.container),
        }

    async def run(self) -> None:
        """Run the CLI application.

        Raises:
            SystemExit: With code 1 when no command is given or the
                command fails

        """
        parser = CLIParser(self.container.settings)
        args = parser.parse_args(self.argv)

        if getattr(args, "version", False):
            print(__version__)
            return

        if not args.command:
            print("❌ No command specified. Use --help.")
            sys.exit(1)

        try:
            await self._execute_command(args)
        except VehicleStoreError as e:
            logger.error("❌ %s", e)
            if isinstance(e, MigrationError) and e.recovery_suggestion:
                logger.info(e.recovery_suggestion)
            sys.exit(1)

    async def _execute_command(self, args: Namespace) -> None:
        handler = self.command_handlers[args.command]
        logger.debug("Running command: %s", args.command)
        await handler.execute(args)
