"""CLI argument parser for vehicle-store.

Handles parsing of command-line arguments and provides a clean
interface for defining CLI commands and their options.
"""

import argparse
from argparse import Namespace

from vehicle_store.config import Settings


class CLIParser:
    """Command-line argument parser for vehicle-store."""

    def __init__(self, settings: Settings) -> None:
        """Initialize the CLI parser with loaded settings.

        Args:
            settings: Global settings, used for help text defaults.

        """
        self.settings = settings

    def parse_args(self, argv: list[str] | None = None) -> Namespace:
        """Parse command-line arguments.

        Args:
            argv: Arguments to parse (defaults to sys.argv[1:]).

        Returns:
            Namespace: Parsed arguments namespace.

        """
        parser = self.build_parser()
        return parser.parse_args(argv)

    def build_parser(self) -> argparse.ArgumentParser:
        parser = self._create_main_parser()
        self._add_global_options(parser)
        self._add_subcommands(parser)
        return parser

    def _create_main_parser(self) -> argparse.ArgumentParser:
        return argparse.ArgumentParser(
            prog="vehicle-store",
            description="Vehicle data schema migration and backup tool",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Migrate the store if the schema version changed
  %(prog)s migrate
  %(prog)s migrate --retry

  # Show schema version and backup bookkeeping
  %(prog)s status

  # Backups
  %(prog)s backup                 # Create a backup now
  %(prog)s backup --list
  %(prog)s backup --restore backup_2024-01-15_143000
  %(prog)s backup --verify backup_2024-01-15_143000
  %(prog)s backup --cleanup

  # Re-export a JSON export as CSV
  %(prog)s export --source ~/Documents/VehicleExport_x.json --format csv
            """,
        )

    def _add_global_options(self, parser: argparse.ArgumentParser) -> None:
        # Long form only so -v stays free for subcommands
        parser.add_argument(
            "--version",
            action="store_true",
            help="Show vehicle-store version and exit",
        )

    def _add_subcommands(self, parser: argparse.ArgumentParser) -> None:
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands"
        )
        self._add_migrate_command(subparsers)
        self._add_status_command(subparsers)
        self._add_backup_command(subparsers)
        self._add_export_command(subparsers)

    def _add_migrate_command(self, subparsers) -> None:
        migrate_parser = subparsers.add_parser(
            "migrate",
            help="Back up and migrate the store when the schema changed",
        )
        migrate_parser.add_argument(
            "--retry",
            action="store_true",
            help="Run again from a clean state after a failed migration",
        )

    def _add_status_command(self, subparsers) -> None:
        subparsers.add_parser(
            "status", help="Show schema version and backup information"
        )

    def _add_backup_command(self, subparsers) -> None:
        backup_parser = subparsers.add_parser(
            "backup",
            help="Create, list, restore, verify or clean up backups",
            description=(
                "Without options a new backup of the store files is "
                "created. Only the "
                f"{self.settings['max_backup']} most recent backups "
                "are kept."
            ),
        )
        action = backup_parser.add_mutually_exclusive_group()
        action.add_argument(
            "--list",
            dest="list_backups",
            action="store_true",
            help="List available backups, newest first",
        )
        action.add_argument(
            "--restore",
            metavar="NAME",
            help="Overwrite the store files with the named backup",
        )
        action.add_argument(
            "--verify",
            metavar="NAME",
            help="Check that the store files match the named backup",
        )
        action.add_argument(
            "--cleanup",
            action="store_true",
            help="Delete backups beyond the retention limit",
        )

    def _add_export_command(self, subparsers) -> None:
        export_parser = subparsers.add_parser(
            "export",
            help="Validate an export file and write it as JSON or CSV",
        )
        export_parser.add_argument(
            "--source",
            required=True,
            metavar="FILE",
            help="Existing VehicleExport JSON file",
        )
        export_parser.add_argument(
            "--format",
            choices=("json", "csv"),
            default="json",
            help="Output format (default: json)",
        )
