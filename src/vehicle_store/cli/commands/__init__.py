"""Command handlers for the vehicle-store CLI."""

from .backup import BackupHandler
from .base import BaseCommandHandler
from .export import ExportHandler
from .migrate import MigrateHandler
from .status import StatusHandler

__all__ = [
    "BackupHandler",
    "BaseCommandHandler",
    "ExportHandler",
    "MigrateHandler",
    "StatusHandler",
]
