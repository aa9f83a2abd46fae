"""Command-line interface for vehicle-store."""

from vehicle_store.cli.container import ServiceContainer
from vehicle_store.cli.parser import CLIParser
from vehicle_store.cli.runner import CLIRunner

__all__ = ["CLIParser", "CLIRunner", "ServiceContainer"]
