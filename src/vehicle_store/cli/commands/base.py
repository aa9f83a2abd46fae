"""Base command handler for vehicle-store CLI commands."""

from abc import ABC, abstractmethod
from argparse import Namespace

from vehicle_store.cli.container import ServiceContainer


class BaseCommandHandler(ABC):
    """Abstract base class for all command handlers.

    CLIRunner acts as the composition root and hands every handler the
    same ServiceContainer.
    """

    def __init__(self, container: ServiceContainer) -> None:
        self.container = container

    @abstractmethod
    async def execute(self, args: Namespace) -> None:
        """Execute the command with the given arguments.

        Raises:
            VehicleStoreError: When the command fails; the runner turns
                it into exit code 1

        """
