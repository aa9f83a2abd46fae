"""Schema migration orchestration."""

from vehicle_store.core.migration.coordinator import (
    MigrationCoordinator,
    StateListener,
)
from vehicle_store.core.migration.engine import (
    MigrationEngine,
    NullMigrationEngine,
)
from vehicle_store.core.migration.state import MigrationState

__all__ = [
    "MigrationCoordinator",
    "MigrationEngine",
    "MigrationState",
    "NullMigrationEngine",
    "StateListener",
]
