"""Persistence engine interface used by the migration coordinator.

The structural schema change itself belongs to whatever engine owns the
store. The coordinator only sequences it: backup first, then
``apply_migration()``, then an optional ``verify()``.
"""

from typing import Protocol, runtime_checkable

from vehicle_store.logger import get_logger

logger = get_logger(__name__)


@runtime_checkable
class MigrationEngine(Protocol):
    """Engine that transforms the on-disk store to the declared schema.

    Engines may also define ``async verify() -> bool``; when present the
    coordinator calls it during the verifying step and treats ``False``
    as corrupted data.
    """

    async def apply_migration(self) -> None:
        """Migrate the store in place.

        Raises:
            Exception: Any failure; the coordinator wraps it as
                MigrationFailedError

        """
        ...


class NullMigrationEngine:
    """Engine for stores that migrate themselves when opened.

    Nothing is transformed here; the coordinator still runs the backup
    and records the new version.
    """

    async def apply_migration(self) -> None:
        logger.debug("Schema migration delegated to store open")

    async def verify(self) -> bool:
        return True
