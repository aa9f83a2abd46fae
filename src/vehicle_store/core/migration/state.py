"""Migration state machine states."""

from enum import Enum
from typing import Final


class MigrationState(Enum):
    """Lifecycle of one migration run.

    COMPLETED and FAILED are terminal; FAILED can be left through
    ``MigrationCoordinator.retry_migration()``.
    """

    IDLE = "idle"
    CHECKING_VERSION = "checkingVersion"
    CREATING_BACKUP = "creatingBackup"
    MIGRATING = "migrating"
    VERIFYING = "verifying"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (MigrationState.COMPLETED, MigrationState.FAILED)

    @property
    def status_text(self) -> str:
        """Short user-facing description of the state."""
        return _STATUS_TEXT[self]


_STATUS_TEXT: Final[dict[MigrationState, str]] = {
    MigrationState.IDLE: "Preparing...",
    MigrationState.CHECKING_VERSION: "Checking data version...",
    MigrationState.CREATING_BACKUP: "Creating backup...",
    MigrationState.MIGRATING: "Updating data...",
    MigrationState.VERIFYING: "Verifying...",
    MigrationState.COMPLETED: "Complete!",
    MigrationState.FAILED: "Failed",
}

# Progress checkpoints reported on entering each step
PROGRESS_CHECKING: Final[float] = 0.1
PROGRESS_CREATING_BACKUP: Final[float] = 0.2
PROGRESS_BACKUP_DONE: Final[float] = 0.4
PROGRESS_MIGRATING: Final[float] = 0.6
PROGRESS_VERIFYING: Final[float] = 0.8
PROGRESS_COMPLETED: Final[float] = 1.0
