"""Exception classes for vehicle-store operations.

The migration taxonomy mirrors what the app shows the user: every
``MigrationError`` carries a human-readable ``description`` and an
independent ``recovery_suggestion``.
"""


class VehicleStoreError(Exception):
    """Base exception for vehicle-store operations."""

    error_prefix: str = "Operation failed"

    def __init__(self, message: str, target: str | None = None) -> None:
        """Initialize error with message and optional target.

        Args:
            message: Error message describing the failure.
            target: Optional name of the target that failed.

        """
        super().__init__(message)
        self.message = message
        self.target = target

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.target:
            return f"{self.error_prefix} for '{self.target}': {self.message}"
        return f"{self.error_prefix}: {self.message}"


class MigrationError(VehicleStoreError):
    """Base class for schema migration, backup and restore failures."""

    error_prefix = "Migration error"
    recovery_suggestion: str = ""

    @property
    def description(self) -> str:
        """Human-readable description of the failure."""
        return self.message

    def __str__(self) -> str:
        """Return the description without a prefix."""
        return self.message


def _describe(error: BaseException) -> str:
    return str(error) or type(error).__name__


class BackupFailedError(MigrationError):
    """Raised when the pre-migration backup could not be created."""

    recovery_suggestion = (
        "Please ensure you have enough storage space and try again."
    )

    def __init__(self, underlying: BaseException) -> None:
        """Wrap the error that interrupted the backup."""
        super().__init__(
            "Failed to create backup before migration: "
            f"{_describe(underlying)}"
        )
        self.underlying = underlying


class MigrationFailedError(MigrationError):
    """Raised when the persistence engine fails to migrate the store."""

    recovery_suggestion = (
        "Your data has been preserved. "
        "Please contact support if this issue persists."
    )

    def __init__(self, underlying: BaseException) -> None:
        """Wrap the error raised by the persistence engine."""
        super().__init__(f"Data migration failed: {_describe(underlying)}")
        self.underlying = underlying


class RestoreFailedError(MigrationError):
    """Raised when restoring store files from a backup fails."""

    recovery_suggestion = (
        "Please try restarting the app. "
        "If the issue persists, reinstall the app."
    )

    def __init__(self, underlying: BaseException) -> None:
        """Wrap the error that interrupted the restore."""
        super().__init__(
            f"Failed to restore from backup: {_describe(underlying)}"
        )
        self.underlying = underlying


class InvalidSchemaVersionError(MigrationError):
    """Raised when a schema version string cannot be parsed."""

    recovery_suggestion = "Please update to the latest version of the app."

    def __init__(self, value: str) -> None:
        """Keep the offending value for diagnostics."""
        super().__init__(f"Invalid schema version: {value}")
        self.value = value


class DataCorruptionError(MigrationError):
    """Raised when persisted or exported data is structurally invalid."""

    recovery_suggestion = "Please restore from a backup or contact support."

    def __init__(self, details: str) -> None:
        """Keep the corruption details for diagnostics."""
        super().__init__(f"Data corruption detected: {details}")
        self.details = details


class InsufficientStorageError(MigrationError):
    """Raised when the volume lacks space for a migration backup."""

    recovery_suggestion = "Please free up storage space and restart the app."

    def __init__(self) -> None:
        """Build the fixed storage message."""
        super().__init__("Insufficient storage space for migration backup")


class ConfigurationError(VehicleStoreError):
    """Raised when settings or logging cannot be configured."""

    error_prefix = "Configuration error"
