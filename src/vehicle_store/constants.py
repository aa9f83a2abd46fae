"""Centralized constants module for vehicle-store.

Single source of truth for the constants shared between the schema
version bookkeeping, backup archiver, export serializer, configuration
and logging layers. Constants use typing.Final annotations.

Usage:
    from vehicle_store.constants import CURRENT_SCHEMA_VERSION
"""

from typing import Final

# =============================================================================
# Schema version constants
# =============================================================================

# Version of the persisted data format this build expects
CURRENT_SCHEMA_VERSION: Final[str] = "1.0.0"

# Persisted key/value entries for the version record
KEY_SCHEMA_VERSION: Final[str] = "com.vehicle.schemaVersion"
KEY_LAST_MIGRATION_DATE: Final[str] = "com.vehicle.lastMigrationDate"
KEY_MIGRATION_BACKUP_PATH: Final[str] = "com.vehicle.migrationBackupPath"

# =============================================================================
# Backup constants
# =============================================================================

BACKUP_DIR_NAME: Final[str] = "Backups"
BACKUP_NAME_PREFIX: Final[str] = "backup_"

# Timestamp format shared by backup directories and export files
TIMESTAMP_FORMAT: Final[str] = "%Y-%m-%d_%H%M%S"

# Retention policy: number of most recent backups kept
DEFAULT_MAX_BACKUP: Final[int] = 3

# Minimum free space required on the volume before copying store files
DEFAULT_MIN_FREE_SPACE_MB: Final[int] = 100
BYTES_PER_MB: Final[int] = 1024 * 1024

# Persistent store naming convention: main store and sidecar suffixes
STORE_NAME_MARKER: Final[str] = "default"
STORE_FILE_SUFFIXES: Final[tuple[str, ...]] = (
    ".store",
    ".sqlite",
    ".sqlite-wal",
    ".sqlite-shm",
)

# Chunk size used when hashing files for backup verification
HASH_CHUNK_SIZE: Final[int] = 64 * 1024

# =============================================================================
# Export constants
# =============================================================================

EXPORT_FILE_PREFIX: Final[str] = "VehicleExport_"
EXPORT_JSON_SUFFIX: Final[str] = ".json"
EXPORT_CSV_SUFFIX: Final[str] = ".csv"

# =============================================================================
# Configuration constants
# =============================================================================

CONFIG_VERSION: Final[str] = "1.0.0"
CONFIG_FILE_NAME: Final[str] = "settings.conf"
STATE_FILE_NAME: Final[str] = "state.json"
APP_DIR_NAME: Final[str] = "vehicle-store"

# Environment overrides
ENV_HOME: Final[str] = "VEHICLE_STORE_HOME"
ENV_LOG_DIR: Final[str] = "VEHICLE_STORE_LOG_DIR"

DEFAULT_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_CONSOLE_LOG_LEVEL: Final[str] = "INFO"

ISO_DATETIME_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

SECTION_DEFAULT: Final[str] = "DEFAULT"
SECTION_DIRECTORY: Final[str] = "directory"

KEY_CONFIG_VERSION: Final[str] = "config_version"
KEY_MAX_BACKUP: Final[str] = "max_backup"
KEY_MIN_FREE_SPACE_MB: Final[str] = "min_free_space_mb"
KEY_LOG_LEVEL: Final[str] = "log_level"
KEY_CONSOLE_LOG_LEVEL: Final[str] = "console_log_level"

DIRECTORY_KEYS: Final[tuple[str, ...]] = ("data", "backup", "export")

# =============================================================================
# Logging constants
# =============================================================================

LOG_FILE_NAME: Final[str] = "vehicle-store.log"
LOG_ROTATION_THRESHOLD_BYTES: Final[int] = 10 * 1024 * 1024
LOG_BACKUP_COUNT: Final[int] = 5

LOG_CONSOLE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
LOG_CONSOLE_DATE_FORMAT: Final[str] = "%H:%M:%S"
LOG_FILE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "%(funcName)s:%(lineno)d - %(message)s"
)
LOG_FILE_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

LOG_COLORS: Final[dict[str, str]] = {
    "DEBUG": "\033[36m",  # Cyan
    "INFO": "\033[32m",  # Green
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",  # Red
    "CRITICAL": "\033[35m",  # Magenta
    "RESET": "\033[0m",
}
