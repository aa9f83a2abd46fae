"""Path resolution for vehicle-store.

All locations are derived from the user's home directory unless
``VEHICLE_STORE_HOME`` is set, in which case every directory lives under
that root (handy for portable installs and for tests).
"""

import os
from pathlib import Path

from vehicle_store.constants import (
    APP_DIR_NAME,
    BACKUP_DIR_NAME,
    CONFIG_FILE_NAME,
    ENV_HOME,
    STATE_FILE_NAME,
)


class Paths:
    """Application paths and directory structure."""

    @classmethod
    def _override_root(cls) -> Path | None:
        value = os.getenv(ENV_HOME)
        return cls.expand_path(value) if value else None

    @classmethod
    def config_dir(cls) -> Path:
        """Directory holding settings.conf, state.json and logs."""
        root = cls._override_root()
        if root is not None:
            return root / "config"
        return Path.home() / ".config" / APP_DIR_NAME

    @classmethod
    def data_dir(cls) -> Path:
        """Application data root where the persistent store lives."""
        root = cls._override_root()
        if root is not None:
            return root / "data"
        return Path.home() / ".local" / "share" / APP_DIR_NAME

    @classmethod
    def backup_dir(cls) -> Path:
        """Backup root: ``<data>/Backups``."""
        return cls.data_dir() / BACKUP_DIR_NAME

    @classmethod
    def export_dir(cls) -> Path:
        """User-visible export location."""
        root = cls._override_root()
        if root is not None:
            return root / "Documents"
        return Path.home() / "Documents"

    @classmethod
    def settings_file(cls) -> Path:
        return cls.config_dir() / CONFIG_FILE_NAME

    @classmethod
    def state_file(cls) -> Path:
        """Key/value file backing the schema version record."""
        return cls.config_dir() / STATE_FILE_NAME

    @classmethod
    def expand_path(cls, path_str: str) -> Path:
        """Expand ``~`` and resolve a user-supplied path.

        Example:
            >>> Paths.expand_path("~/Documents")
            Path('/home/user/Documents')
        """
        return Path(path_str).expanduser().resolve(strict=False)
