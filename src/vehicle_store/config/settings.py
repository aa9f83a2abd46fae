"""INI settings for vehicle-store.

settings.conf layout::

    [DEFAULT]
    config_version = 1.0.0
    max_backup = 3
    min_free_space_mb = 100
    log_level = INFO
    console_log_level = INFO

    [directory]
    data = ~/.local/share/vehicle-store
    backup = ~/.local/share/vehicle-store/Backups
    export = ~/Documents
"""

import configparser
from datetime import UTC, datetime
from pathlib import Path
from typing import TypedDict

from vehicle_store.config.paths import Paths
from vehicle_store.constants import (
    CONFIG_FILE_NAME,
    CONFIG_VERSION,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_BACKUP,
    DEFAULT_MIN_FREE_SPACE_MB,
    DIRECTORY_KEYS,
    ISO_DATETIME_FORMAT,
    KEY_CONFIG_VERSION,
    KEY_CONSOLE_LOG_LEVEL,
    KEY_LOG_LEVEL,
    KEY_MAX_BACKUP,
    KEY_MIN_FREE_SPACE_MB,
    SECTION_DEFAULT,
    SECTION_DIRECTORY,
)
from vehicle_store.logger import get_logger

logger = get_logger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class DirectoryConfig(TypedDict):
    """Resolved directory settings."""

    data: Path
    backup: Path
    export: Path


class Settings(TypedDict):
    """Resolved global settings."""

    config_version: str
    max_backup: int
    min_free_space_mb: int
    log_level: str
    console_log_level: str
    directory: DirectoryConfig


_SECTION_COMMENTS = {
    SECTION_DEFAULT: """# ========================================
# MAIN CONFIGURATION
# ========================================
# config_version: Version of configuration format (DO NOT EDIT)
# max_backup: Number of store backups kept by the retention policy
# min_free_space_mb: Free space required before a backup is attempted
# log_level: Detail level for log files (DEBUG, INFO, WARNING, ERROR)
# console_log_level: Console output detail level

""",
    SECTION_DIRECTORY: """
# ========================================
# DIRECTORY PATHS
# ========================================
# data: Where the persistent store files live
# backup: Root directory for timestamped store backups
# export: Where JSON/CSV exports are written

""",
}


class SettingsManager:
    """Loads and saves settings.conf."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize settings manager.

        Args:
            config_dir: Configuration directory (defaults to
                Paths.config_dir())

        """
        self.config_dir = config_dir or Paths.config_dir()
        self.settings_file = self.config_dir / CONFIG_FILE_NAME

    def get_default_settings(self) -> Settings:
        """Return default settings for the current environment."""
        data_dir = Paths.data_dir()
        return {
            "config_version": CONFIG_VERSION,
            "max_backup": DEFAULT_MAX_BACKUP,
            "min_free_space_mb": DEFAULT_MIN_FREE_SPACE_MB,
            "log_level": DEFAULT_LOG_LEVEL,
            "console_log_level": DEFAULT_CONSOLE_LOG_LEVEL,
            "directory": {
                "data": data_dir,
                "backup": Paths.backup_dir(),
                "export": Paths.export_dir(),
            },
        }

    def load_settings(self) -> Settings:
        """Load settings, writing a default file on first run.

        Unknown or malformed values fall back to their defaults with a
        warning rather than failing startup.
        """
        defaults = self.get_default_settings()
        if not self.settings_file.exists():
            self.save_settings(defaults)
            return defaults

        parser = configparser.ConfigParser(
            inline_comment_prefixes=("#", ";"),
            interpolation=None,
        )
        try:
            parser.read(self.settings_file, encoding="utf-8")
        except configparser.Error:
            logger.warning(
                "Could not parse %s, using defaults", self.settings_file
            )
            return defaults

        section = parser[SECTION_DEFAULT]
        settings: Settings = {
            "config_version": section.get(
                KEY_CONFIG_VERSION, defaults["config_version"]
            ),
            "max_backup": self._read_int(
                section, KEY_MAX_BACKUP, defaults["max_backup"]
            ),
            "min_free_space_mb": self._read_int(
                section, KEY_MIN_FREE_SPACE_MB, defaults["min_free_space_mb"]
            ),
            "log_level": self._read_level(
                section, KEY_LOG_LEVEL, defaults["log_level"]
            ),
            "console_log_level": self._read_level(
                section, KEY_CONSOLE_LOG_LEVEL, defaults["console_log_level"]
            ),
            "directory": defaults["directory"].copy(),
        }

        if parser.has_section(SECTION_DIRECTORY):
            for key in DIRECTORY_KEYS:
                value = parser.get(SECTION_DIRECTORY, key, fallback="")
                if value.strip():
                    settings["directory"][key] = Paths.expand_path(value)

        return settings

    def save_settings(self, settings: Settings) -> None:
        """Write settings.conf with section comments."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now(tz=UTC).strftime(ISO_DATETIME_FORMAT)

        with self.settings_file.open("w", encoding="utf-8") as f:
            f.write(
                "# Vehicle Store Configuration\n"
                f"# Last updated: {timestamp}\n"
                f"# Configuration version: {settings['config_version']}\n\n"
            )
            f.write(_SECTION_COMMENTS[SECTION_DEFAULT])
            f.write(f"[{SECTION_DEFAULT}]\n")
            f.write(f"{KEY_CONFIG_VERSION} = {settings['config_version']}\n")
            f.write(f"{KEY_MAX_BACKUP} = {settings['max_backup']}\n")
            f.write(
                f"{KEY_MIN_FREE_SPACE_MB} = {settings['min_free_space_mb']}\n"
            )
            f.write(f"{KEY_LOG_LEVEL} = {settings['log_level']}\n")
            f.write(
                f"{KEY_CONSOLE_LOG_LEVEL} = {settings['console_log_level']}\n"
            )
            f.write(_SECTION_COMMENTS[SECTION_DIRECTORY])
            f.write(f"[{SECTION_DIRECTORY}]\n")
            for key in DIRECTORY_KEYS:
                f.write(f"{key} = {settings['directory'][key]}\n")

        logger.debug("Saved settings to %s", self.settings_file)

    @staticmethod
    def _read_int(
        section: configparser.SectionProxy, key: str, default: int
    ) -> int:
        raw = section.get(key)
        if raw is None:
            return default
        try:
            value = int(raw)
        except ValueError:
            logger.warning(
                "Invalid %s value %r, using default %s", key, raw, default
            )
            return default
        if value < 0:
            logger.warning(
                "Negative %s value %s, using default %s", key, value, default
            )
            return default
        return value

    @staticmethod
    def _read_level(
        section: configparser.SectionProxy, key: str, default: str
    ) -> str:
        raw = section.get(key, default).strip().upper()
        if raw not in VALID_LOG_LEVELS:
            logger.warning("Invalid %s %r, using %s", key, raw, default)
            return default
        return raw
