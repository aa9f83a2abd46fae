"""Configuration package: paths and INI settings."""

from vehicle_store.config.paths import Paths
from vehicle_store.config.settings import (
    DirectoryConfig,
    Settings,
    SettingsManager,
)

__all__ = ["DirectoryConfig", "Paths", "Settings", "SettingsManager"]
