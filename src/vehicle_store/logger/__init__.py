"""Logging utilities for vehicle-store.

Architecture:
    Application -> QueueHandler -> Queue -> QueueListener thread
                                                |
                                     Console + rotating file handlers

Rules for contributors:
    1. Always use ``logger = get_logger(__name__)``
    2. Never call ``logging.basicConfig()``
    3. Never attach handlers to child loggers
    4. Use %-formatting in log calls, never f-strings

Environment Variables:
    VEHICLE_STORE_LOG_DIR: Override the log directory (used by tests)
"""

from typing import TYPE_CHECKING

from vehicle_store.logger.config import (
    update_logger_from_config as _update_config,
)
from vehicle_store.logger.formatters import (
    ColoredConsoleFormatter,
    HybridConsoleFormatter,
)
from vehicle_store.logger.logger import (
    clear_logger_state,
    flush_all_handlers,
    get_logger,
    setup_logging,
)
from vehicle_store.logger.state import get_state

if TYPE_CHECKING:
    from vehicle_store.config.settings import Settings

__all__ = [
    "ColoredConsoleFormatter",
    "HybridConsoleFormatter",
    "clear_logger_state",
    "flush_all_handlers",
    "get_logger",
    "get_state",
    "setup_logging",
    "update_logger_from_config",
]


def update_logger_from_config(settings: "Settings") -> None:
    """Apply log levels from loaded settings to the running handlers."""
    _update_config(get_state(), settings)
