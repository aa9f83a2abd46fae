"""Log level and log file resolution.

Bootstrap defaults come from constants and the environment; settings from
``settings.conf`` are applied later through ``update_logger_from_config``
so the logger never has to import the config package at import time.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from vehicle_store.constants import (
    APP_DIR_NAME,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    ENV_HOME,
    ENV_LOG_DIR,
    LOG_FILE_NAME,
)

if TYPE_CHECKING:
    from vehicle_store.config.settings import Settings
    from vehicle_store.logger.state import _LoggerState


def load_log_settings() -> tuple[str, str, Path]:
    """Return bootstrap console level, file level and log file path.

    ``VEHICLE_STORE_LOG_DIR`` wins over ``VEHICLE_STORE_HOME``, which wins
    over ``~/.config/vehicle-store/logs``. Tests set the former so they
    never write into a real profile.
    """
    env_log_dir = os.getenv(ENV_LOG_DIR)
    if env_log_dir:
        log_dir = Path(env_log_dir).expanduser()
    elif os.getenv(ENV_HOME):
        log_dir = Path(os.environ[ENV_HOME]).expanduser() / "config" / "logs"
    else:
        log_dir = Path.home() / ".config" / APP_DIR_NAME / "logs"

    log_file = log_dir / LOG_FILE_NAME
    return DEFAULT_CONSOLE_LOG_LEVEL, DEFAULT_LOG_LEVEL, log_file


def update_logger_from_config(
    state: "_LoggerState", settings: "Settings"
) -> None:
    """Apply console and file levels from loaded settings.

    Only handler levels change; handlers are never added or removed.
    """
    console_level = getattr(
        logging, settings["console_log_level"], logging.INFO
    )
    file_level = getattr(logging, settings["log_level"], logging.INFO)

    if state.queue_listener is not None:
        for handler in state.queue_listener.handlers:
            if isinstance(handler, RotatingFileHandler):
                handler.setLevel(file_level)
            elif isinstance(handler, logging.StreamHandler):
                handler.setLevel(console_level)

    state.config_applied = True
