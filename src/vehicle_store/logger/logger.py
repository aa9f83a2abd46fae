"""Public logging API: setup, lookup, flush and test reset."""

import atexit
import contextlib
import logging
import time
from pathlib import Path

from vehicle_store.logger.config import load_log_settings
from vehicle_store.logger.handlers import ROOT_LOGGER_NAME, setup_root_logger
from vehicle_store.logger.state import get_state


def flush_all_handlers() -> None:
    """Wait for the queue to drain, then flush every handler.

    Records can be dequeued but not yet written, so tests that read the
    log file call this first.
    """
    state = get_state()
    if state.queue_listener is None or state.log_queue is None:
        return

    deadline = time.monotonic() + 5.0
    while not state.log_queue.empty() and time.monotonic() < deadline:
        time.sleep(0.01)
    time.sleep(0.1)

    for handler in state.queue_listener.handlers:
        with contextlib.suppress(OSError, ValueError):
            handler.flush()


def _cleanup_logging() -> None:
    state = get_state()
    if state.queue_listener is not None:
        flush_all_handlers()
        state.queue_listener.stop()
        state.queue_listener = None


atexit.register(_cleanup_logging)


def setup_logging(
    name: str = ROOT_LOGGER_NAME,
    console_level: str | None = None,
    file_level: str | None = None,
    log_file: Path | None = None,
    *,
    enable_file_logging: bool = True,
) -> logging.Logger:
    """Initialize the root logger once and return the named logger.

    Child loggers (``vehicle_store.core.backup`` etc.) propagate to the
    root, which owns the only handler.

    Raises:
        ConfigurationError: If file logging cannot be set up

    """
    state = get_state()
    with state.lock:
        if not state.root_initialized:
            cfg_console, cfg_file, cfg_path = load_log_settings()
            setup_root_logger(
                state,
                console_level or cfg_console,
                file_level or cfg_file,
                log_file or cfg_path,
                enable_file_logging=enable_file_logging,
            )

    return logging.getLogger(name)


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Get a logger, initializing the root logger on first use.

    Usage:
        >>> logger = get_logger(__name__)
        >>> logger.info("Backup created: %s", backup.name)

    """
    return setup_logging(name=name)


def clear_logger_state() -> None:
    """Stop the listener and drop vehicle_store loggers.

    Intended for tests only.
    """
    state = get_state()
    with state.lock:
        if state.queue_listener is not None:
            flush_all_handlers()
            state.queue_listener.stop()
            state.queue_listener = None

        state.log_queue = None
        state.root_initialized = False
        state.config_applied = False

        for logger_name in list(logging.Logger.manager.loggerDict.keys()):
            if logger_name.startswith(ROOT_LOGGER_NAME):
                log_instance = logging.getLogger(logger_name)
                for handler in log_instance.handlers[:]:
                    handler.close()
                    log_instance.removeHandler(handler)
                logging.Logger.manager.loggerDict.pop(logger_name, None)
