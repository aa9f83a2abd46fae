"""Pytest configuration and fixtures for vehicle-store tests."""

import logging
import os
import tempfile

# Keep the file handler out of the real profile; must run before the
# first vehicle_store import initializes logging.
os.environ.setdefault(
    "VEHICLE_STORE_LOG_DIR",
    os.path.join(tempfile.gettempdir(), "vehicle-store-test-logs"),
)

import pytest  # noqa: E402


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Enable log propagation for all loggers during tests.

    This allows pytest's caplog fixture to capture logs from all loggers,
    even those created with propagate=False in production code.
    """
    original_propagation = {}
    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith("vehicle_store"):
            logger = logging.getLogger(name)
            original_propagation[name] = logger.propagate
            logger.propagate = True

    yield

    for name, propagate_value in original_propagation.items():
        logger = logging.getLogger(name)
        logger.propagate = propagate_value
