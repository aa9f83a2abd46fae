"""Console formatters for the vehicle-store logger.

INFO records are printed as bare messages so command output stays
readable; everything else keeps timestamp, logger name and a coloured
level.
"""

import logging

from vehicle_store.constants import LOG_COLORS


class ColoredConsoleFormatter(logging.Formatter):
    """Formatter that wraps the level name in ANSI colour codes."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the record with a coloured level name.

        The record's levelname is restored afterwards so other handlers
        sharing the record see the plain value.
        """
        color = LOG_COLORS.get(record.levelname)
        if color is None:
            return super().format(record)

        original_levelname = record.levelname
        record.levelname = f"{color}{original_levelname}{LOG_COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            record.levelname = original_levelname


class HybridConsoleFormatter(logging.Formatter):
    """Message-only output for INFO, coloured structured output otherwise.

    Example Output:
        INFO:     "Backup created: backup_2026-01-04_101500"
        WARNING:  "10:15:00 - vehicle_store.core.backup - WARNING - ..."

    """

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
    ) -> None:
        """Initialize with the structured format used above INFO."""
        super().__init__(fmt, datefmt)
        self._colored_formatter = ColoredConsoleFormatter(fmt, datefmt)

    def format(self, record: logging.LogRecord) -> str:
        """Pick the simple or structured layout by record level."""
        if record.levelno == logging.INFO:
            return record.getMessage()
        return self._colored_formatter.format(record)
