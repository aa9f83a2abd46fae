"""Datetime utilities for consistent timestamp handling.

Backup directories and export files share one second-resolution,
lexically sortable timestamp format (``YYYY-MM-DD_HHMMSS``) in local
time.
"""

from datetime import datetime

from vehicle_store.constants import TIMESTAMP_FORMAT


def get_current_datetime_local() -> datetime:
    """Get current datetime in local timezone."""
    return datetime.now().astimezone()


def get_current_datetime_local_iso() -> str:
    """Get current datetime in local timezone as ISO 8601 string.

    Example: "2026-02-04T14:02:04.556063+03:00"
    """
    return get_current_datetime_local().isoformat()


def format_file_timestamp(moment: datetime) -> str:
    """Format a datetime for use in backup and export file names."""
    return moment.strftime(TIMESTAMP_FORMAT)


def parse_file_timestamp(value: str) -> datetime | None:
    """Parse a file-name timestamp back into a naive local datetime.

    Returns:
        The parsed datetime, or None if value does not match the format

    """
    try:
        return datetime.strptime(value, TIMESTAMP_FORMAT)  # noqa: DTZ007
    except ValueError:
        return None
