"""Helper functions for backup naming, matching and verification."""

import hashlib
from datetime import datetime
from pathlib import Path

from vehicle_store.constants import (
    BACKUP_NAME_PREFIX,
    HASH_CHUNK_SIZE,
    STORE_FILE_SUFFIXES,
    STORE_NAME_MARKER,
)
from vehicle_store.utils.datetime_utils import (
    format_file_timestamp,
    parse_file_timestamp,
)


def is_store_file(file_name: str) -> bool:
    """Check whether a file belongs to the persistent store.

    Matches the main store (``default.store``, ``default.sqlite``) and
    the write-ahead/shared-memory sidecars next to it.
    """
    if file_name.startswith("."):
        return False
    return STORE_NAME_MARKER in file_name or file_name.endswith(
        STORE_FILE_SUFFIXES
    )


def backup_dir_name(moment: datetime) -> str:
    """Return ``backup_<YYYY-MM-DD_HHMMSS>`` for moment."""
    return f"{BACKUP_NAME_PREFIX}{format_file_timestamp(moment)}"


def parse_backup_name(name: str) -> datetime | None:
    """Extract the creation timestamp from a backup directory name.

    Returns:
        Naive local datetime, or None for names that are not backups

    """
    if not name.startswith(BACKUP_NAME_PREFIX):
        return None
    return parse_file_timestamp(name.removeprefix(BACKUP_NAME_PREFIX))


def calculate_sha256(file_path: Path) -> str:
    """Calculate SHA256 checksum of a file."""
    sha256_hash = hashlib.sha256()
    with file_path.open("rb") as f:
        for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
            sha256_hash.update(chunk)
    return sha256_hash.hexdigest()
