"""Value types describing backups on disk."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path


@dataclass(frozen=True)
class Backup:
    """A complete, timestamped snapshot directory of the store files."""

    path: Path
    created: datetime

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class BackupResult:
    """Outcome of a backup request.

    ``backup`` is None when the data directory held no store files (fresh
    install). That is a no-op, not a failure.
    """

    backup: Backup | None
    files: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_noop(self) -> bool:
        return self.backup is None
