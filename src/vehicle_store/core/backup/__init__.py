"""Backup package for snapshotting the persistent store.

Public API:
    - BackupArchiver: create, list, prune, restore and verify backups
    - Backup: a complete timestamped backup directory
    - BackupResult: outcome of a backup request (may be a no-op)
"""

from vehicle_store.core.backup.archiver import BackupArchiver
from vehicle_store.core.backup.models import Backup, BackupResult

__all__ = ["Backup", "BackupArchiver", "BackupResult"]
