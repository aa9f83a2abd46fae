"""Core services: version bookkeeping, backups, export and migration."""
