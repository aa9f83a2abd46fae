"""Collaborator interfaces consumed by core services.

Services depend on these protocols rather than on concrete storage, so
tests can hand in in-memory or failure-injecting doubles.
"""

from vehicle_store.core.protocols.filesystem import FileSystem, LocalFileSystem
from vehicle_store.core.protocols.storage import (
    JsonKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
)

__all__ = [
    "FileSystem",
    "JsonKeyValueStore",
    "KeyValueStore",
    "LocalFileSystem",
    "MemoryKeyValueStore",
]
