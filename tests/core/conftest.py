"""Shared fixtures for core service tests."""

import pytest

from vehicle_store.core.protocols import MemoryKeyValueStore
from vehicle_store.core.version_state import VersionStateStore
from vehicle_store.domain.version import SchemaVersion


@pytest.fixture
def kv_store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def version_state(kv_store: MemoryKeyValueStore) -> VersionStateStore:
    """Version state declaring 2.0.0 over an in-memory store."""
    return VersionStateStore(kv_store, SchemaVersion(2, 0, 0))
