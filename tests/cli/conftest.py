"""Fixtures for CLI tests."""

from pathlib import Path

import pytest

from vehicle_store.cli import ServiceContainer
from vehicle_store.config import SettingsManager


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Relocate every vehicle-store directory under tmp_path."""
    monkeypatch.setenv("VEHICLE_STORE_HOME", str(tmp_path))
    return tmp_path.resolve()


@pytest.fixture
def container(home: Path) -> ServiceContainer:
    return ServiceContainer(SettingsManager())


@pytest.fixture
def store_files(home: Path) -> Path:
    data_dir = home / "data"
    data_dir.mkdir(parents=True)
    (data_dir / "default.store").write_bytes(b"store")
    (data_dir / "default.store-wal").write_bytes(b"wal")
    return data_dir
