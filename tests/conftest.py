"""Pytest configuration and shared fixtures for EVE Settings Manager tests."""

import os
import time
from pathlib import Path
from typing import Callable, Optional

import pytest

from src.config.store import SettingsStore
from src.profiles.models import Scope


# Test constants
TEST_SERVER = "tranquility"
TEST_PROFILE = "settings_Default"


@pytest.fixture
def store(tmp_path: Path) -> SettingsStore:
    """Provide an isolated settings store."""
    return SettingsStore(store_path=tmp_path / "profiles.json")


@pytest.fixture
def broken_store(tmp_path: Path) -> SettingsStore:
    """Provide a store whose file cannot be written (the path is a directory)."""
    path = tmp_path / "unwritable.json"
    path.mkdir()
    return SettingsStore(store_path=path)


@pytest.fixture
def scope() -> Scope:
    """Provide the default test scope."""
    return Scope(TEST_SERVER, TEST_PROFILE)


@pytest.fixture
def eve_folder(tmp_path: Path) -> Path:
    """Create a client settings folder."""
    folder = tmp_path / "c_eve_sharedcache_tq_tranquility"
    folder.mkdir()
    return folder


@pytest.fixture
def profile_dir(eve_folder: Path) -> Path:
    """Create the default profile directory."""
    profile = eve_folder / TEST_PROFILE
    profile.mkdir()
    return profile


@pytest.fixture
def make_settings_file() -> Callable[..., Path]:
    """Factory writing a settings blob with an optional mtime (ms since epoch)."""

    def _make(
        folder: Path,
        file_id: str,
        content: bytes = b"",
        mtime_ms: Optional[float] = None
    ) -> Path:
        path = folder / f"{file_id}.dat"
        path.write_bytes(content or f"settings of {file_id}".encode())
        if mtime_ms is not None:
            seconds = mtime_ms / 1000
            os.utime(path, (seconds, seconds))
        return path

    return _make


@pytest.fixture
def now_ms() -> float:
    """Current time in milliseconds."""
    return time.time() * 1000
