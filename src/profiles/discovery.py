"""Client folder and profile discovery.

The client keeps one folder per installation and server under its
settings root, and each folder holds ``settings_*`` profile directories.
Last-used selections are remembered per server (and per profile for the
group filter).
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from src.config.paths import DEFAULT_PROFILE, PROFILE_PREFIX
from src.config.store import SettingsStore, StoreKey
from src.profiles.models import ALL_GROUPS, Scope

logger = logging.getLogger("eve_settings.discovery")


def _subdirectories(root: Path) -> List[Path]:
    try:
        return sorted((p for p in root.iterdir() if p.is_dir()), key=lambda p: p.name)
    except OSError as e:
        logger.warning(f"Cannot list {root}: {e}")
        return []


def find_eve_folders(root: Union[str, Path, None], server: str) -> List[Path]:
    """
    Client folders for a server under the settings root.

    Args:
        root: Client settings root (see get_default_eve_dir)
        server: Server name the folder name must contain

    Returns:
        Matching folders, sorted by name
    """
    if not root or not Path(root).is_dir():
        return []
    return [p for p in _subdirectories(Path(root)) if server in p.name]


def find_profiles(folder: Union[str, Path, None]) -> List[str]:
    """Names of the ``settings_*`` profile directories in a client folder."""
    if not folder or not Path(folder).is_dir():
        return []
    return [p.name for p in _subdirectories(Path(folder)) if p.name.startswith(PROFILE_PREFIX)]


def choose_profile(profiles: List[str], saved: Optional[str] = None) -> Optional[str]:
    """Preferred profile: the saved one, then the default, then the first."""
    if not profiles:
        return None
    if saved and saved in profiles:
        return saved
    if DEFAULT_PROFILE in profiles:
        return DEFAULT_PROFILE
    return profiles[0]


def profile_label(profile: str) -> str:
    """Display name of a profile directory (``settings_My_Main`` -> ``My Main``)."""
    name = profile[len(PROFILE_PREFIX):] if profile.startswith(PROFILE_PREFIX) else profile
    return name.replace("_", " ")


class SelectionStore:
    """Remembers the last folder, profile and group per server."""

    def __init__(self, store: SettingsStore):
        self._store = store

    def _save(self, key: StoreKey, value: str) -> bool:
        try:
            self._store.save(key, value)
        except OSError as e:
            logger.warning(f"Could not remember selection {key}: {e}")
            return False
        return True

    def get_folder(self, server: str) -> Optional[str]:
        value = self._store.read(("savedFolder", server))
        return value if isinstance(value, str) and value else None

    def set_folder(self, server: str, folder: Union[str, Path]) -> bool:
        return self._save(("savedFolder", server), str(folder))

    def get_profile(self, server: str) -> Optional[str]:
        value = self._store.read(("savedProfile", server))
        return value if isinstance(value, str) and value else None

    def set_profile(self, server: str, profile: str) -> bool:
        return self._save(("savedProfile", server), profile)

    def get_group(self, scope: Scope) -> str:
        value = self._store.read(scope.key("savedGroup"))
        return value if isinstance(value, str) and value else ALL_GROUPS

    def set_group(self, scope: Scope, group_id: Optional[str]) -> bool:
        return self._save(scope.key("savedGroup"), group_id or ALL_GROUPS)
