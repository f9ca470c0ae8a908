"""Path constants and discovery for EVE Settings Manager.

Defines settings file naming conventions and application data directories.
"""

import os
import sys
from pathlib import Path
from typing import Optional


# Application name for config directories
APP_NAME = "EVESettingsManager"


# Settings file naming convention inside a profile directory
SETTINGS_EXTENSION = ".dat"
FILE_PREFIX = "core_"
CHARACTER_PREFIX = "core_char_"
ACCOUNT_PREFIX = "core_user_"

# Name stems ending with one of these are backups/duplicates
BACKUP_SUFFIXES = ("_", ")")

# Profile directories
PROFILE_PREFIX = "settings_"
DEFAULT_PROFILE = "settings_Default"

# Client settings root, relative to the user's home directory
EVE_SETTINGS_ROOTS = {
    "win32": Path("AppData") / "Local" / "CCP" / "EVE",
    "darwin": Path("Library") / "Application Support" / "CCP" / "EVE",
}


def get_app_data_dir() -> Path:
    """
    Get the application data directory.

    Returns:
        Path to app data directory (created if not exists)

    Platform-specific locations:
        - Windows: %APPDATA%/EVESettingsManager
        - Linux: ~/.config/EVESettingsManager
        - macOS: ~/Library/Application Support/EVESettingsManager
    """
    if sys.platform == "win32":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))

    app_dir = base / APP_NAME
    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


def get_settings_path() -> Path:
    """
    Get the path to the application settings JSON file.

    Returns:
        Path to settings.json
    """
    return get_app_data_dir() / "settings.json"


def get_store_path() -> Path:
    """
    Get the path to the persisted links/groups/names store.

    Returns:
        Path to profiles.json
    """
    return get_app_data_dir() / "profiles.json"


def get_log_dir() -> Path:
    """
    Get the directory for log files.

    Returns:
        Path to logs directory (created if not exists)
    """
    log_dir = get_app_data_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def get_log_file_path() -> Path:
    """
    Get the path to the main log file.

    Returns:
        Path to application log file
    """
    return get_log_dir() / "app.log"


def get_default_eve_dir(platform: Optional[str] = None) -> Optional[Path]:
    """
    Get the EVE client's settings root for the current user.

    Args:
        platform: Platform override (defaults to sys.platform)

    Returns:
        Path to the settings root, or None on platforms the client
        does not store settings under the home directory
    """
    relative = EVE_SETTINGS_ROOTS.get(platform or sys.platform)
    if relative is None:
        return None
    return Path.home() / relative


def get_profile_path(folder: Path, profile: str) -> Path:
    """Join a client folder and a profile directory name."""
    return Path(folder) / profile


def get_settings_file_path(profile_dir: Path, file_id: str) -> Path:
    """Path of the settings blob for a character or account file id."""
    return Path(profile_dir) / f"{file_id}{SETTINGS_EXTENSION}"
