"""Input validators for EVE Settings Manager.

Provides validation functions for settings file ids, group names,
descriptions and profile directories.
"""

from pathlib import Path
from typing import Optional, Tuple, Union

from src.config.paths import (
    ACCOUNT_PREFIX,
    BACKUP_SUFFIXES,
    CHARACTER_PREFIX,
)


MAX_GROUP_NAME_LENGTH = 64
MAX_DESCRIPTION_LENGTH = 200


def is_character_id(value) -> bool:
    """True if value names a character settings file."""
    return isinstance(value, str) and value.startswith(CHARACTER_PREFIX)


def is_account_id(value) -> bool:
    """True if value names an account settings file."""
    return isinstance(value, str) and value.startswith(ACCOUNT_PREFIX)


def is_backup_stem(stem: str) -> bool:
    """
    Check whether a file stem marks a backup or duplicate copy.

    The client's own default file (``core_char__``) and copies made by
    file managers (``core_char_123 (1)``) are never real entities.
    """
    return stem.endswith(BACKUP_SUFFIXES)


def validate_group_name(name: Optional[str]) -> Tuple[bool, Optional[str]]:
    """
    Validate a group name.

    Args:
        name: Group name to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not name or not name.strip():
        return False, "Group name is required"

    if len(name.strip()) > MAX_GROUP_NAME_LENGTH:
        return False, f"Group name must be at most {MAX_GROUP_NAME_LENGTH} characters"

    return True, None


def validate_description(description: Optional[str]) -> Tuple[bool, Optional[str]]:
    """
    Validate a user-supplied description.

    Empty descriptions are valid; they clear the stored value.

    Args:
        description: Description text

    Returns:
        Tuple of (is_valid, error_message)
    """
    if description is None:
        return True, None

    if "\n" in description or "\r" in description:
        return False, "Description must be a single line"

    if len(description) > MAX_DESCRIPTION_LENGTH:
        return False, f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters"

    return True, None


def validate_profile_dir(path: Union[str, Path, None]) -> Tuple[bool, Optional[str]]:
    """
    Validate a profile directory path.

    Args:
        path: Directory to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not path:
        return False, "Profile folder is required"

    if isinstance(path, str):
        path = Path(path)

    if not path.exists():
        return False, f"Folder does not exist: {path}"
    if not path.is_dir():
        return False, f"Path is not a folder: {path}"

    return True, None
