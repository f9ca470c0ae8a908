"""Inventory scanner for EVE client profile directories.

Lists ``core_char_*.dat`` and ``core_user_*.dat`` files in a profile
directory and turns them into CharacterFile / AccountFile records.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple, Union

from src.config.paths import (
    ACCOUNT_PREFIX,
    CHARACTER_PREFIX,
    FILE_PREFIX,
    SETTINGS_EXTENSION,
)
from src.config.servers import server_resolves_names
from src.lookup.resolver import NameCache, NameResolution, NameResolver
from src.profiles.annotations import DescriptionStore
from src.profiles.models import (
    AccountFile,
    CharacterFile,
    EntityType,
    Inventory,
)
from src.utils.validators import is_backup_stem

logger = logging.getLogger("eve_settings.scanner")


def parse_file_id(file_id: str) -> Optional[Tuple[EntityType, str]]:
    """
    Classify a settings file stem.

    Args:
        file_id: File name without extension

    Returns:
        (entity type, numeric id segment), or None if the stem is not a
        character or account file
    """
    if is_backup_stem(file_id):
        return None

    if file_id.startswith(CHARACTER_PREFIX):
        entity = EntityType.CHARACTER
    elif file_id.startswith(ACCOUNT_PREFIX):
        entity = EntityType.ACCOUNT
    else:
        return None

    numeric_id = file_id.rsplit("_", 1)[-1]
    if not numeric_id:
        return None
    return entity, numeric_id


def settings_stem(file_name: str) -> Optional[str]:
    """
    Extract the file id from a settings file name.

    Returns:
        The stem for ``core_*.dat`` names, None for anything else
    """
    if not file_name.startswith(FILE_PREFIX) or not file_name.endswith(SETTINGS_EXTENSION):
        return None
    return file_name.split(".")[0]


class InventoryScanner:
    """Scans a profile directory for character and account files."""

    def __init__(
        self,
        descriptions: DescriptionStore,
        names: NameCache,
        resolver: Optional[NameResolver] = None
    ):
        """
        Initialize the scanner.

        Args:
            descriptions: Store for user descriptions
            names: Cache of resolved character names
            resolver: Optional resolver for names missing from the cache
        """
        self._descriptions = descriptions
        self._names = names
        self._resolver = resolver
        self._last_scan: Optional[datetime] = None

    @property
    def last_scan(self) -> Optional[datetime]:
        """Timestamp of last scan."""
        return self._last_scan

    def scan(
        self,
        profile_dir: Union[str, Path],
        server: str,
        resolve_names: bool = True
    ) -> Inventory:
        """
        Build the inventory of a profile directory.

        Args:
            profile_dir: Directory holding the settings files
            server: Server the directory belongs to
            resolve_names: Look up missing character names remotely

        Returns:
            Inventory (empty if the directory is missing or unreadable)
        """
        profile_dir = Path(profile_dir)
        inventory = Inventory()

        if not profile_dir.is_dir():
            logger.debug(f"Profile folder does not exist: {profile_dir}")
            return inventory

        try:
            entries = sorted(profile_dir.iterdir(), key=lambda p: p.name)
        except PermissionError as e:
            logger.warning(f"Permission denied accessing {profile_dir}: {e}")
            return inventory
        except OSError as e:
            logger.error(f"Error scanning {profile_dir}: {e}")
            return inventory

        names_enabled = server_resolves_names(server)

        for entry in entries:
            stem = settings_stem(entry.name)
            if stem is None:
                continue
            parsed = parse_file_id(stem)
            if parsed is None:
                continue

            try:
                if not entry.is_file():
                    continue
                mtime_ms = entry.stat().st_mtime_ns / 1_000_000
            except OSError as e:
                logger.warning(f"Cannot stat {entry.name}: {e}")
                continue

            entity, numeric_id = parsed
            description = self._descriptions.get(server, stem)

            if entity == EntityType.CHARACTER:
                record = CharacterFile(
                    file_id=stem,
                    id=numeric_id,
                    mtime_ms=mtime_ms,
                    description=description,
                )
                if names_enabled:
                    cached = self._names.get(server, stem)
                    if cached:
                        record.name = cached
                inventory.characters[stem] = record
            else:
                inventory.accounts[stem] = AccountFile(
                    file_id=stem,
                    id=numeric_id,
                    mtime_ms=mtime_ms,
                    description=description,
                )

        if resolve_names and names_enabled and self._resolver is not None:
            pending = self.pending_names(inventory, server)
            if pending:
                self.apply_resolutions(inventory, self._resolver.resolve(server, pending))

        self._last_scan = datetime.now()
        logger.info(
            f"Scan complete: {len(inventory.characters)} characters, "
            f"{len(inventory.accounts)} accounts in {profile_dir}"
        )
        return inventory

    @staticmethod
    def pending_names(inventory: Inventory, server: str) -> List[Tuple[str, str]]:
        """
        Characters still lacking a display name.

        Returns:
            (file_id, character_id) pairs, empty for servers without
            name resolution
        """
        if not server_resolves_names(server):
            return []
        return [
            (file_id, record.id)
            for file_id, record in inventory.characters.items()
            if not record.has_name
        ]

    @staticmethod
    def apply_resolutions(inventory: Inventory, resolutions: List[NameResolution]) -> int:
        """
        Copy resolved names onto the inventory's character records.

        Returns:
            Number of names applied
        """
        applied = 0
        for resolution in resolutions:
            record = inventory.characters.get(resolution.file_id)
            if record is not None and resolution.resolved:
                record.name = resolution.name
                applied += 1
        return applied
