"""User annotations for settings files.

Descriptions are free text the user attaches to a character or account
file, stored per server under ``descriptions.<server>.<fileId>``.
"""

import logging
from typing import Optional, Tuple

from src.config.store import SettingsStore
from src.utils.validators import validate_description

logger = logging.getLogger("eve_settings.annotations")


class DescriptionStore:
    """Persisted descriptions keyed by (server, file id)."""

    def __init__(self, store: SettingsStore):
        self._store = store

    @staticmethod
    def _key(server: str, file_id: str) -> Tuple[str, str, str]:
        return ("descriptions", server, file_id)

    def get(self, server: str, file_id: str) -> Optional[str]:
        """Description for a file, or None."""
        value = self._store.read(self._key(server, file_id))
        return value if isinstance(value, str) and value else None

    def set(self, server: str, file_id: str, description: Optional[str]) -> bool:
        """
        Store a description.

        An empty or blank description removes the stored value.

        Returns:
            False if the description is invalid or could not be saved
        """
        is_valid, error = validate_description(description)
        if not is_valid:
            logger.warning(f"Rejected description for {file_id}: {error}")
            return False

        text = (description or "").strip()
        if not text:
            return self.clear(server, file_id)

        try:
            self._store.save(self._key(server, file_id), text)
        except OSError as e:
            logger.error(f"Failed to save description for {file_id}: {e}")
            return False
        return True

    def clear(self, server: str, file_id: str) -> bool:
        """Remove a description. Returns False if the store could not be written."""
        try:
            self._store.delete(self._key(server, file_id))
        except OSError as e:
            logger.error(f"Failed to clear description for {file_id}: {e}")
            return False
        return True
