"""Character to account link table.

Each (server, profile) scope owns one map of character file id to
account file id, persisted under ``links.<server>.<profile>``. Every
mutation is a read-modify-write of the whole map.
"""

import logging
from typing import Dict, List, Mapping, Optional

from src.config.store import SettingsStore
from src.profiles.models import CharacterFile, Scope

logger = logging.getLogger("eve_settings.links")

LINKS_NAMESPACE = "links"


class LinkStore:
    """Persisted character -> account links, scoped by (server, profile)."""

    def __init__(self, store: SettingsStore):
        self._store = store

    def get(self, scope: Scope) -> Dict[str, str]:
        """
        Load the link map for a scope.

        Returns:
            Character id -> account id (empty if nothing is stored)
        """
        value = self._store.read(scope.key(LINKS_NAMESPACE))
        if not isinstance(value, dict):
            return {}
        return {
            k: v for k, v in value.items()
            if isinstance(k, str) and isinstance(v, str)
        }

    def set(self, scope: Scope, links: Mapping[str, str]) -> bool:
        """
        Replace the link map for a scope.

        Returns:
            False if the store could not be written
        """
        try:
            self._store.save(scope.key(LINKS_NAMESPACE), dict(links))
        except OSError as e:
            logger.error(f"Failed to save links for {scope.server}/{scope.profile}: {e}")
            return False
        return True

    def link(self, scope: Scope, character: str, account: str) -> bool:
        """
        Link a character to an account, replacing any previous link.

        Returns:
            False if either id is empty or the store could not be written
        """
        if not character or not account:
            return False
        links = self.get(scope)
        links[character] = account
        if not self.set(scope, links):
            return False
        logger.info(f"Linked {character} -> {account}")
        return True

    def unlink(self, scope: Scope, character: str) -> bool:
        """
        Remove a character's link.

        Returns:
            False if the character had no link or the store could not be written
        """
        if not character:
            return False
        links = self.get(scope)
        if not links.get(character):
            return False
        del links[character]
        if not self.set(scope, links):
            return False
        logger.info(f"Unlinked {character}")
        return True

    def linked_account_for(self, scope: Scope, character: str) -> Optional[str]:
        """Account linked to a character, or None."""
        if not character:
            return None
        return self.get(scope).get(character) or None

    def linked_characters_for(
        self,
        scope: Scope,
        account: str,
        characters: Optional[Mapping[str, CharacterFile]] = None
    ) -> List[str]:
        """
        Characters linked to an account, most recently modified first.

        Args:
            scope: Link scope
            account: Account file id
            characters: Inventory used for recency ordering; characters
                missing from it sort last

        Returns:
            Character ids
        """
        if not account:
            return []
        return linked_characters(self.get(scope), account, characters or {})


def linked_characters(
    links: Mapping[str, str],
    account: str,
    characters: Mapping[str, CharacterFile]
) -> List[str]:
    """Characters of a link map pointing at account, by descending mtime."""
    linked = [c for c, a in links.items() if a == account]
    # sorted() is stable, so equal mtimes keep link map order
    return sorted(
        linked,
        key=lambda c: -(characters[c].mtime_ms if c in characters else 0),
    )


def reverse_links(
    links: Mapping[str, str],
    characters: Mapping[str, CharacterFile]
) -> Dict[str, List[str]]:
    """Account id -> linked character ids, each list by descending mtime."""
    accounts = []
    for account in links.values():
        if account and account not in accounts:
            accounts.append(account)
    return {a: linked_characters(links, a, characters) for a in accounts}


def dangling_links(
    links: Mapping[str, str],
    characters: Mapping[str, object],
    accounts: Mapping[str, object]
) -> Dict[str, str]:
    """Links whose character or account is absent from the inventory."""
    return {
        c: a for c, a in links.items()
        if c not in characters or a not in accounts
    }
