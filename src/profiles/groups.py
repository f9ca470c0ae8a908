"""Named character groups.

Groups live in one map per (server, profile) scope under
``groups.<server>.<profile>``. A group's template, when set, is always
one of its members. The ``all`` id is reserved for "no filter" and is
never stored.
"""

import logging
import time
from typing import Dict, Iterable, Optional

from src.config.store import SettingsStore
from src.profiles.models import ALL_GROUPS, DEFAULT_GROUP_NAME, Group, Scope
from src.utils.validators import validate_group_name

logger = logging.getLogger("eve_settings.groups")

GROUPS_NAMESPACE = "groups"


def is_real_group_id(group_id: Optional[str]) -> bool:
    """True if group_id can name a stored group."""
    return bool(group_id) and group_id != ALL_GROUPS


class GroupStore:
    """Persisted character groups, scoped by (server, profile)."""

    def __init__(self, store: SettingsStore):
        self._store = store

    def _load(self, scope: Scope) -> Dict[str, dict]:
        value = self._store.read(scope.key(GROUPS_NAMESPACE))
        if not isinstance(value, dict):
            return {}
        return {k: v for k, v in value.items() if is_real_group_id(k)}

    def _save(self, scope: Scope, raw: Dict[str, dict]) -> bool:
        try:
            self._store.save(scope.key(GROUPS_NAMESPACE), raw)
        except OSError as e:
            logger.error(f"Failed to save groups for {scope.server}/{scope.profile}: {e}")
            return False
        return True

    def all(self, scope: Scope) -> Dict[str, Group]:
        """All groups of a scope, keyed by id."""
        return {gid: Group.from_dict(gid, data) for gid, data in self._load(scope).items()}

    def get(self, scope: Scope, group_id: str) -> Optional[Group]:
        """A single group, or None."""
        if not is_real_group_id(group_id):
            return None
        raw = self._load(scope)
        if group_id not in raw:
            return None
        return Group.from_dict(group_id, raw[group_id])

    def _mutate(self, scope: Scope, group_id: str, change) -> bool:
        if not is_real_group_id(group_id):
            return False
        raw = self._load(scope)
        if group_id not in raw:
            return False
        group = Group.from_dict(group_id, raw[group_id])
        change(group)
        raw[group_id] = group.to_dict()
        return self._save(scope, raw)

    def create(self, scope: Scope, name: Optional[str] = None) -> Optional[Group]:
        """
        Create an empty group.

        Args:
            scope: Group scope
            name: Group name, "New Group" when blank

        Returns:
            The new group, or None if the name is invalid or the store
            could not be written
        """
        name = (name or "").strip() or DEFAULT_GROUP_NAME
        is_valid, error = validate_group_name(name)
        if not is_valid:
            logger.warning(f"Group not created: {error}")
            return None

        raw = self._load(scope)
        stamp = int(time.time() * 1000)
        group_id = f"g_{stamp}"
        while group_id in raw:
            stamp += 1
            group_id = f"g_{stamp}"

        group = Group(id=group_id, name=name)
        raw[group_id] = group.to_dict()
        if not self._save(scope, raw):
            return None
        logger.info(f"Created group {group_id} ({group.name})")
        return group

    def rename(self, scope: Scope, group_id: str, name: str) -> bool:
        """Rename a group; a blank name becomes "New Group"."""
        name = (name or "").strip() or DEFAULT_GROUP_NAME
        is_valid, error = validate_group_name(name)
        if not is_valid:
            logger.warning(f"Group {group_id} not renamed: {error}")
            return False

        def change(group: Group) -> None:
            group.name = name
        return self._mutate(scope, group_id, change)

    def delete(self, scope: Scope, group_id: str) -> bool:
        """
        Delete a group. Settings files are never touched.

        Returns:
            False for the reserved id, an unknown group or a failed write
        """
        if not is_real_group_id(group_id):
            return False
        raw = self._load(scope)
        if group_id not in raw:
            return False
        del raw[group_id]
        if not self._save(scope, raw):
            return False
        logger.info(f"Deleted group {group_id}")
        return True

    def add_member(self, scope: Scope, group_id: str, character: str) -> bool:
        """Add a character to a group (no-op if already a member)."""
        if not character:
            return False
        return self.add_members(scope, group_id, [character])

    def add_members(self, scope: Scope, group_id: str, characters: Iterable[str]) -> bool:
        """Add several characters to a group in one write."""
        characters = [c for c in characters if c]
        if not characters:
            return False

        def change(group: Group) -> None:
            for character in characters:
                if character not in group.members:
                    group.members.append(character)
        return self._mutate(scope, group_id, change)

    def remove_member(self, scope: Scope, group_id: str, character: str) -> bool:
        """Remove a character from a group, clearing it as template."""
        if not character:
            return False

        def change(group: Group) -> None:
            group.members = [m for m in group.members if m != character]
            if group.template == character:
                group.template = ""
        return self._mutate(scope, group_id, change)

    def set_template(self, scope: Scope, group_id: str, character: str) -> bool:
        """Make a character the group's template, adding it as a member."""
        if not character:
            return False

        def change(group: Group) -> None:
            if character not in group.members:
                group.members.append(character)
            group.template = character
        return self._mutate(scope, group_id, change)
