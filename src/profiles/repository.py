"""Profile repository.

Owns the persisted stores and the last scanned inventory, and exposes
every engine operation for an explicit Session (server, folder,
profile). Callers keep one repository and pass the session in; nothing
is read from global state.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from src.config.settings import AppSettings
from src.config.store import SettingsStore
from src.lookup.client import CharacterNameClient
from src.lookup.resolver import NameCache, NameResolution, NameResolver
from src.profiles.annotations import DescriptionStore
from src.profiles.applier import BatchApplier
from src.profiles.autolink import AutoLinker
from src.profiles.discovery import SelectionStore
from src.profiles.groups import GroupStore
from src.profiles.links import LinkStore, dangling_links
from src.profiles.models import (
    ALL_GROUPS,
    ApplyResult,
    AutoLinkResult,
    ExportResult,
    Group,
    ImportResult,
    Inventory,
    Scope,
)
from src.profiles.scanner import InventoryScanner
from src.profiles.transfer import LinkTransfer
from src.profiles.view import InventoryView, build_view
from src.utils.threading import ThreadedTask

logger = logging.getLogger("eve_settings.repository")


@dataclass(frozen=True)
class Session:
    """The active server, client folder and profile."""
    server: str
    folder: Optional[Path]
    profile: str

    @property
    def scope(self) -> Scope:
        """Scope for links and groups."""
        return Scope(self.server, self.profile)

    @property
    def profile_dir(self) -> Optional[Path]:
        """Directory holding the profile's settings files."""
        if not self.folder:
            return None
        return Path(self.folder) / self.profile


class ProfileRepository:
    """Entry point for all profile operations."""

    def __init__(
        self,
        store: SettingsStore,
        settings: Optional[AppSettings] = None,
        name_client: Optional[CharacterNameClient] = None
    ):
        """
        Initialize the repository.

        Args:
            store: Persisted key/value store
            settings: Application settings (defaults when omitted)
            name_client: Client for remote name lookups; names are not
                resolved without one
        """
        self._settings = settings or AppSettings()
        self._store = store

        self.links = LinkStore(store)
        self.groups = GroupStore(store)
        self.descriptions = DescriptionStore(store)
        self.names = NameCache(store)
        self.selections = SelectionStore(store)
        self.transfer = LinkTransfer(self.links)

        self._resolver: Optional[NameResolver] = None
        if name_client is not None:
            self._resolver = NameResolver(
                name_client, self.names, self._settings.lookup_concurrency
            )

        self._scanner = InventoryScanner(self.descriptions, self.names, self._resolver)
        self._applier = BatchApplier(self.links, self.groups)
        self._auto_linker = AutoLinker(self.links, self._settings.auto_link_window_ms)
        self._inventory = Inventory()

    @property
    def inventory(self) -> Inventory:
        """Inventory from the last scan."""
        return self._inventory

    # ----- Inventory -----

    def refresh(self, session: Session, resolve_names: bool = True) -> Inventory:
        """Rescan the session's profile directory."""
        if session.profile_dir is None:
            self._inventory = Inventory()
        else:
            self._inventory = self._scanner.scan(
                session.profile_dir, session.server, resolve_names=resolve_names
            )
        return self._inventory

    def start_name_enrichment(self, session: Session) -> Optional[ThreadedTask]:
        """
        Resolve missing names in the background.

        The current inventory keeps placeholder names until the task
        completes; resolved names are then copied onto it.

        Returns:
            The running task, or None if there is nothing to resolve
        """
        pending = InventoryScanner.pending_names(self._inventory, session.server)
        if not pending or self._resolver is None:
            return None

        inventory = self._inventory

        def on_complete(outcome) -> None:
            if outcome.result:
                InventoryScanner.apply_resolutions(inventory, outcome.result)

        task: ThreadedTask[List[NameResolution]] = ThreadedTask(
            self._resolver.resolve,
            args=(session.server, pending),
            on_complete=on_complete,
        )
        task.start()
        return task

    def view(self, session: Session, group_id: Optional[str] = None) -> InventoryView:
        """Visible inventory for a group filter (saved filter when omitted)."""
        scope = session.scope
        if group_id is None:
            group_id = self.selections.get_group(scope)
        return build_view(
            self._inventory,
            self.links.get(scope),
            self.groups.all(scope),
            group_id,
        )

    def set_description(self, session: Session, file_id: str, text: Optional[str]) -> bool:
        """Attach (or clear) a description and refresh the inventory record."""
        if not self.descriptions.set(session.server, file_id, text):
            return False
        record = self._inventory.characters.get(file_id) or self._inventory.accounts.get(file_id)
        if record is not None:
            record.description = self.descriptions.get(session.server, file_id)
        return True

    # ----- Links -----

    def link(self, session: Session, character: str, account: str) -> bool:
        return self.links.link(session.scope, character, account)

    def unlink(self, session: Session, character: str) -> bool:
        return self.links.unlink(session.scope, character)

    def linked_account_for(self, session: Session, character: str) -> Optional[str]:
        return self.links.linked_account_for(session.scope, character)

    def linked_characters_for(self, session: Session, account: str) -> List[str]:
        return self.links.linked_characters_for(
            session.scope, account, self._inventory.characters
        )

    def auto_link(
        self,
        session: Session,
        character: Optional[str],
        now: Optional[float] = None
    ) -> AutoLinkResult:
        """Link a character to the one account written moments ago."""
        self.refresh(session, resolve_names=False)
        return self._auto_linker.run(
            session.scope,
            character,
            self._inventory.characters,
            self._inventory.accounts,
            now,
        )

    def dangling_links(self, session: Session) -> Dict[str, str]:
        """Links pointing at files missing from the current inventory."""
        return dangling_links(
            self.links.get(session.scope),
            self._inventory.characters,
            self._inventory.accounts,
        )

    # ----- Groups -----

    def create_group(self, session: Session, name: Optional[str] = None) -> Optional[Group]:
        return self.groups.create(session.scope, name)

    def rename_group(self, session: Session, group_id: str, name: str) -> bool:
        return self.groups.rename(session.scope, group_id, name)

    def delete_group(self, session: Session, group_id: str) -> bool:
        deleted = self.groups.delete(session.scope, group_id)
        if deleted and self.selections.get_group(session.scope) == group_id:
            self.selections.set_group(session.scope, ALL_GROUPS)
        return deleted

    def add_to_group(self, session: Session, group_id: str, character: str) -> bool:
        return self.groups.add_member(session.scope, group_id, character)

    def add_linked_to_group(self, session: Session, group_id: str, account: str) -> bool:
        """
        Add every character linked to an account to a group.

        Returns:
            False if the group is unknown, no character is linked to the
            account or the store could not be written
        """
        characters = self.linked_characters_for(session, account)
        if not characters:
            logger.info(f"No characters linked to {account}")
            return False
        if not self.groups.add_members(session.scope, group_id, characters):
            return False
        logger.info(f"Added {len(characters)} characters linked to {account} to {group_id}")
        return True

    def remove_from_group(self, session: Session, group_id: str, character: str) -> bool:
        return self.groups.remove_member(session.scope, group_id, character)

    def set_template(self, session: Session, group_id: str, character: str) -> bool:
        return self.groups.set_template(session.scope, group_id, character)

    # ----- Maintenance -----

    def clear_cache(self) -> bool:
        """
        Forget every link, group, cached name, description and selection.

        Settings files on disk are not touched.

        Returns:
            False if the store file could not be removed
        """
        try:
            self._store.clear()
        except OSError as e:
            logger.error(f"Failed to clear the store: {e}")
            return False
        self._inventory = Inventory()
        logger.info("Cleared all stored data")
        return True

    # ----- Batch apply -----

    def overwrite(self, session: Session, source: str, targets: Sequence[str]) -> ApplyResult:
        result = self._applier.overwrite(session.profile_dir, source, targets)
        if result.applied:
            self.refresh(session, resolve_names=False)
        return result

    def apply_group(self, session: Session, group_id: str) -> ApplyResult:
        result = self._applier.apply_group_from_template(
            session.profile_dir, session.scope, group_id
        )
        if result.applied:
            self.refresh(session, resolve_names=False)
        return result

    def apply_links(self, session: Session, source: Optional[str]) -> ApplyResult:
        result = self._applier.apply_links_from_source(
            session.profile_dir, session.scope, source
        )
        if result.applied:
            self.refresh(session, resolve_names=False)
        return result

    # ----- Transfer -----

    def export_links(
        self,
        session: Session,
        folder: Union[str, Path, None],
        when: Optional[datetime] = None
    ) -> ExportResult:
        return self.transfer.export_to_folder(session.scope, folder, when)

    def import_links(self, session: Session, path: Union[str, Path, None]) -> ImportResult:
        return self.transfer.import_file(session.scope, path)
