"""Visible inventory for a group filter.

Combines the scanned inventory with links and groups into the lists a
front end shows: which characters and accounts are visible, how they
are labelled, and which characters each account serves.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Set

from src.profiles.links import reverse_links
from src.profiles.models import ALL_GROUPS, Group, Inventory

TEMPLATE_MARKER = "★ "
MEMBER_MARKER = "● "
TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class GroupTag:
    """A group a character belongs to."""
    group_id: str
    name: str
    is_template: bool


@dataclass
class ViewEntry:
    """One visible character or account."""
    file_id: str
    label: str


@dataclass
class InventoryView:
    """Visible characters/accounts for one group filter."""
    group_id: str
    characters: List[ViewEntry] = field(default_factory=list)
    accounts: List[ViewEntry] = field(default_factory=list)
    account_characters: Dict[str, List[str]] = field(default_factory=dict)


def build_character_groups(groups: Mapping[str, Group]) -> Dict[str, List[GroupTag]]:
    """Character id -> groups it belongs to."""
    tags: Dict[str, List[GroupTag]] = {}
    for group_id, group in groups.items():
        for member in group.members:
            if not member:
                continue
            tags.setdefault(member, []).append(
                GroupTag(group_id=group_id, name=group.name,
                         is_template=member == group.template)
            )
    return tags


def build_view(
    inventory: Inventory,
    links: Mapping[str, str],
    groups: Mapping[str, Group],
    group_id: str = ALL_GROUPS
) -> InventoryView:
    """
    Compute the visible inventory.

    With the ``all`` filter (or an unknown group) everything is shown
    and characters carry their group names. With a group filter only
    its members and the accounts they are linked to are shown.
    """
    group: Optional[Group] = groups.get(group_id) if group_id != ALL_GROUPS else None
    filtered = group is not None
    allowed_chars: Optional[Set[str]] = set(group.members) if filtered else None
    allowed_accounts: Optional[Set[str]] = None
    if filtered:
        allowed_accounts = {links[c] for c in allowed_chars if links.get(c)}

    characters = inventory.characters
    accounts = inventory.accounts
    reverse = reverse_links(links, characters)
    char_groups = build_character_groups(groups)

    view = InventoryView(group_id=group.id if filtered else ALL_GROUPS)

    for file_id, account in accounts.items():
        if allowed_accounts is not None and file_id not in allowed_accounts:
            continue
        linked = [
            c for c in reverse.get(file_id, [])
            if c in characters and (allowed_chars is None or c in allowed_chars)
        ]
        view.account_characters[file_id] = linked

        label = f"{account.id} - {account.modified:{TIME_FORMAT}}"
        if linked:
            names = ", ".join(characters[c].name or c for c in linked)
            label += f" - chars:{len(linked)} ({names})"
        if account.description:
            label += f" - [{account.description}]"
        view.accounts.append(ViewEntry(file_id=file_id, label=label))

    for file_id, character in characters.items():
        if allowed_chars is not None and file_id not in allowed_chars:
            continue

        tags = char_groups.get(file_id, [])
        if filtered:
            prefix = TEMPLATE_MARKER if file_id == group.template else MEMBER_MARKER
        else:
            prefix = MEMBER_MARKER if tags else ""

        label = f"{prefix}{character.id} - {character.name} - {character.modified:{TIME_FORMAT}}"
        linked_account = links.get(file_id)
        if linked_account:
            shown = accounts[linked_account].id if linked_account in accounts else linked_account
            label += f" - acct:{shown}"
        if not filtered and tags:
            label += f" - [{', '.join(t.name for t in tags)}]"
        if character.description:
            label += f" - [{character.description}]"
        view.characters.append(ViewEntry(file_id=file_id, label=label))

    return view
