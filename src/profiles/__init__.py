"""Profile engine for EVE Settings Manager.

This module provides:
- InventoryScanner: Discover character and account settings files
- LinkStore / GroupStore: Persisted links and character groups
- AutoLinker: Link a character to the account written moments ago
- BatchApplier: Copy settings between characters and accounts
- LinkTransfer: Export and import link tables
- ProfileRepository: All of the above for an explicit Session
"""

from src.profiles.applier import BatchApplier
from src.profiles.autolink import AutoLinker, detect_account
from src.profiles.groups import GroupStore
from src.profiles.links import LinkStore
from src.profiles.models import (
    ALL_GROUPS,
    AccountFile,
    ApplyResult,
    AutoLinkResult,
    CharacterFile,
    Group,
    Inventory,
    Reason,
    Scope,
)
from src.profiles.repository import ProfileRepository, Session
from src.profiles.scanner import InventoryScanner
from src.profiles.transfer import LinkTransfer

__all__ = [
    "ALL_GROUPS",
    "AccountFile",
    "ApplyResult",
    "AutoLinkResult",
    "AutoLinker",
    "BatchApplier",
    "CharacterFile",
    "Group",
    "GroupStore",
    "Inventory",
    "InventoryScanner",
    "LinkStore",
    "LinkTransfer",
    "ProfileRepository",
    "Reason",
    "Scope",
    "Session",
    "detect_account",
]
