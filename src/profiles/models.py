"""Data model for EVE Settings Manager.

Character and account settings files, groups, the (server, profile)
scope that partitions persisted state, and the result values returned by
every engine operation.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple


ALL_GROUPS = "all"
DEFAULT_GROUP_NAME = "New Group"
UNKNOWN_NAME = "<unknown>"


class Reason(str, Enum):
    """Machine-readable failure reasons."""
    NO_FOLDER = "no-folder"
    NO_GROUP = "no-group"
    MISSING_GROUP = "missing-group"
    NO_TEMPLATE = "no-template"
    TEMPLATE_NOT_LINKED = "template-not-linked"
    TEMPLATE_MISSING_FILES = "template-missing-files"
    NO_SOURCE_CHAR = "no-source-char"
    NO_SOURCE_LINK = "no-source-link"
    SOURCE_MISSING_FILES = "source-missing-files"
    SOURCE_MISSING = "source-missing"
    READ_FAILED = "read-failed"
    WRITE_FAILED = "write-failed"
    NO_CHARACTER_SELECTED = "no-character-selected"
    NONE_FRESH = "none-fresh"
    MULTIPLE_FRESH = "multiple-fresh"
    NO_FILE = "no-file"
    BAD_JSON = "bad-json"
    NO_LINKS = "no-links"
    UNSUPPORTED_SCHEMA = "unsupported-schema"


class EntityType(Enum):
    """Kind of settings file."""
    CHARACTER = "char"
    ACCOUNT = "user"


@dataclass(frozen=True)
class Scope:
    """The (server, profile) pair that partitions links and groups."""
    server: str
    profile: str

    def key(self, namespace: str) -> Tuple[str, str, str]:
        """Store key segments for a scoped namespace: (namespace, server, profile)."""
        return (namespace, self.server, self.profile)


@dataclass
class AccountFile:
    """An account (``core_user_*``) settings file."""
    file_id: str
    id: str
    mtime_ms: float
    description: Optional[str] = None

    @property
    def modified(self) -> datetime:
        """Modification time as a local datetime."""
        return datetime.fromtimestamp(self.mtime_ms / 1000)


@dataclass
class CharacterFile(AccountFile):
    """A character (``core_char_*``) settings file."""
    name: str = UNKNOWN_NAME

    @property
    def has_name(self) -> bool:
        """True once the display name has been resolved."""
        return self.name != UNKNOWN_NAME


@dataclass
class Inventory:
    """Character and account files discovered in one profile directory."""
    characters: Dict[str, CharacterFile] = field(default_factory=dict)
    accounts: Dict[str, AccountFile] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        """True if no settings files were found."""
        return not self.characters and not self.accounts


@dataclass
class Group:
    """A named set of characters with an optional template member."""
    id: str
    name: str = DEFAULT_GROUP_NAME
    members: List[str] = field(default_factory=list)
    template: str = ""

    def to_dict(self) -> dict:
        """Convert group to its persisted form (id is the map key)."""
        return {
            "name": self.name,
            "members": list(self.members),
            "template": self.template,
        }

    @classmethod
    def from_dict(cls, group_id: str, data: dict) -> "Group":
        """Create a group from its persisted form, tolerating missing keys."""
        data = data if isinstance(data, dict) else {}
        name = str(data.get("name") or group_id).strip() or group_id
        members = []
        for member in data.get("members") or []:
            if member and isinstance(member, str) and member not in members:
                members.append(member)
        template = str(data.get("template") or data.get("templateChar") or "").strip()
        if template and template not in members:
            members.append(template)
        return cls(id=group_id, name=name, members=members, template=template)


@dataclass
class ApplyResult:
    """Outcome of a batch copy."""
    ok: bool
    applied: int = 0
    skipped: int = 0
    reason: Optional[Reason] = None

    @classmethod
    def failure(cls, reason: Reason, applied: int = 0, skipped: int = 0) -> "ApplyResult":
        """Build a failed result."""
        return cls(ok=False, applied=applied, skipped=skipped, reason=reason)


@dataclass
class FreshAccount:
    """An account file written within the auto-link window."""
    file_id: str
    id: str
    age_ms: float


@dataclass
class AutoLinkResult:
    """Outcome of the auto-link heuristic."""
    ok: bool
    reason: Optional[Reason] = None
    character: Optional[str] = None
    account: Optional[str] = None
    account_id: Optional[str] = None
    candidates: List[FreshAccount] = field(default_factory=list)


@dataclass
class ExportResult:
    """Outcome of exporting links to a transfer document."""
    ok: bool
    path: Optional[str] = None
    count: int = 0
    reason: Optional[Reason] = None


@dataclass
class ImportResult:
    """Outcome of importing links from a transfer document."""
    ok: bool
    imported: int = 0
    total: int = 0
    reason: Optional[Reason] = None
