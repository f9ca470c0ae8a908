"""Link transfer documents.

Links are exported as a small JSON document so they can be backed up or
moved to another machine::

    {"schemaVersion": 1, "server": "...", "profile": "...",
     "exportedAt": "2024-01-15T10:30:00+00:00", "links": {...}}

Imported entries are validated one by one and merged over the current
links of the active scope.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from src.profiles.exceptions import TransferDocumentError
from src.profiles.links import LinkStore
from src.profiles.models import ExportResult, ImportResult, Reason, Scope
from src.utils.validators import is_account_id, is_character_id

logger = logging.getLogger("eve_settings.transfer")

SCHEMA_VERSION = 1


def encode_links(
    scope: Scope,
    links: Mapping[str, str],
    exported_at: Optional[datetime] = None
) -> dict:
    """Build the transfer document for a scope's links."""
    exported_at = exported_at or datetime.now(timezone.utc)
    return {
        "schemaVersion": SCHEMA_VERSION,
        "server": scope.server,
        "profile": scope.profile,
        "exportedAt": exported_at.isoformat(),
        "links": dict(links),
    }


def decode_links(text: str) -> Dict[str, str]:
    """
    Parse a transfer document and keep its valid link entries.

    Entries whose key is not a character id or whose value is not an
    account id are dropped.

    Args:
        text: Document text

    Returns:
        Cleaned character id -> account id map

    Raises:
        TransferDocumentError: If the document is unparsable, has an
            unsupported schema version, or has no links object
    """
    try:
        document = json.loads(text)
    except (ValueError, TypeError, RecursionError) as e:
        raise TransferDocumentError(Reason.BAD_JSON, e)

    if not isinstance(document, dict):
        raise TransferDocumentError(Reason.NO_LINKS)

    version = document.get("schemaVersion", document.get("schema", SCHEMA_VERSION))
    if isinstance(version, int) and not isinstance(version, bool) and version > SCHEMA_VERSION:
        raise TransferDocumentError(Reason.UNSUPPORTED_SCHEMA)

    incoming = document.get("links")
    if not isinstance(incoming, dict):
        raise TransferDocumentError(Reason.NO_LINKS)

    cleaned = {}
    for character, account in incoming.items():
        if is_character_id(character) and is_account_id(account):
            cleaned[character] = account
        else:
            logger.debug(f"Dropping invalid link entry {character!r} -> {account!r}")
    return cleaned


def export_file_name(scope: Scope, when: datetime) -> str:
    """File name for an export, e.g. ``eve-links_tranquility_settings_Default_20240115-103000.json``."""
    stamp = when.strftime("%Y%m%d-%H%M%S")
    return f"eve-links_{scope.server}_{scope.profile}_{stamp}.json"


class LinkTransfer:
    """Exports and imports the link table of a scope."""

    def __init__(self, links: LinkStore):
        self._links = links

    def export_text(self, scope: Scope, exported_at: Optional[datetime] = None) -> str:
        """Serialize the scope's links to document text."""
        document = encode_links(scope, self._links.get(scope), exported_at)
        return json.dumps(document, indent=2, ensure_ascii=False)

    def export_to_folder(
        self,
        scope: Scope,
        folder: Union[str, Path, None],
        when: Optional[datetime] = None
    ) -> ExportResult:
        """
        Write the scope's links to a new document in folder.

        Returns:
            ExportResult with the written path and entry count
        """
        if not folder or not Path(folder).is_dir():
            return ExportResult(ok=False, reason=Reason.NO_FOLDER)

        when = when or datetime.now().astimezone()
        links = self._links.get(scope)
        out_path = Path(folder) / export_file_name(scope, when)
        text = json.dumps(encode_links(scope, links, when), indent=2, ensure_ascii=False)

        try:
            out_path.write_text(text, encoding="utf-8")
        except OSError as e:
            logger.error(f"Could not write export {out_path}: {e}")
            return ExportResult(ok=False, reason=Reason.WRITE_FAILED)

        logger.info(f"Exported {len(links)} links to {out_path}")
        return ExportResult(ok=True, path=str(out_path), count=len(links))

    def import_text(self, scope: Scope, text: str) -> ImportResult:
        """
        Merge links from document text into the scope.

        Imported entries win over existing ones. Nothing is written if
        the document is rejected.
        """
        try:
            cleaned = decode_links(text)
        except TransferDocumentError as e:
            logger.warning(str(e))
            return ImportResult(ok=False, reason=e.reason)

        merged = self._links.get(scope)
        merged.update(cleaned)
        if not self._links.set(scope, merged):
            return ImportResult(ok=False, reason=Reason.WRITE_FAILED)

        logger.info(f"Imported {len(cleaned)} links, {len(merged)} total")
        return ImportResult(ok=True, imported=len(cleaned), total=len(merged))

    def import_file(self, scope: Scope, path: Union[str, Path, None]) -> ImportResult:
        """Merge links from a document file into the scope."""
        if not path:
            return ImportResult(ok=False, reason=Reason.NO_FILE)

        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read import file {path}: {e}")
            return ImportResult(ok=False, reason=Reason.BAD_JSON)

        return self.import_text(scope, text)
