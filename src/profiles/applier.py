"""Batch settings copy.

Copies the bytes of a source settings file (or character/account pair)
onto other files of the same kind. Source content is read once; targets
are written one after another. Copies are not transactional: a failure
partway leaves the targets written so far updated.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple, Union

from src.config.paths import get_settings_file_path
from src.profiles.exceptions import SettingsFileError
from src.profiles.groups import GroupStore, is_real_group_id
from src.profiles.links import LinkStore
from src.profiles.models import ApplyResult, Reason, Scope
from src.profiles.scanner import parse_file_id
from src.utils.validators import validate_profile_dir

logger = logging.getLogger("eve_settings.applier")

PathLike = Union[str, Path]


def read_settings(path: Path) -> bytes:
    """Read a settings blob."""
    try:
        return path.read_bytes()
    except OSError as e:
        raise SettingsFileError(str(path), "read", e)


def write_settings(path: Path, content: bytes) -> None:
    """Overwrite a settings blob."""
    try:
        path.write_bytes(content)
    except OSError as e:
        raise SettingsFileError(str(path), "write", e)


class BatchApplier:
    """Copies settings between characters and accounts."""

    def __init__(self, links: LinkStore, groups: GroupStore):
        """
        Initialize the applier.

        Args:
            links: Link table used to pair characters with accounts
            groups: Group store used for template propagation
        """
        self._links = links
        self._groups = groups

    @staticmethod
    def _folder(profile_dir: Optional[PathLike]) -> Optional[Path]:
        is_valid, error = validate_profile_dir(profile_dir)
        if not is_valid:
            logger.info(f"No usable profile folder: {error}")
            return None
        return Path(profile_dir)

    @staticmethod
    def _read_pair(folder: Path, character: str, account: str) -> Optional[Tuple[bytes, bytes]]:
        char_path = get_settings_file_path(folder, character)
        user_path = get_settings_file_path(folder, account)
        if not char_path.exists() or not user_path.exists():
            return None
        return read_settings(char_path), read_settings(user_path)

    def _copy_pairs(
        self,
        folder: Path,
        content: Tuple[bytes, bytes],
        targets: Iterable[Tuple[str, Optional[str]]]
    ) -> ApplyResult:
        """Write a character/account pair's content onto each target pair."""
        char_content, user_content = content
        applied = 0
        skipped = 0

        for character, account in targets:
            if not character or not account:
                logger.debug(f"Skipping {character or '<empty>'}: not linked")
                skipped += 1
                continue

            char_path = get_settings_file_path(folder, character)
            user_path = get_settings_file_path(folder, account)
            if not char_path.exists() or not user_path.exists():
                logger.debug(f"Skipping {character}: settings files missing")
                skipped += 1
                continue

            try:
                write_settings(char_path, char_content)
                write_settings(user_path, user_content)
            except SettingsFileError as e:
                logger.error(f"Copy stopped after {applied} targets: {e}")
                return ApplyResult.failure(Reason.WRITE_FAILED, applied, skipped)
            applied += 1

        return ApplyResult(ok=True, applied=applied, skipped=skipped)

    def overwrite(
        self,
        profile_dir: Optional[PathLike],
        source: str,
        targets: Sequence[str]
    ) -> ApplyResult:
        """
        Copy one settings file onto other files of the same kind.

        Targets of the other kind, backups, and files missing on disk
        are skipped. The source itself is ignored if listed.

        Args:
            profile_dir: Profile directory
            source: Source file id
            targets: Target file ids

        Returns:
            ApplyResult with applied/skipped counts
        """
        folder = self._folder(profile_dir)
        if folder is None:
            return ApplyResult.failure(Reason.NO_FOLDER)

        parsed = parse_file_id(source or "")
        source_path = get_settings_file_path(folder, source or "")
        if parsed is None or not source_path.is_file():
            return ApplyResult.failure(Reason.SOURCE_MISSING)
        source_type = parsed[0]

        try:
            content = read_settings(source_path)
        except SettingsFileError as e:
            logger.error(str(e))
            return ApplyResult.failure(Reason.READ_FAILED)

        applied = 0
        skipped = 0
        for target in targets:
            if target == source:
                continue
            target_parsed = parse_file_id(target or "")
            target_path = get_settings_file_path(folder, target or "")
            if target_parsed is None or target_parsed[0] != source_type or not target_path.is_file():
                logger.debug(f"Skipping overwrite target {target}")
                skipped += 1
                continue
            try:
                write_settings(target_path, content)
            except SettingsFileError as e:
                logger.error(f"Overwrite stopped after {applied} targets: {e}")
                return ApplyResult.failure(Reason.WRITE_FAILED, applied, skipped)
            applied += 1

        logger.info(f"Overwrote {applied} files from {source} ({skipped} skipped)")
        return ApplyResult(ok=True, applied=applied, skipped=skipped)

    def apply_group_from_template(
        self,
        profile_dir: Optional[PathLike],
        scope: Scope,
        group_id: str
    ) -> ApplyResult:
        """
        Copy the group template's character and account settings onto
        every other linked member.

        Args:
            profile_dir: Profile directory
            scope: Link and group scope
            group_id: Group to apply

        Returns:
            ApplyResult; members without a link or with missing files
            count as skipped
        """
        if not is_real_group_id(group_id):
            return ApplyResult.failure(Reason.NO_GROUP)

        folder = self._folder(profile_dir)
        if folder is None:
            return ApplyResult.failure(Reason.NO_FOLDER)

        group = self._groups.get(scope, group_id)
        if group is None:
            return ApplyResult.failure(Reason.MISSING_GROUP)

        template = group.template.strip()
        if not template:
            return ApplyResult.failure(Reason.NO_TEMPLATE)

        links = self._links.get(scope)
        template_account = links.get(template)
        if not template_account:
            return ApplyResult.failure(Reason.TEMPLATE_NOT_LINKED)

        try:
            content = self._read_pair(folder, template, template_account)
        except SettingsFileError as e:
            logger.error(str(e))
            return ApplyResult.failure(Reason.READ_FAILED)
        if content is None:
            return ApplyResult.failure(Reason.TEMPLATE_MISSING_FILES)

        targets = [
            (member, links.get(member))
            for member in group.members
            if member and member != template
        ]
        result = self._copy_pairs(folder, content, targets)
        logger.info(
            f"Applied template {template} to group {group.name}: "
            f"{result.applied} applied, {result.skipped} skipped"
        )
        return result

    def apply_links_from_source(
        self,
        profile_dir: Optional[PathLike],
        scope: Scope,
        source: Optional[str]
    ) -> ApplyResult:
        """
        Copy a linked character's settings pair onto every other linked pair.

        Args:
            profile_dir: Profile directory
            scope: Link scope
            source: Source character file id

        Returns:
            ApplyResult; pairs with missing files count as skipped
        """
        folder = self._folder(profile_dir)
        if folder is None:
            return ApplyResult.failure(Reason.NO_FOLDER)

        if not source:
            return ApplyResult.failure(Reason.NO_SOURCE_CHAR)

        links = self._links.get(scope)
        source_account = links.get(source)
        if not source_account:
            return ApplyResult.failure(Reason.NO_SOURCE_LINK)

        try:
            content = self._read_pair(folder, source, source_account)
        except SettingsFileError as e:
            logger.error(str(e))
            return ApplyResult.failure(Reason.READ_FAILED)
        if content is None:
            return ApplyResult.failure(Reason.SOURCE_MISSING_FILES)

        targets = [(c, a) for c, a in links.items() if c != source]
        result = self._copy_pairs(folder, content, targets)
        logger.info(
            f"Applied {source} to all links: "
            f"{result.applied} applied, {result.skipped} skipped"
        )
        return result
