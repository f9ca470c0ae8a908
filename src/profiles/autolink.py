"""Auto-link heuristic.

Logging into the client rewrites the account's settings file. If the
user picks a character and exactly one account file was written in the
last few seconds, that account is almost certainly the one the
character runs under.
"""

import logging
import time
from typing import List, Mapping, Optional

from src.profiles.links import LinkStore
from src.profiles.models import (
    AccountFile,
    AutoLinkResult,
    FreshAccount,
    Reason,
    Scope,
)

logger = logging.getLogger("eve_settings.autolink")

DEFAULT_WINDOW_MS = 10_000


def now_ms() -> float:
    """Current wall-clock time in milliseconds."""
    return time.time() * 1000


def fresh_accounts(
    accounts: Mapping[str, AccountFile],
    window_ms: float,
    now: float
) -> List[FreshAccount]:
    """
    Accounts modified within the window, most recent first.

    An account qualifies when ``0 <= now - mtime < window_ms``.
    """
    candidates = []
    for file_id, account in accounts.items():
        age = now - account.mtime_ms
        if 0 <= age < window_ms:
            candidates.append(FreshAccount(file_id=file_id, id=account.id, age_ms=age))
    candidates.sort(key=lambda c: c.age_ms)
    return candidates


def detect_account(
    character: Optional[str],
    characters: Mapping[str, object],
    accounts: Mapping[str, AccountFile],
    window_ms: float = DEFAULT_WINDOW_MS,
    now: Optional[float] = None
) -> AutoLinkResult:
    """
    Pick the account a character should be linked to.

    Pure: nothing is persisted.

    Args:
        character: Selected character file id
        characters: Known character files
        accounts: Known account files
        window_ms: Freshness window in milliseconds
        now: Current time in milliseconds (defaults to the wall clock)

    Returns:
        AutoLinkResult; on success ``account`` holds the chosen file id
    """
    if not character or character not in characters:
        return AutoLinkResult(ok=False, reason=Reason.NO_CHARACTER_SELECTED)

    if now is None:
        now = now_ms()

    candidates = fresh_accounts(accounts, window_ms, now)
    if not candidates:
        return AutoLinkResult(ok=False, reason=Reason.NONE_FRESH, character=character)
    if len(candidates) > 1:
        return AutoLinkResult(
            ok=False,
            reason=Reason.MULTIPLE_FRESH,
            character=character,
            candidates=candidates,
        )

    chosen = candidates[0]
    return AutoLinkResult(
        ok=True,
        character=character,
        account=chosen.file_id,
        account_id=chosen.id,
        candidates=candidates,
    )


class AutoLinker:
    """Runs the heuristic and records a successful match."""

    def __init__(self, links: LinkStore, window_ms: float = DEFAULT_WINDOW_MS):
        self._links = links
        self._window_ms = window_ms

    def run(
        self,
        scope: Scope,
        character: Optional[str],
        characters: Mapping[str, object],
        accounts: Mapping[str, AccountFile],
        now: Optional[float] = None
    ) -> AutoLinkResult:
        """Detect the account and, when unambiguous, store the link."""
        result = detect_account(character, characters, accounts, self._window_ms, now)
        if result.ok:
            if not self._links.link(scope, result.character, result.account):
                return AutoLinkResult(
                    ok=False,
                    reason=Reason.WRITE_FAILED,
                    character=result.character,
                    candidates=result.candidates,
                )
            logger.info(f"Auto-linked {result.character} -> {result.account}")
        else:
            logger.info(f"Auto-link not applied: {result.reason.value}")
        return result
