"""Unit tests for the auto-link heuristic."""

import pytest

from src.profiles.autolink import AutoLinker, detect_account, fresh_accounts
from src.profiles.links import LinkStore
from src.profiles.models import AccountFile, CharacterFile, Reason

NOW = 1_700_000_000_000.0


def account(file_id: str, age_ms: float) -> AccountFile:
    return AccountFile(file_id=file_id, id=file_id.rsplit("_", 1)[-1], mtime_ms=NOW - age_ms)


@pytest.fixture
def characters():
    return {"core_char_1_100": CharacterFile(file_id="core_char_1_100", id="100", mtime_ms=NOW - 60_000)}


class TestFreshAccounts:
    """Tests for the freshness filter."""

    def test_window_bounds(self):
        accounts = {
            "core_user_a": account("core_user_a", 0),
            "core_user_b": account("core_user_b", 9_999),
            "core_user_c": account("core_user_c", 10_000),
            "core_user_future": account("core_user_future", -5),
        }

        fresh = fresh_accounts(accounts, 10_000, NOW)

        assert [c.file_id for c in fresh] == ["core_user_a", "core_user_b"]

    def test_sorted_by_age(self):
        accounts = {
            "core_user_old": account("core_user_old", 500),
            "core_user_new": account("core_user_new", 20),
        }

        fresh = fresh_accounts(accounts, 10_000, NOW)

        assert [c.file_id for c in fresh] == ["core_user_new", "core_user_old"]
        assert fresh[0].age_ms == 20


class TestDetectAccount:
    """Tests for the pure detection function."""

    def test_no_character_selected(self, characters):
        result = detect_account(None, characters, {}, now=NOW)

        assert result.ok is False
        assert result.reason == Reason.NO_CHARACTER_SELECTED

    def test_unknown_character(self, characters):
        result = detect_account("core_char_9", characters, {}, now=NOW)

        assert result.reason == Reason.NO_CHARACTER_SELECTED

    def test_none_fresh(self, characters):
        accounts = {"core_user_1_200": account("core_user_1_200", 50_000)}

        result = detect_account("core_char_1_100", characters, accounts, now=NOW)

        assert result.ok is False
        assert result.reason == Reason.NONE_FRESH

    def test_multiple_fresh_lists_candidates(self, characters):
        accounts = {
            "core_user_b": account("core_user_b", 2),
            "core_user_a": account("core_user_a", 1),
        }

        result = detect_account("core_char_1_100", characters, accounts, now=NOW)

        assert result.ok is False
        assert result.reason == Reason.MULTIPLE_FRESH
        assert [c.file_id for c in result.candidates] == ["core_user_a", "core_user_b"]
        assert [c.age_ms for c in result.candidates] == [1, 2]

    def test_single_fresh_succeeds(self, characters):
        accounts = {
            "core_user_1_200": account("core_user_1_200", 5_000),
            "core_user_1_201": account("core_user_1_201", 50_000),
        }

        result = detect_account("core_char_1_100", characters, accounts, window_ms=10_000, now=NOW)

        assert result.ok is True
        assert result.character == "core_char_1_100"
        assert result.account == "core_user_1_200"
        assert result.account_id == "200"


class TestAutoLinker:
    """Tests for the link-writing wrapper."""

    def test_success_writes_link(self, store, scope, characters):
        links = LinkStore(store)
        accounts = {
            "core_user_1_200": account("core_user_1_200", 5_000),
            "core_user_1_201": account("core_user_1_201", 50_000),
        }

        result = AutoLinker(links).run(scope, "core_char_1_100", characters, accounts, now=NOW)

        assert result.ok is True
        assert links.get(scope) == {"core_char_1_100": "core_user_1_200"}

    def test_ambiguous_writes_nothing(self, store, scope, characters):
        links = LinkStore(store)
        links.link(scope, "core_char_1_100", "core_user_old")
        accounts = {
            "core_user_a": account("core_user_a", 1),
            "core_user_b": account("core_user_b", 2),
        }

        result = AutoLinker(links).run(scope, "core_char_1_100", characters, accounts, now=NOW)

        assert result.reason == Reason.MULTIPLE_FRESH
        assert links.get(scope) == {"core_char_1_100": "core_user_old"}

    def test_custom_window(self, store, scope, characters):
        links = LinkStore(store)
        accounts = {"core_user_a": account("core_user_a", 15_000)}

        result = AutoLinker(links, window_ms=20_000).run(
            scope, "core_char_1_100", characters, accounts, now=NOW
        )

        assert result.ok is True

    def test_write_failure_reported(self, broken_store, scope, characters):
        accounts = {"core_user_1_200": account("core_user_1_200", 5_000)}

        result = AutoLinker(LinkStore(broken_store)).run(
            scope, "core_char_1_100", characters, accounts, now=NOW
        )

        assert result.ok is False
        assert result.reason == Reason.WRITE_FAILED
