"""Unit tests for link transfer documents."""

import json
from datetime import datetime, timezone

import pytest

from src.profiles.exceptions import TransferDocumentError
from src.profiles.links import LinkStore
from src.profiles.models import Reason, Scope
from src.profiles.transfer import (
    LinkTransfer,
    decode_links,
    encode_links,
    export_file_name,
)


@pytest.fixture
def links(store):
    return LinkStore(store)


@pytest.fixture
def transfer(links):
    return LinkTransfer(links)


class TestEncodeDecode:
    """Tests for the document format."""

    def test_encode(self, scope):
        when = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)

        document = encode_links(scope, {"core_char_1": "core_user_1"}, when)

        assert document == {
            "schemaVersion": 1,
            "server": "tranquility",
            "profile": "settings_Default",
            "exportedAt": "2024-01-15T10:30:00+00:00",
            "links": {"core_char_1": "core_user_1"},
        }

    def test_decode_drops_invalid_entries(self):
        text = json.dumps({"links": {"core_char_9": "bad_value", "core_char_10": "core_user_5"}})

        assert decode_links(text) == {"core_char_10": "core_user_5"}

    def test_decode_drops_bad_keys_and_values(self):
        text = json.dumps({"links": {
            "core_user_1": "core_user_2",
            "core_char_1": 5,
            "core_char_2": None,
            "core_char_3": "core_user_3",
        }})

        assert decode_links(text) == {"core_char_3": "core_user_3"}

    @pytest.mark.parametrize("text,reason", [
        ("{broken", Reason.BAD_JSON),
        ("[" * 100_000, Reason.BAD_JSON),
        ("[1, 2]", Reason.NO_LINKS),
        ('{"server": "tranquility"}', Reason.NO_LINKS),
        ('{"links": ["core_char_1"]}', Reason.NO_LINKS),
        ('{"schemaVersion": 2, "links": {}}', Reason.UNSUPPORTED_SCHEMA),
    ])
    def test_decode_rejects_documents(self, text, reason):
        with pytest.raises(TransferDocumentError) as exc_info:
            decode_links(text)

        assert exc_info.value.reason == reason

    def test_decode_accepts_legacy_schema_key(self):
        text = json.dumps({"schema": 1, "links": {"core_char_1": "core_user_1"}})

        assert decode_links(text) == {"core_char_1": "core_user_1"}

    def test_export_file_name(self, scope):
        name = export_file_name(scope, datetime(2024, 1, 5, 9, 8, 7))

        assert name == "eve-links_tranquility_settings_Default_20240105-090807.json"


class TestLinkTransfer:
    """Tests for export and import against the link store."""

    def test_export_then_import_reproduces_links(self, store, links, transfer, scope):
        original = {"core_char_1": "core_user_1", "core_char_2": "core_user_1"}
        links.set(scope, original)
        text = transfer.export_text(scope)

        target = Scope("tranquility", "settings_New")
        result = transfer.import_text(target, text)

        assert result.ok is True
        assert links.get(target) == original

    def test_import_counts_valid_entries(self, transfer, scope):
        text = json.dumps({"links": {"core_char_9": "bad_value", "core_char_10": "core_user_5"}})

        result = transfer.import_text(scope, text)

        assert result.imported == 1
        assert result.total == 1

    def test_import_overrides_existing(self, links, transfer, scope):
        links.set(scope, {"core_char_1": "core_user_old", "core_char_2": "core_user_2"})
        text = json.dumps({"links": {"core_char_1": "core_user_new", "core_char_3": "core_user_3"}})

        result = transfer.import_text(scope, text)

        assert (result.imported, result.total) == (2, 3)
        assert links.get(scope) == {
            "core_char_1": "core_user_new",
            "core_char_2": "core_user_2",
            "core_char_3": "core_user_3",
        }

    def test_malformed_import_writes_nothing(self, links, transfer, scope):
        links.set(scope, {"core_char_1": "core_user_1"})

        result = transfer.import_text(scope, "{oops")

        assert result.ok is False
        assert result.reason == Reason.BAD_JSON
        assert links.get(scope) == {"core_char_1": "core_user_1"}

    def test_export_to_folder(self, links, transfer, scope, tmp_path):
        links.set(scope, {"core_char_1": "core_user_1"})

        result = transfer.export_to_folder(scope, tmp_path, datetime(2024, 1, 15, 10, 30, 0))

        assert result.ok is True
        assert result.count == 1
        with open(result.path, encoding="utf-8") as f:
            document = json.load(f)
        assert document["links"] == {"core_char_1": "core_user_1"}
        assert result.path.endswith("eve-links_tranquility_settings_Default_20240115-103000.json")

    def test_export_without_folder(self, transfer, scope, tmp_path):
        assert transfer.export_to_folder(scope, None).reason == Reason.NO_FOLDER
        assert transfer.export_to_folder(scope, tmp_path / "missing").reason == Reason.NO_FOLDER

    def test_import_file(self, links, transfer, scope, tmp_path):
        path = tmp_path / "links.json"
        path.write_text(json.dumps({"links": {"core_char_1": "core_user_1"}}), encoding="utf-8")

        result = transfer.import_file(scope, path)

        assert result.ok is True
        assert links.get(scope) == {"core_char_1": "core_user_1"}

    def test_import_file_missing(self, transfer, scope, tmp_path):
        assert transfer.import_file(scope, None).reason == Reason.NO_FILE
        assert transfer.import_file(scope, tmp_path / "nope.json").reason == Reason.BAD_JSON

    def test_import_write_failure(self, broken_store, scope):
        transfer = LinkTransfer(LinkStore(broken_store))

        result = transfer.import_text(scope, '{"links": {"core_char_1": "core_user_1"}}')

        assert result.ok is False
        assert result.reason == Reason.WRITE_FAILED
