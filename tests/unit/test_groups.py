"""Unit tests for GroupStore."""

import pytest

from src.profiles.groups import GroupStore
from src.profiles.models import ALL_GROUPS, Group, Scope


class TestGroupStore:
    """Tests for persisted character groups."""

    @pytest.fixture
    def groups(self, store):
        return GroupStore(store)

    @pytest.fixture
    def group(self, groups, scope):
        return groups.create(scope, "Miners")

    def test_create(self, groups, scope):
        group = groups.create(scope, "  Miners  ")

        assert group.id.startswith("g_")
        assert group.name == "Miners"
        assert group.members == []
        assert group.template == ""
        assert groups.get(scope, group.id) == group

    def test_create_default_name(self, groups, scope):
        assert groups.create(scope, "   ").name == "New Group"
        assert groups.create(scope).name == "New Group"

    def test_create_generates_unique_ids(self, groups, scope):
        ids = {groups.create(scope, f"g{i}").id for i in range(5)}

        assert len(ids) == 5
        assert len(groups.all(scope)) == 5

    def test_delete(self, groups, scope, group):
        assert groups.delete(scope, group.id) is True
        assert groups.get(scope, group.id) is None
        assert groups.delete(scope, group.id) is False

    def test_reserved_id_refused(self, groups, scope):
        assert groups.delete(scope, ALL_GROUPS) is False
        assert groups.add_member(scope, ALL_GROUPS, "core_char_1") is False
        assert groups.set_template(scope, ALL_GROUPS, "core_char_1") is False
        assert groups.get(scope, ALL_GROUPS) is None

    def test_add_member_is_idempotent(self, groups, scope, group):
        groups.add_member(scope, group.id, "core_char_1")
        groups.add_member(scope, group.id, "core_char_1")
        groups.add_member(scope, group.id, "core_char_2")

        assert groups.get(scope, group.id).members == ["core_char_1", "core_char_2"]

    def test_add_member_rejects_empty(self, groups, scope, group):
        assert groups.add_member(scope, group.id, "") is False

    def test_unknown_group(self, groups, scope):
        assert groups.add_member(scope, "g_missing", "core_char_1") is False
        assert groups.remove_member(scope, "g_missing", "core_char_1") is False

    def test_remove_template_member_clears_template(self, groups, scope, group):
        groups.set_template(scope, group.id, "core_char_1")
        groups.add_member(scope, group.id, "core_char_2")

        groups.remove_member(scope, group.id, "core_char_1")

        updated = groups.get(scope, group.id)
        assert updated.template == ""
        assert updated.members == ["core_char_2"]

    def test_remove_other_member_keeps_template(self, groups, scope, group):
        groups.set_template(scope, group.id, "core_char_1")
        groups.add_member(scope, group.id, "core_char_2")

        groups.remove_member(scope, group.id, "core_char_2")

        assert groups.get(scope, group.id).template == "core_char_1"

    def test_set_template_adds_membership(self, groups, scope, group):
        groups.set_template(scope, group.id, "core_char_7")

        updated = groups.get(scope, group.id)
        assert updated.template == "core_char_7"
        assert "core_char_7" in updated.members

    def test_set_template_replaces_previous(self, groups, scope, group):
        groups.set_template(scope, group.id, "core_char_1")
        groups.set_template(scope, group.id, "core_char_2")

        updated = groups.get(scope, group.id)
        assert updated.template == "core_char_2"
        assert updated.members == ["core_char_1", "core_char_2"]

    def test_rename(self, groups, scope, group):
        groups.rename(scope, group.id, " Haulers ")

        assert groups.get(scope, group.id).name == "Haulers"

    def test_scopes_are_independent(self, groups, scope, group):
        assert groups.all(Scope(scope.server, "settings_Other")) == {}

    def test_stored_all_key_is_ignored(self, store, groups, scope):
        store.save(scope.key("groups"), {ALL_GROUPS: {"name": "x"}, "g_1": {"name": "y"}})

        assert list(groups.all(scope)) == ["g_1"]


    def test_create_rejects_long_name(self, groups, scope):
        assert groups.create(scope, "x" * 65) is None
        assert groups.all(scope) == {}

    def test_rename_rejects_long_name(self, groups, scope, group):
        assert groups.rename(scope, group.id, "x" * 65) is False
        assert groups.get(scope, group.id).name == "Miners"

    def test_add_members(self, groups, scope, group):
        groups.add_member(scope, group.id, "core_char_1")

        assert groups.add_members(scope, group.id, ["core_char_2", "core_char_1", ""]) is True
        assert groups.get(scope, group.id).members == ["core_char_1", "core_char_2"]
        assert groups.add_members(scope, group.id, []) is False
        assert groups.add_members(scope, "g_missing", ["core_char_3"]) is False

    def test_write_failure_reported(self, broken_store, scope):
        groups = GroupStore(broken_store)

        assert groups.create(scope, "Miners") is None
        assert groups.all(scope) == {}

    def test_mutation_write_failure_reported(self, store, scope, group):
        groups = GroupStore(store)
        store.store_path.unlink()
        store.store_path.mkdir()

        assert groups.add_member(scope, group.id, "core_char_1") is False
        assert groups.delete(scope, group.id) is False

class TestGroupModel:
    """Tests for Group persistence helpers."""

    def test_from_dict_cleans_members(self):
        group = Group.from_dict("g_1", {
            "name": " Team ",
            "members": ["core_char_1", "", None, "core_char_1", "core_char_2"],
            "template": "core_char_2",
        })

        assert group.name == "Team"
        assert group.members == ["core_char_1", "core_char_2"]

    def test_from_dict_template_joins_members(self):
        group = Group.from_dict("g_1", {"members": [], "template": "core_char_3"})

        assert group.members == ["core_char_3"]

    def test_from_dict_defaults(self):
        group = Group.from_dict("g_1", None)

        assert group.name == "g_1"
        assert group.members == []
        assert group.template == ""

    def test_from_dict_reads_legacy_template_key(self):
        group = Group.from_dict("g_1", {"members": ["core_char_1"], "templateChar": "core_char_1"})

        assert group.template == "core_char_1"
        assert group.to_dict()["template"] == "core_char_1"

    def test_round_trip(self):
        group = Group(id="g_1", name="A", members=["core_char_1"], template="core_char_1")

        assert Group.from_dict("g_1", group.to_dict()) == group
