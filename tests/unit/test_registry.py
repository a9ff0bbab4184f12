"""Tests for whitelist and denom set edits."""

import pytest

from tokenfactory.core import registry
from tokenfactory.core.state import Configuration

from tests.testing_utils import DENOM, MANAGER, MINTER, OTHER_DENOM


class TestUnion:
    """Tests for ordered set-union."""

    def test_appends_new_entries_in_order(self) -> None:
        assert registry.union(["a", "b"], ["c", "a", "d"]) == ["a", "b", "c", "d"]

    def test_collapses_duplicates_in_input(self) -> None:
        assert registry.union([], ["x", "x", "y", "x"]) == ["x", "y"]

    def test_empty_additions_is_identity(self) -> None:
        assert registry.union(["a"], []) == ["a"]


class TestDifference:
    """Tests for set-difference."""

    def test_removes_present_entries(self) -> None:
        assert registry.difference(["a", "b", "c"], ["b"]) == ["a", "c"]

    def test_absent_entries_are_ignored(self) -> None:
        assert registry.difference(["a"], ["zzz"]) == ["a"]

    def test_duplicate_removals(self) -> None:
        assert registry.difference(["a", "b"], ["a", "a"]) == ["b"]


class TestConfigurationEdits:
    """Tests for the edits applied to a Configuration."""

    @pytest.fixture
    def base(self) -> Configuration:
        return Configuration(manager=MANAGER, allowed_mint_addresses=[MINTER], denoms=[DENOM])

    def test_add_whitelist(self, base: Configuration) -> None:
        updated = registry.add_whitelist(base, ["juno1b", MINTER])
        assert updated.allowed_mint_addresses == [MINTER, "juno1b"]
        assert updated.denoms == [DENOM]
        assert updated.manager == MANAGER

    def test_add_whitelist_is_idempotent(self, base: Configuration) -> None:
        once = registry.add_whitelist(base, ["juno1b"])
        twice = registry.add_whitelist(once, ["juno1b"])
        assert once == twice

    def test_remove_whitelist(self, base: Configuration) -> None:
        updated = registry.remove_whitelist(base, [MINTER, "juno1never"])
        assert updated.allowed_mint_addresses == []

    def test_add_and_remove_denoms(self, base: Configuration) -> None:
        added = registry.add_denoms(base, [OTHER_DENOM, DENOM])
        assert added.denoms == [DENOM, OTHER_DENOM]
        removed = registry.remove_denoms(added, [DENOM])
        assert removed.denoms == [OTHER_DENOM]

    def test_edits_do_not_mutate_input(self, base: Configuration) -> None:
        before = base.to_dict()
        registry.add_whitelist(base, ["juno1b"])
        registry.remove_denoms(base, [DENOM])
        assert base.to_dict() == before

    def test_no_op_edit_compares_equal(self, base: Configuration) -> None:
        """Unchanged edits are detectable so the caller can skip the commit."""
        assert registry.remove_whitelist(base, ["juno1never"]) == base
