"""Tests for account hierarchy domain service."""

import pytest

from ledgerkit.domain.account_hierarchy import sort_accounts
from ledgerkit.domain.entities import AccountListHeader, AccountNode, ExpansionState
from ledgerkit.domain.errors import HierarchyOrderError, ValidationError

from conftest import make_account


def _names(items):
    return [item.name if isinstance(item, AccountNode) else "<header>" for item in items]


class TestResolve:
    """Tests for linking accounts into nodes."""

    def test_resolve_empty(self, resolver):
        assert resolver.resolve([]) == []

    def test_has_sub_accounts(self, resolver, sample_accounts):
        nodes = resolver.resolve(sample_accounts)
        flags = {node.name: node.has_sub_accounts for node in nodes}

        assert flags == {
            "Assets": True,
            "Assets:Bank": True,
            "Assets:Bank:Checking": False,
            "Assets:Cash": False,
            "Expenses": True,
            "Expenses:Food": False,
            "Expenses:Rent": False,
        }

    def test_resolve_preserves_input_order(self, resolver):
        accounts = [
            make_account(1, "Expenses:Food"),
            make_account(2, "Assets"),
            make_account(3, "Expenses"),
        ]
        assert _names(resolver.resolve(accounts)) == ["Expenses:Food", "Assets", "Expenses"]

    def test_new_accounts_default_expanded_amounts_collapsed(self, resolver, sample_accounts):
        for node in resolver.resolve(sample_accounts):
            assert node.account.is_expanded is True
            assert node.account.amounts_expanded is False

    def test_expansion_state_carried_by_name(self, resolver):
        """Test that flags follow the account name even when ids change."""
        first = resolver.resolve([make_account(1, "Assets"), make_account(2, "Assets:Cash")])
        snapshot = resolver.toggle_expanded(resolver.expansion_snapshot(first), "Assets")
        snapshot = resolver.toggle_amounts_expanded(snapshot, "Assets:Cash")

        second = resolver.resolve(
            [make_account(10, "Assets"), make_account(11, "Assets:Cash")], snapshot
        )

        assert second[0].account.id == 10
        assert second[0].account.is_expanded is False
        assert second[1].account.amounts_expanded is True
        assert resolver.expansion_snapshot(second) == snapshot

    def test_resolve_is_idempotent(self, resolver, sample_accounts):
        snapshot = {"Assets": ExpansionState(is_expanded=False)}
        assert resolver.resolve(sample_accounts, snapshot) == resolver.resolve(
            sample_accounts, snapshot
        )

    def test_orphan_account(self, resolver):
        """Test that an account whose parent is missing is tolerated."""
        nodes = resolver.resolve([make_account(1, "Assets:Bank:Checking")])
        assert nodes[0].has_sub_accounts is False
        assert resolver.is_visible("Assets:Bank:Checking", {}) is True


class TestVisibility:
    """Tests for expand/collapse visibility."""

    def test_collapsed_ancestor_hides_descendants(self, resolver, sample_accounts):
        snapshot = resolver.toggle_expanded({}, "Assets")

        assert resolver.is_visible("Assets", snapshot)
        assert not resolver.is_visible("Assets:Bank", snapshot)
        assert not resolver.is_visible("Assets:Bank:Checking", snapshot)
        assert resolver.is_visible("Expenses:Food", snapshot)

    def test_collapsed_middle_level(self, resolver):
        snapshot = resolver.toggle_expanded({}, "Assets:Bank")
        assert resolver.is_visible("Assets:Bank", snapshot)
        assert not resolver.is_visible("Assets:Bank:Checking", snapshot)

    def test_toggle_twice_restores(self, resolver):
        snapshot = resolver.toggle_expanded(resolver.toggle_expanded({}, "Assets"), "Assets")
        assert snapshot["Assets"].is_expanded is True

    def test_toggle_does_not_mutate_input(self, resolver):
        original = {}
        resolver.toggle_expanded(original, "Assets")
        assert original == {}

    def test_visible_nodes(self, resolver, sample_accounts):
        snapshot = resolver.toggle_expanded({}, "Expenses")
        items = resolver.build_account_list(sample_accounts, snapshot)

        visible = resolver.visible_nodes(items, snapshot)

        assert _names(visible) == [
            "<header>",
            "Assets",
            "Assets:Bank",
            "Assets:Bank:Checking",
            "Assets:Cash",
            "Expenses",
        ]


class TestFilterZeroBalance:
    """Tests for zero-balance pruning."""

    def test_include_zero_returns_input(self, resolver, sample_accounts):
        nodes = resolver.resolve(sample_accounts)
        assert resolver.filter_zero_balance(nodes, include_zero=True) == nodes

    def test_keeps_zero_ancestor_chain_of_non_zero_account(self, resolver):
        nodes = resolver.resolve(
            [
                make_account(1, "Assets", 0),
                make_account(2, "Assets:Bank", 0),
                make_account(3, "Assets:Bank:Checking", 100),
            ]
        )
        result = resolver.filter_zero_balance(nodes, include_zero=False)
        assert _names(result) == ["Assets", "Assets:Bank", "Assets:Bank:Checking"]

    def test_prunes_zero_subtrees(self, resolver, sample_accounts):
        items = resolver.build_account_list(sample_accounts, include_zero=False)

        assert _names(items) == [
            "<header>",
            "Assets",
            "Assets:Bank",
            "Assets:Bank:Checking",
            "Expenses",
            "Expenses:Food",
        ]

    def test_empty_amounts_count_as_zero(self, resolver):
        nodes = resolver.resolve([make_account(1, "Equity")])
        assert resolver.filter_zero_balance(nodes, include_zero=False) == []

    def test_non_zero_in_any_currency_keeps_account(self, resolver):
        nodes = resolver.resolve([make_account(1, "Assets", ("EUR", 0), ("USD", -3))])
        assert _names(resolver.filter_zero_balance(nodes, include_zero=False)) == ["Assets"]

    def test_zero_sibling_of_non_zero_account_is_pruned(self, resolver):
        nodes = resolver.resolve(
            [
                make_account(1, "Assets", 0),
                make_account(2, "Assets:Bank", 0),
                make_account(3, "Assets:Cash", 5),
            ]
        )
        result = resolver.filter_zero_balance(nodes, include_zero=False)
        assert _names(result) == ["Assets", "Assets:Cash"]

    def test_ancestor_kept_across_missing_intermediate(self, resolver):
        nodes = resolver.resolve(
            [make_account(1, "Assets", 0), make_account(2, "Assets:Bank:Checking", 1)]
        )
        result = resolver.filter_zero_balance(nodes, include_zero=False)
        assert _names(result) == ["Assets", "Assets:Bank:Checking"]

    def test_header_always_kept(self, resolver):
        items = [AccountListHeader(), *resolver.resolve([make_account(1, "Empty", 0)])]
        assert resolver.filter_zero_balance(items, include_zero=False) == [AccountListHeader()]

    def test_pruning_is_a_fixpoint(self, resolver, sample_accounts):
        items = resolver.build_account_list(sample_accounts)
        once = resolver.filter_zero_balance(items, include_zero=False)
        twice = resolver.filter_zero_balance(once, include_zero=False)
        assert once == twice

    def test_prefix_without_colon_is_not_ancestor(self, resolver):
        nodes = resolver.resolve(
            [make_account(1, "Assets", 0), make_account(2, "AssetsOld", 10)]
        )
        result = resolver.filter_zero_balance(nodes, include_zero=False)
        assert _names(result) == ["AssetsOld"]

    def test_unsorted_input_rejected(self, resolver):
        """Test that a child appearing before its parent is reported."""
        nodes = resolver.resolve(
            [make_account(1, "Assets:Cash", 10), make_account(2, "Assets", 0)]
        )
        with pytest.raises(HierarchyOrderError):
            resolver.filter_zero_balance(nodes, include_zero=False)

    def test_child_before_grandparent_rejected(self, resolver):
        nodes = resolver.resolve(
            [
                make_account(1, "Assets:Bank:Checking", 10),
                make_account(2, "Assets", 0),
            ]
        )
        with pytest.raises(ValidationError, match="Assets:Bank:Checking"):
            resolver.filter_zero_balance(nodes, include_zero=False)

    def test_interleaved_input_accepted(self, resolver):
        nodes = resolver.resolve(
            [
                make_account(1, "Assets", 0),
                make_account(2, "Expenses", 0),
                make_account(3, "Assets:Cash", 10),
            ]
        )
        result = resolver.filter_zero_balance(nodes, include_zero=False)
        assert _names(result) == ["Assets", "Assets:Cash"]

    def test_plain_name_sort_accepted(self, resolver):
        """Test that sorted() order, with siblings between parent and child, prunes."""
        names = sorted(["Assets:Bank", "Assets2", "Assets", "Assets-Old"])
        assert names == ["Assets", "Assets-Old", "Assets2", "Assets:Bank"]
        balances = {"Assets:Bank": 25}
        nodes = resolver.resolve(
            [make_account(i, name, balances.get(name, 0)) for i, name in enumerate(names)]
        )

        result = resolver.filter_zero_balance(nodes, include_zero=False)

        assert _names(result) == ["Assets", "Assets:Bank"]


def test_sort_accounts_puts_parents_first():
    accounts = [
        make_account(1, "Assets-Old"),
        make_account(2, "Assets:Bank"),
        make_account(3, "assets"),
        make_account(4, "Assets:Bank:Checking"),
    ]
    assert [a.name for a in sort_accounts(accounts)] == [
        "assets",
        "Assets:Bank",
        "Assets:Bank:Checking",
        "Assets-Old",
    ]
