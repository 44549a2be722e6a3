"""Account hierarchy domain service."""

from dataclasses import replace
from typing import Mapping, Optional, Sequence

from ledgerkit.domain.entities import (
    ACCOUNT_SEPARATOR,
    Account,
    AccountListHeader,
    AccountListItem,
    AccountNode,
    ExpansionState,
    parent_account_name,
)
from ledgerkit.domain.errors import HierarchyOrderError, account_order_violation

ExpansionSnapshot = Mapping[str, ExpansionState]


class AccountHierarchyResolver:
    """Service for turning a flat account list into tree-aware nodes.

    The resolver holds no state between passes. Expansion flags live in a
    caller-owned snapshot keyed by account name, passed into ``resolve`` and
    read back with ``expansion_snapshot``.
    """

    def resolve(
        self,
        accounts: Sequence[Account],
        expansion: Optional[ExpansionSnapshot] = None,
    ) -> list[AccountNode]:
        """Link accounts into tree nodes.

        The input order is kept as is; callers sort by name beforehand so
        that parents precede their children.

        Args:
            accounts: Flat account list
            expansion: Expansion state from the previous pass, by account name

        Returns:
            One node per account, in input order
        """
        if not accounts:
            return []

        # First pass: collect all account names that have children
        parents = set()
        for account in accounts:
            parent_name = account.parent_name
            if parent_name is not None:
                parents.add(parent_name)

        # Second pass: apply carried-over flags and build nodes
        nodes = []
        for account in accounts:
            state = expansion.get(account.name) if expansion else None
            if state is None:
                state = ExpansionState()
            account = replace(
                account,
                is_expanded=state.is_expanded,
                amounts_expanded=state.amounts_expanded,
            )
            nodes.append(
                AccountNode(account=account, has_sub_accounts=account.name in parents)
            )
        return nodes

    def expansion_snapshot(self, nodes: Sequence[AccountListItem]) -> dict[str, ExpansionState]:
        """Collect the expansion flags of resolved nodes by account name."""
        snapshot = {}
        for node in nodes:
            if isinstance(node, AccountNode):
                snapshot[node.name] = ExpansionState(
                    is_expanded=node.account.is_expanded,
                    amounts_expanded=node.account.amounts_expanded,
                )
            elif not isinstance(node, AccountListHeader):
                raise TypeError(f"Unknown account list item: {node!r}")
        return snapshot

    def toggle_expanded(
        self, expansion: ExpansionSnapshot, name: str
    ) -> dict[str, ExpansionState]:
        """Return a new snapshot with the sub-account expansion of ``name`` flipped."""
        state = expansion.get(name, ExpansionState())
        updated = dict(expansion)
        updated[name] = replace(state, is_expanded=not state.is_expanded)
        return updated

    def toggle_amounts_expanded(
        self, expansion: ExpansionSnapshot, name: str
    ) -> dict[str, ExpansionState]:
        """Return a new snapshot with the amount expansion of ``name`` flipped."""
        state = expansion.get(name, ExpansionState())
        updated = dict(expansion)
        updated[name] = replace(state, amounts_expanded=not state.amounts_expanded)
        return updated

    def is_visible(self, name: str, expansion: ExpansionSnapshot) -> bool:
        """Check whether every ancestor of ``name`` is expanded.

        Ancestors are found by stripping the last colon segment repeatedly.
        Ancestors absent from the snapshot count as expanded, so an account
        whose parent is missing is always visible.
        """
        ancestor = parent_account_name(name)
        while ancestor is not None:
            state = expansion.get(ancestor)
            if state is not None and not state.is_expanded:
                return False
            ancestor = parent_account_name(ancestor)
        return True

    def visible_nodes(
        self, items: Sequence[AccountListItem], expansion: ExpansionSnapshot
    ) -> list[AccountListItem]:
        """Filter a list down to the items currently visible."""
        visible = []
        for item in items:
            if isinstance(item, AccountListHeader):
                visible.append(item)
            elif isinstance(item, AccountNode):
                if self.is_visible(item.name, expansion):
                    visible.append(item)
            else:
                raise TypeError(f"Unknown account list item: {item!r}")
        return visible

    def filter_zero_balance(
        self, items: Sequence[AccountListItem], include_zero: bool
    ) -> list[AccountListItem]:
        """Drop zero-balance accounts that have no non-zero descendant.

        An account is kept if it has a non-zero balance in any currency, or
        if it is an ancestor of a kept account. Headers are always kept and
        the order of surviving items is unchanged.

        Args:
            items: Header and account nodes, each after its ancestors
            include_zero: If True, return the items unchanged

        Returns:
            Filtered list

        Raises:
            HierarchyOrderError: If an account precedes its nearest present
                ancestor
        """
        if include_zero or not items:
            return list(items)

        self.check_order(items)

        # Descendants follow their ancestors, so walking backwards settles
        # every child before its parent is decided.
        needed: set[str] = set()
        kept: list[AccountListItem] = []
        for item in reversed(items):
            if isinstance(item, AccountListHeader):
                kept.append(item)
                continue
            if not isinstance(item, AccountNode):
                raise TypeError(f"Unknown account list item: {item!r}")

            if item.account.has_non_zero_balance or item.name in needed:
                kept.append(item)
                ancestor = item.account.parent_name
                while ancestor is not None and ancestor not in needed:
                    needed.add(ancestor)
                    ancestor = parent_account_name(ancestor)

        kept.reverse()
        return kept

    def check_order(self, items: Sequence[AccountListItem]) -> None:
        """Verify every account comes after its ancestors.

        Only the nearest ancestor present in the list is checked; earlier
        ancestors follow by induction. Siblings and unrelated accounts may
        sit between an ancestor and its descendants, so a plain name sort
        (``Assets``, ``Assets2``, ``Assets:Bank``) is accepted.

        Raises:
            HierarchyOrderError: On the first account preceding its ancestor
        """
        names = {item.name for item in items if isinstance(item, AccountNode)}

        seen: set[str] = set()
        for item in items:
            if not isinstance(item, AccountNode):
                continue
            name = item.name
            nearest = _nearest_present_ancestor(name, names)
            if nearest is not None and nearest not in seen:
                raise HierarchyOrderError(account_order_violation(name, nearest))
            seen.add(name)

    def build_account_list(
        self,
        accounts: Sequence[Account],
        expansion: Optional[ExpansionSnapshot] = None,
        include_zero: bool = True,
    ) -> list[AccountListItem]:
        """Resolve accounts and prepend the list header.

        Args:
            accounts: Flat account list sorted by name
            expansion: Expansion state from the previous pass
            include_zero: If False, prune zero-balance subtrees

        Returns:
            Header followed by the resolved (and possibly pruned) nodes
        """
        items: list[AccountListItem] = [AccountListHeader()]
        items.extend(self.resolve(accounts, expansion))
        return self.filter_zero_balance(items, include_zero)


def _nearest_present_ancestor(name: str, names: set[str]) -> Optional[str]:
    ancestor = parent_account_name(name)
    while ancestor is not None:
        if ancestor in names:
            return ancestor
        ancestor = parent_account_name(ancestor)
    return None


def sort_accounts(accounts: Sequence[Account]) -> list[Account]:
    """Sort accounts so that every parent precedes its descendants.

    Names are compared segment by segment, case-insensitively, so that
    ``Assets:Bank`` sorts before ``Assets-Old`` even though ``-`` sorts
    before ``:`` character-wise.
    """
    return sorted(
        accounts,
        key=lambda a: [segment.casefold() for segment in a.name.split(ACCOUNT_SEPARATOR)],
    )
