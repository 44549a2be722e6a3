"""Domain layer for ledgerkit."""

from ledgerkit.domain.account_hierarchy import AccountHierarchyResolver
from ledgerkit.domain.latest_only import CancellationToken, LatestOnlyRunner
from ledgerkit.domain.template_matching import TemplateMatcher
from ledgerkit.domain.transaction_list import TransactionAccumulator, accumulate

__all__ = [
    "AccountHierarchyResolver",
    "CancellationToken",
    "LatestOnlyRunner",
    "TemplateMatcher",
    "TransactionAccumulator",
    "accumulate",
]
