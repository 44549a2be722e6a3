"""Transaction list domain service.

Builds the chronological display sequence for a transaction list: one header,
then transactions interleaved with date delimiters. When the list is filtered
by an account name, every transaction row also carries the running total of
that account and its sub-accounts after the transaction.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from ledgerkit.domain.entities import (
    DateDelimiter,
    DisplayItem,
    Transaction,
    TransactionItem,
    TransactionListHeader,
    is_in_account_subtree,
)
from ledgerkit.domain.latest_only import CancellationToken
from ledgerkit.utils.number_format import (
    NumberFormatter,
    format_number,
    format_totals,
    to_cents,
)


class TransactionAccumulator:
    """Incrementally accumulate transactions into display items.

    Transactions must be put in ascending date order; the accumulator does
    not re-sort.
    """

    def __init__(
        self,
        account_filter: Optional[str] = None,
        status: str = "",
        formatter: NumberFormatter = format_number,
    ):
        """Initialize accumulator.

        Args:
            account_filter: Case-insensitive account name fragment; only
                transactions with a matching line are kept. Running totals
                cover lines posted to exactly this account or its
                sub-accounts
            status: Status text for the list header
            formatter: Number formatter for running totals
        """
        self.account_filter = account_filter
        self.formatter = formatter
        self._needle = account_filter.casefold() if account_filter is not None else None
        self._items: list[DisplayItem] = [TransactionListHeader(status=status)]
        self._running_total: dict[str, Decimal] = {}
        self._last_date: Optional[date] = None
        self.earliest_date: Optional[date] = None
        self.latest_date: Optional[date] = None
        self.transaction_count = 0

    def matches(self, transaction: Transaction) -> bool:
        """Check whether a transaction passes the account filter."""
        if self._needle is None:
            return True
        return any(self._line_matches(line.account_name) for line in transaction.lines)

    def put(self, transaction: Transaction) -> bool:
        """Add a transaction.

        Returns:
            True if the transaction passed the filter and was added
        """
        if not self.matches(transaction):
            return False

        txn_date = transaction.date
        if self._last_date is None or txn_date != self._last_date:
            show_month = self._last_date is None or (
                (txn_date.year, txn_date.month)
                != (self._last_date.year, self._last_date.month)
            )
            self._items.append(DateDelimiter(date=txn_date, is_month_shown=show_month))
            self._last_date = txn_date

        running_total = None
        if self._needle is not None:
            self._add_to_running_total(transaction)
            running_total = format_totals(self._running_total, self.formatter)

        self._items.append(
            TransactionItem(
                transaction=transaction,
                bold_account_name=self.account_filter,
                running_total=running_total,
            )
        )

        if self.earliest_date is None:
            self.earliest_date = txn_date
        self.latest_date = txn_date
        self.transaction_count += 1
        return True

    def items(self) -> list[DisplayItem]:
        """Return a copy of the display items accumulated so far."""
        return list(self._items)

    @property
    def running_total(self) -> dict[str, Decimal]:
        """Running total per currency after the last added transaction."""
        return dict(self._running_total)

    def _line_matches(self, account_name: str) -> bool:
        return self._needle in account_name.casefold()

    def _add_to_running_total(self, transaction: Transaction) -> None:
        # Sum within the transaction first so multiple matching lines count once
        delta: dict[str, Decimal] = {}
        for line in transaction.lines:
            if not is_in_account_subtree(self.account_filter, line.account_name):
                continue
            delta[line.currency] = delta.get(line.currency, Decimal("0.00")) + to_cents(
                line.amount
            )
        for currency, amount in delta.items():
            self._running_total[currency] = (
                self._running_total.get(currency, Decimal("0.00")) + amount
            )


def accumulate(
    transactions: Iterable[Transaction],
    account_filter: Optional[str] = None,
    cancel: Optional[CancellationToken] = None,
    status: str = "",
    formatter: NumberFormatter = format_number,
) -> list[DisplayItem]:
    """Build the display items for a transaction list.

    Args:
        transactions: Transactions in ascending date order
        account_filter: Optional case-insensitive account name fragment
        cancel: Token checked before every transaction
        status: Status text for the list header
        formatter: Number formatter for running totals

    Returns:
        Header, date delimiters and transaction items in display order

    Raises:
        AccumulationCancelled: If ``cancel`` was triggered; no partial list
            is returned
    """
    accumulator = TransactionAccumulator(
        account_filter=account_filter, status=status, formatter=formatter
    )
    for transaction in transactions:
        if cancel is not None:
            cancel.raise_if_cancelled()
        accumulator.put(transaction)
    if cancel is not None:
        cancel.raise_if_cancelled()
    return accumulator.items()
