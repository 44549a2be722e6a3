"""Domain model entities for ledgerkit.

These are pure data classes representing ledger concepts, independent of
how the storage or sync layers keep them. Every engine in the domain layer
consumes and produces these records and never mutates them in place.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Union

from ledgerkit.domain.errors import ValidationError

ACCOUNT_SEPARATOR = ":"

# Absolute balance below which a currency is considered balanced.
BALANCE_EPSILON = 0.005


@dataclass(frozen=True)
class AccountAmount:
    """Balance of an account in a single currency."""

    currency: str
    amount: float


@dataclass(frozen=True)
class Account:
    """Ledger account with a colon-delimited hierarchical name."""

    id: int
    name: str
    amounts: tuple[AccountAmount, ...] = ()
    is_expanded: bool = True
    amounts_expanded: bool = False

    @property
    def level(self) -> int:
        """Depth in the tree; top-level accounts are level 0."""
        return self.name.count(ACCOUNT_SEPARATOR)

    @property
    def parent_name(self) -> Optional[str]:
        """Name of the parent account, or None at top level."""
        return parent_account_name(self.name)

    @property
    def short_name(self) -> str:
        """Last segment of the account name."""
        return self.name.rsplit(ACCOUNT_SEPARATOR, 1)[-1]

    @property
    def has_amounts(self) -> bool:
        return len(self.amounts) > 0

    @property
    def has_non_zero_balance(self) -> bool:
        """True if any currency balance differs from zero.

        An account without amounts counts as all-zero.
        """
        return any(amount.amount != 0 for amount in self.amounts)


@dataclass(frozen=True)
class ExpansionState:
    """Presentation flags carried across resolution passes."""

    is_expanded: bool = True
    amounts_expanded: bool = False


@dataclass(frozen=True)
class AccountListHeader:
    """Header row of an account list."""


@dataclass(frozen=True)
class AccountNode:
    """Account wrapped with its derived tree linkage."""

    account: Account
    has_sub_accounts: bool = False

    @property
    def name(self) -> str:
        return self.account.name


AccountListItem = Union[AccountListHeader, AccountNode]


@dataclass(frozen=True)
class TransactionLine:
    """One account line (posting) of a transaction.

    A line without an amount is a balance receiver: it takes whatever value
    balances the rest of the transaction in its currency.
    """

    account_name: str
    amount: Optional[float] = None
    currency: str = ""
    comment: Optional[str] = None


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    ledger_id: int
    date: date
    description: str
    lines: tuple[TransactionLine, ...]
    comment: Optional[str] = None
    id: Optional[int] = None

    def __post_init__(self):
        if not self.lines:
            raise ValidationError(
                f"Transaction {self.ledger_id} must have at least one line"
            )

    def has_account_named(self, fragment: str) -> bool:
        """Check whether any line's account name contains ``fragment``.

        The comparison is a case-insensitive substring match.
        """
        needle = fragment.casefold()
        return any(needle in line.account_name.casefold() for line in self.lines)

    @property
    def balance_per_currency(self) -> dict[str, float]:
        """Sum of the explicit amounts per currency.

        Balance receiver lines are ignored.
        """
        balances: dict[str, float] = {}
        for line in self.lines:
            if line.amount is None:
                continue
            balances[line.currency] = balances.get(line.currency, 0.0) + line.amount
        return balances

    @property
    def is_balanced(self) -> bool:
        """True if every currency sums to zero or has exactly one receiver."""
        receivers = self._receivers_per_currency()
        for currency, balance in self.balance_per_currency.items():
            if abs(balance) < BALANCE_EPSILON:
                continue
            if receivers.get(currency, 0) != 1:
                return False
        return True

    def auto_balance_amount(self, currency: str = "") -> Optional[float]:
        """Amount the single receiver line of ``currency`` would take.

        Returns None unless exactly one line in that currency has no amount.
        """
        if self._receivers_per_currency().get(currency, 0) != 1:
            return None
        balance = self.balance_per_currency.get(currency, 0.0)
        return -balance if balance else 0.0

    def _receivers_per_currency(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for line in self.lines:
            if line.amount is None:
                counts[line.currency] = counts.get(line.currency, 0) + 1
        return counts


@dataclass(frozen=True)
class TransactionListHeader:
    """Header row of a transaction list, carrying free-form status text."""

    status: str = ""


@dataclass(frozen=True)
class DateDelimiter:
    """Date separator row emitted before the first transaction of a date."""

    date: date
    is_month_shown: bool


@dataclass(frozen=True)
class TransactionItem:
    """Transaction row of a transaction list."""

    transaction: Transaction
    bold_account_name: Optional[str] = None
    running_total: Optional[str] = None


DisplayItem = Union[TransactionListHeader, DateDelimiter, TransactionItem]


@dataclass(frozen=True)
class TemplateLine:
    """Account line of a template.

    Every ``*_group`` field is a 1-based regex group index; None or 0 means
    the static value next to it is used instead.
    """

    account_name: Optional[str] = None
    account_name_group: Optional[int] = None
    currency: Optional[str] = None
    currency_group: Optional[int] = None
    amount: Optional[float] = None
    amount_group: Optional[int] = None
    negate_amount: bool = False
    comment: Optional[str] = None
    comment_group: Optional[int] = None


@dataclass(frozen=True)
class Template:
    """Saved regex rule turning free text into a transaction draft."""

    name: str
    pattern: str
    id: Optional[int] = None
    version: int = 1
    is_fallback: bool = False
    test_text: Optional[str] = None
    description: Optional[str] = None
    description_group: Optional[int] = None
    comment: Optional[str] = None
    comment_group: Optional[int] = None
    date_year: Optional[int] = None
    date_year_group: Optional[int] = None
    date_month: Optional[int] = None
    date_month_group: Optional[int] = None
    date_day: Optional[int] = None
    date_day_group: Optional[int] = None
    lines: tuple[TemplateLine, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class DraftLine:
    """Account line of a transaction draft."""

    account_name: str
    amount: Optional[float]
    currency: str
    comment: Optional[str] = None


@dataclass(frozen=True)
class TransactionDraft:
    """Transaction assembled from a template match, ready for entry."""

    description: str
    date: date
    lines: tuple[DraftLine, ...]
    comment: Optional[str] = None
    template_name: Optional[str] = None


def parent_account_name(name: str) -> Optional[str]:
    """Return ``name`` without its last colon segment, or None at top level."""
    if ACCOUNT_SEPARATOR not in name:
        return None
    return name.rsplit(ACCOUNT_SEPARATOR, 1)[0]


def is_ancestor_name(ancestor: str, name: str) -> bool:
    """Check whether ``ancestor`` is a strict name-prefix ancestor of ``name``."""
    return name.startswith(ancestor + ACCOUNT_SEPARATOR)


def is_in_account_subtree(root: str, name: str) -> bool:
    """Check whether ``name`` is ``root`` or one of its descendants, ignoring case."""
    root = root.casefold()
    name = name.casefold()
    return name == root or is_ancestor_name(root, name)
