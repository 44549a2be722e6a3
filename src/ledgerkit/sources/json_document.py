"""Ledger source backed by an in-memory JSON document."""

from typing import Any, Optional

from ledgerkit.domain.account_hierarchy import sort_accounts
from ledgerkit.domain.entities import Account, Template, Transaction
from ledgerkit.domain.errors import ValidationError
from ledgerkit.sources.base import LedgerSource
from ledgerkit.sources.mappers import (
    account_from_dict,
    template_from_dict,
    transaction_from_dict,
)


class JsonLedgerSource(LedgerSource):
    """Ledger source reading a decoded JSON document.

    The document has the shape::

        {"accounts": [...], "transactions": [...], "templates": [...]}

    Every section is optional. Records are mapped once, on construction.
    """

    def __init__(self, document: dict[str, Any]):
        """Initialize source.

        Args:
            document: Decoded JSON document

        Raises:
            ValidationError: If the document or one of its records is malformed
        """
        if not isinstance(document, dict):
            raise ValidationError("Ledger document must be a JSON object")

        self._accounts = sort_accounts(
            [account_from_dict(item) for item in document.get("accounts", [])]
        )
        # sorted() is stable, so same-day transactions keep document order
        self._transactions = sorted(
            (transaction_from_dict(item) for item in document.get("transactions", [])),
            key=lambda txn: txn.date,
        )
        self._templates = [template_from_dict(item) for item in document.get("templates", [])]

    def list_accounts(self) -> list[Account]:
        return list(self._accounts)

    def list_transactions(self, account_filter: Optional[str] = None) -> list[Transaction]:
        if account_filter is None:
            return list(self._transactions)
        return [txn for txn in self._transactions if txn.has_account_named(account_filter)]

    def list_templates(self) -> list[Template]:
        return list(self._templates)
