"""Abstract ledger source interface."""

from abc import ABC, abstractmethod
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerkit.domain.entities import Account, Template, Transaction


class LedgerSource(ABC):
    """Abstract provider of already-typed ledger records."""

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts, sorted parent-before-descendants."""
        pass

    @abstractmethod
    def list_transactions(self, account_filter: Optional[str] = None) -> list[Transaction]:
        """List transactions in ascending date order.

        Args:
            account_filter: Optional case-insensitive account name fragment
        """
        pass

    @abstractmethod
    def list_templates(self) -> list[Template]:
        """List all templates."""
        pass

    def get_template(self, name: str) -> Optional[Template]:
        """Get template by name (case-insensitive)."""
        wanted = name.casefold()
        for template in self.list_templates():
            if template.name.casefold() == wanted:
                return template
        return None
