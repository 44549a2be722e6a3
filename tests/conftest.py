"""Shared pytest fixtures for ledgerkit tests."""

import json
from datetime import date

import pytest

from ledgerkit.domain.account_hierarchy import AccountHierarchyResolver
from ledgerkit.domain.entities import (
    Account,
    AccountAmount,
    Template,
    TemplateLine,
    Transaction,
    TransactionLine,
)
from ledgerkit.domain.template_matching import TemplateMatcher

FIXED_TODAY = date(2026, 10, 17)


def make_account(account_id: int, name: str, *amounts) -> Account:
    """Build an account; amounts are (currency, amount) pairs or bare numbers."""
    balances = []
    for amount in amounts:
        if isinstance(amount, tuple):
            balances.append(AccountAmount(currency=amount[0], amount=amount[1]))
        else:
            balances.append(AccountAmount(currency="", amount=amount))
    return Account(id=account_id, name=name, amounts=tuple(balances))


def make_transaction(ledger_id: int, txn_date: date, description: str, *lines) -> Transaction:
    """Build a transaction; lines are (account, amount[, currency]) tuples."""
    return Transaction(
        ledger_id=ledger_id,
        date=txn_date,
        description=description,
        lines=tuple(
            TransactionLine(
                account_name=line[0],
                amount=line[1],
                currency=line[2] if len(line) > 2 else "",
            )
            for line in lines
        ),
    )


@pytest.fixture
def resolver():
    """Create an AccountHierarchyResolver."""
    return AccountHierarchyResolver()


@pytest.fixture
def matcher():
    """Create a TemplateMatcher with a fixed reference date."""
    return TemplateMatcher(default_currency="EUR", today=lambda: FIXED_TODAY)


@pytest.fixture
def sample_accounts():
    """Accounts sorted parent-before-descendants."""
    return [
        make_account(1, "Assets", 0),
        make_account(2, "Assets:Bank", 0),
        make_account(3, "Assets:Bank:Checking", 100),
        make_account(4, "Assets:Cash", 0),
        make_account(5, "Expenses"),
        make_account(6, "Expenses:Food", ("EUR", 25.5)),
        make_account(7, "Expenses:Rent", ("EUR", 0), ("USD", 0)),
    ]


@pytest.fixture
def sample_transactions():
    """Transactions in ascending date order."""
    return [
        make_transaction(
            1, date(2026, 1, 5), "Salary", ("Assets:Cash", 100.0), ("Income:Salary", None)
        ),
        make_transaction(
            2, date(2026, 1, 5), "Groceries", ("Expenses:Food", 30.0), ("Assets:Cash", -30.0)
        ),
        make_transaction(
            3, date(2026, 1, 20), "Rent", ("Expenses:Rent", 500.0), ("Assets:Bank", -500.0)
        ),
        make_transaction(
            4, date(2026, 2, 1), "Lunch", ("Expenses:Food", 12.5), ("Assets:Cash", -12.5)
        ),
    ]


@pytest.fixture
def receipt_template():
    """Template extracting amount, shop and full date from a receipt line."""
    return Template(
        name="Receipt",
        pattern=r"PAID (?P<amount>[\d., ]+) AT (?P<shop>\w+) ON (\d{4})-(\d{2})-(\d{2})",
        description_group=2,
        date_year_group=3,
        date_month_group=4,
        date_day_group=5,
        lines=(
            TemplateLine(account_name="Expenses:Shopping", amount_group=1),
            TemplateLine(account_name="Assets:Cash", amount_group=1, negate_amount=True),
        ),
    )


@pytest.fixture
def ledger_document():
    """Plain ledger document as exported by the storage layer."""
    return {
        "accounts": [
            {"id": 3, "name": "Assets:Cash", "amounts": [{"currency": "EUR", "amount": 57.5}]},
            {"id": 1, "name": "Assets", "amounts": [{"currency": "EUR", "amount": 0}]},
            {"id": 2, "name": "Assets:Bank", "amounts": [{"currency": "EUR", "amount": 0}]},
            {"id": 4, "name": "Expenses", "amounts": []},
            {"id": 5, "name": "Expenses:Food", "amounts": [{"currency": "EUR", "amount": 42.5}]},
        ],
        "transactions": [
            {
                "ledger_id": 2,
                "date": "2026-01-06",
                "description": "Groceries",
                "lines": [
                    {"account_name": "Expenses:Food", "amount": 30, "currency": "EUR"},
                    {"account_name": "Assets:Cash", "amount": -30, "currency": "EUR"},
                ],
            },
            {
                "ledger_id": 1,
                "date": "2026-01-05",
                "description": "Cash withdrawal",
                "lines": [
                    {"account_name": "Assets:Cash", "amount": 100, "currency": "EUR"},
                    {"account_name": "Assets:Bank", "currency": "EUR"},
                ],
            },
        ],
        "templates": [
            {
                "name": "Catch-all",
                "pattern": r"(\d+)",
                "is_fallback": True,
                "description": "Unknown payment",
                "date_year": 2026,
                "lines": [{"account_name": "Expenses:Unknown", "amount_group": 1}],
            },
            {
                "name": "Receipt",
                "pattern": r"PAID ([\d.,]+) AT (\w+) ON (\d{4})-(\d{2})-(\d{2})",
                "description_group": 2,
                "date_year_group": 3,
                "date_month_group": 4,
                "date_day_group": 5,
                "lines": [
                    {"account_name": "Expenses:Shopping", "amount_group": 1},
                    {"account_name": "Assets:Cash", "amount_group": 1, "negate_amount": True},
                ],
            },
        ],
    }


@pytest.fixture
def ledger_file(tmp_path, ledger_document):
    """Write the ledger document to a temporary JSON file and return its path."""
    path = tmp_path / "ledger.json"
    path.write_text(json.dumps(ledger_document), encoding="utf-8")
    return str(path)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
