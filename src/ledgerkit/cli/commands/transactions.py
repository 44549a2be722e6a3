"""Transaction history commands."""

import click

from ledgerkit.cli.error_handling import get_source
from ledgerkit.domain.entities import (
    DateDelimiter,
    TransactionItem,
    TransactionListHeader,
    is_in_account_subtree,
)
from ledgerkit.domain.transaction_list import accumulate


def _echo_transaction(item: TransactionItem) -> None:
    txn = item.transaction
    click.echo(f"  #{txn.ledger_id} {txn.description}")
    if txn.comment:
        click.echo(f"    ; {txn.comment}")

    for line in txn.lines:
        amount = ""
        if line.amount is not None:
            amount = f"{line.amount:,.2f}"
            if line.currency:
                amount = f"{line.currency} {amount}"
        text = f"    {line.account_name:40s} {amount}"
        if item.bold_account_name and is_in_account_subtree(
            item.bold_account_name, line.account_name
        ):
            text = click.style(text, bold=True)
        click.echo(text)

    if item.running_total is not None:
        for total in item.running_total.splitlines():
            click.echo(f"    {'= running total':40s} {total}")


@click.command("transactions")
@click.option(
    "--account",
    "account_filter",
    help="Only show transactions touching accounts containing this text; "
    "adds running totals",
)
@click.pass_context
def list_transactions(ctx, account_filter: str | None):
    """Show transactions by date.

    Examples:
        ledgerkit transactions
        ledgerkit transactions --account Assets:Cash
    """
    source = get_source(ctx)
    transactions = source.list_transactions()

    items = accumulate(transactions, account_filter=account_filter)
    if len(items) <= 1:
        click.echo("No transactions found.")
        return

    for item in items:
        if isinstance(item, TransactionListHeader):
            click.echo(item.status or "Transactions:")
        elif isinstance(item, DateDelimiter):
            if item.is_month_shown:
                click.echo(f"\n== {item.date:%B %Y} ==")
            click.echo(item.date.isoformat())
        elif isinstance(item, TransactionItem):
            _echo_transaction(item)
        else:
            raise TypeError(f"Unknown display item: {item!r}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(list_transactions, name="transactions")
