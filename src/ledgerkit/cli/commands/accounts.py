"""Account tree commands."""

import click

from ledgerkit.cli.error_handling import get_source, handle_domain_error
from ledgerkit.domain.account_hierarchy import AccountHierarchyResolver
from ledgerkit.domain.entities import AccountListHeader, AccountNode
from ledgerkit.domain.errors import DomainError


def _format_amounts(node: AccountNode) -> str:
    parts = []
    for amount in node.account.amounts:
        value = f"{amount.amount:,.2f}"
        parts.append(f"{amount.currency} {value}" if amount.currency else value)
    return ", ".join(parts)


@click.command("accounts")
@click.option(
    "--zero/--no-zero",
    "include_zero",
    default=True,
    help="Show accounts with zero balance (default) or prune them",
)
@click.option(
    "--collapse",
    multiple=True,
    metavar="ACCOUNT",
    help="Collapse an account, hiding its sub-accounts (repeatable)",
)
@click.pass_context
def list_accounts(ctx, include_zero: bool, collapse: tuple[str, ...]):
    """Show the account tree with balances.

    Examples:
        ledgerkit accounts
        ledgerkit accounts --no-zero
        ledgerkit accounts --collapse Expenses --collapse Assets:Bank
    """
    source = get_source(ctx)
    resolver = AccountHierarchyResolver()

    expansion = {}
    for name in collapse:
        expansion = resolver.toggle_expanded(expansion, name)

    try:
        items = resolver.build_account_list(
            source.list_accounts(), expansion, include_zero=include_zero
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    items = resolver.visible_nodes(items, expansion)
    if len(items) <= 1:
        click.echo("No accounts found.")
        return

    for item in items:
        if isinstance(item, AccountListHeader):
            click.echo("\nAccounts:")
            click.echo("-" * 60)
        elif isinstance(item, AccountNode):
            marker = " "
            if item.has_sub_accounts:
                marker = "-" if item.account.is_expanded else "+"
            label = "  " * item.account.level + item.account.short_name
            click.echo(f"{marker} {label:40s} {_format_amounts(item)}")
        else:
            raise TypeError(f"Unknown account list item: {item!r}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(list_accounts, name="accounts")
