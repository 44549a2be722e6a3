"""Main CLI entry point."""

import logging

import click

# Import and register all commands at module level
from ledgerkit.cli.commands import accounts, template, transactions


@click.group()
@click.option(
    "--data-path",
    type=click.Path(),
    help="Path to ledger JSON file (overrides LEDGERKIT_DATA_PATH environment variable)",
    envvar="LEDGERKIT_DATA_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, data_path: str | None, verbose: bool):
    """Ledgerkit - ledger account tree, transaction history and templates.

    Reads a ledger JSON document exported by the storage layer and renders
    account trees, account histories with running totals, and transaction
    drafts extracted from free text by templates.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    # The ledger file is loaded lazily by the commands that need it
    ctx.obj["data_path"] = data_path


# Register all commands
accounts.register_commands(cli)
transactions.register_commands(cli)
template.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
