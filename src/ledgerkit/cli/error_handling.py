"""CLI error handling helpers."""

import click

from ledgerkit.domain.errors import DomainError
from ledgerkit.sources.factories import load_json_source


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def get_source(ctx: click.Context):
    """Return the ledger source loaded by the CLI group, or exit on failure."""
    if "source" not in ctx.obj:
        try:
            ctx.obj["source"] = load_json_source(ctx.obj.get("data_path"))
        except DomainError as e:
            handle_domain_error(ctx, e)
    return ctx.obj["source"]
