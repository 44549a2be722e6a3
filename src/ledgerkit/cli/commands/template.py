"""Template commands."""

import json

import click

from ledgerkit.cli.error_handling import get_source, handle_domain_error
from ledgerkit.domain.errors import NotFoundError, no_template_matched, template_not_found
from ledgerkit.domain.template_matching import TemplateMatcher, order_templates
from ledgerkit.sources.mappers import draft_to_dict
from ledgerkit.utils.date_parser import parse_date


@click.group()
def template_group():
    """Extract transaction drafts from text with saved templates."""
    pass


@template_group.command("list")
@click.pass_context
def list_templates(ctx):
    """List templates in matching order."""
    source = get_source(ctx)
    templates = order_templates(source.list_templates())
    if not templates:
        click.echo("No templates found.")
        return

    click.echo("\nTemplates:")
    click.echo("-" * 60)
    for tpl in templates:
        fallback = " (fallback)" if tpl.is_fallback else ""
        click.echo(f"{tpl.name:20s} | {tpl.pattern}{fallback}")


@template_group.command("apply")
@click.argument("text")
@click.option("--template", "template_name", help="Apply only this template (by name)")
@click.option("--currency", default="", help="Currency for lines whose template sets none")
@click.option("--today", "today_str", help="Reference date for missing month/day (default: today)")
@click.option("--json", "as_json", is_flag=True, help="Print the draft as JSON")
@click.pass_context
def apply_template(
    ctx,
    text: str,
    template_name: str | None,
    currency: str,
    today_str: str | None,
    as_json: bool,
):
    """Extract a transaction draft from TEXT.

    Without --template, templates are tried in order (regular templates
    first, then fallbacks) and the first match is used.

    Examples:
        ledgerkit template apply "PAID 1,500.00 AT ACME 2026-03-14"
        ledgerkit template apply "..." --template Receipt --json
    """
    source = get_source(ctx)

    today = None
    if today_str:
        try:
            today = parse_date(today_str)
        except ValueError as e:
            click.echo(f"Error: Invalid reference date: {e}", err=True)
            ctx.exit(1)

    matcher = TemplateMatcher(default_currency=currency)
    if today is not None:
        matcher.today = lambda: today

    if template_name is not None:
        tpl = source.get_template(template_name)
        if tpl is None:
            handle_domain_error(ctx, NotFoundError(template_not_found(template_name)))
        draft = matcher.apply(tpl, text)
    else:
        draft = matcher.apply_first(text, source.list_templates())

    if draft is None:
        handle_domain_error(ctx, NotFoundError(no_template_matched()))

    if as_json:
        click.echo(json.dumps(draft_to_dict(draft), indent=2))
        return

    click.echo(f"Template:    {draft.template_name}")
    click.echo(f"Date:        {draft.date.isoformat()}")
    click.echo(f"Description: {draft.description}")
    if draft.comment:
        click.echo(f"Comment:     {draft.comment}")
    for line in draft.lines:
        amount = "(balance)" if line.amount is None else f"{line.amount:,.2f}"
        if line.currency:
            amount = f"{line.currency} {amount}"
        comment = f"  ; {line.comment}" if line.comment else ""
        click.echo(f"  {line.account_name:40s} {amount}{comment}")


@template_group.command("check")
@click.argument("pattern")
@click.option("--text", help="Sample text to match against")
@click.pass_context
def check_pattern(ctx, pattern: str, text: str | None):
    """Validate a template PATTERN and show what it matches."""
    check = TemplateMatcher().validate_pattern(pattern, text)
    if not check.is_valid:
        click.echo(f"Error: Invalid pattern: {check.error}", err=True)
        ctx.exit(1)

    click.echo(f"Pattern is valid ({check.group_count} groups)")
    if text:
        if check.match_span is None:
            click.echo("No match in sample text")
        else:
            start, end = check.match_span
            click.echo(f"Matched: '{text[start:end]}' at {start}-{end}")


def register_commands(cli: click.Group) -> None:
    """Register template commands with main CLI."""
    cli.add_command(template_group, name="template")
