"""Report commands."""

import click

from pocketledger.cli.error_handling import format_money, handle_domain_error
from pocketledger.domain.errors import DomainError


def _totals_row(label: str, totals, currency: str) -> str:
    return (
        f"{label:20s} | {format_money(totals.income, currency):>18s} | "
        f"{format_money(totals.expenses, currency):>18s} | "
        f"{format_money(totals.net, currency):>18s}"
    )


def _totals_header() -> str:
    return f"{'':20s} | {'Income':>18s} | {'Expenses':>18s} | {'Net':>18s}"


@click.group()
def report_group():
    """Show reports converted into the base currency."""
    pass


@report_group.command("total")
@click.pass_context
def total_report(ctx):
    """Income, expenses and net over every account."""
    ledger = ctx.obj["ledger"]
    try:
        totals = ledger.total_balance()
    except DomainError as e:
        handle_domain_error(ctx, e)

    currency = ledger.base_currency
    click.echo(f"Income:   {format_money(totals.income, currency)}")
    click.echo(f"Expenses: {format_money(totals.expenses, currency)}")
    click.echo(f"Balance:  {format_money(totals.net, currency)}")


@report_group.command("category")
@click.pass_context
def category_report(ctx):
    """Totals per category."""
    ledger = ctx.obj["ledger"]
    try:
        grouped = ledger.by_category()
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not grouped:
        click.echo("No entries found.")
        return
    click.echo(_totals_header())
    for category, totals in grouped.items():
        click.echo(_totals_row(category, totals, ledger.base_currency))


@report_group.command("month")
@click.pass_context
def month_report(ctx):
    """Totals per calendar month."""
    ledger = ctx.obj["ledger"]
    try:
        grouped = ledger.by_month()
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not grouped:
        click.echo("No entries found.")
        return
    click.echo(_totals_header())
    for (year, month), totals in grouped.items():
        click.echo(_totals_row(f"{year:04d}-{month:02d}", totals, ledger.base_currency))


@report_group.command("currency")
@click.pass_context
def currency_report(ctx):
    """Entry count and net amount per entry currency."""
    ledger = ctx.obj["ledger"]
    try:
        grouped = ledger.by_currency()
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not grouped:
        click.echo("No entries found.")
        return
    for code, breakdown in grouped.items():
        click.echo(
            f"{code} | {breakdown.entry_count:4d} entries | "
            f"{format_money(breakdown.native_net, code):>18s} | "
            f"{format_money(breakdown.base_net, ledger.base_currency):>18s}"
        )


@report_group.command("account")
@click.argument("name", required=False)
@click.pass_context
def account_report(ctx, name: str | None):
    """Statistics for one account (the default account if NAME is omitted)."""
    ledger = ctx.obj["ledger"]
    try:
        stats = ledger.account_stats(name)
        consistent = ledger.validate_account(stats.name)
    except DomainError as e:
        handle_domain_error(ctx, e)

    currency = ledger.base_currency
    click.echo(f"Account:  {stats.name}")
    click.echo(f"Entries:  {stats.entry_count}")
    click.echo(f"Income:   {format_money(stats.income, currency)}")
    click.echo(f"Expenses: {format_money(stats.expenses, currency)}")
    click.echo(f"Balance:  {format_money(stats.balance, currency)}")
    if not consistent:
        click.echo("Warning: cached balance is out of date", err=True)


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
