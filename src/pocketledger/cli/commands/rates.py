"""Exchange rate commands."""

import click

from pocketledger.cli.error_handling import format_money, handle_domain_error
from pocketledger.domain.errors import DomainError
from pocketledger.rates.source import CBR_DAILY_URL, CbrRateSource
from pocketledger.utils.amount_parser import parse_amount


@click.group()
def rates_group():
    """Fetch, show and use exchange rates."""
    pass


@rates_group.command("refresh")
@click.option(
    "--url",
    default=CBR_DAILY_URL,
    show_default=True,
    help="Rate source URL",
    envvar="POCKETLEDGER_RATES_URL",
)
@click.pass_context
def refresh_rates(ctx, url: str):
    """Download current rates, falling back to the local cache."""
    ledger = ctx.obj["ledger"]
    if ledger.refresh_rates(CbrRateSource(url=url)):
        click.echo(f"Rates updated: {len(ledger.rates)} currencies")
    else:
        click.echo("Error: Could not fetch rates and no usable cache found", err=True)
        ctx.exit(1)


@rates_group.command("show")
@click.pass_context
def show_rates(ctx):
    """Show the rates currently in use."""
    ledger = ctx.obj["ledger"]
    if len(ledger.rates) == 0:
        click.echo("No rates loaded. Run 'pocketledger rates refresh'.")
        return
    for code in ledger.rates.currencies():
        click.echo(f"{code}: {ledger.rates.rate(code)}")


@rates_group.command("convert")
@click.argument("amount")
@click.argument("from_code", metavar="FROM")
@click.argument("to_code", metavar="TO", required=False)
@click.pass_context
def convert_amount(ctx, amount: str, from_code: str, to_code: str | None):
    """Convert AMOUNT from one currency to another (base currency by default)."""
    ledger = ctx.obj["ledger"]
    target = to_code or ledger.base_currency
    try:
        result = ledger.convert(parse_amount(amount), from_code, target)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(format_money(result, target))


def register_commands(cli):
    """Register rate commands with main CLI."""
    cli.add_command(rates_group, name="rates")
