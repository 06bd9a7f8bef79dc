"""Main CLI entry point."""

import logging

import click

from pocketledger.cli.commands import account, entry, rates, report
from pocketledger.cli.error_handling import handle_domain_error
from pocketledger.domain.entry import DEFAULT_CURRENCY
from pocketledger.domain.errors import DomainError
from pocketledger.domain.ledger import Ledger
from pocketledger.storage.factories import create_store, resolve_rates_path


@click.group()
@click.option(
    "--data-path",
    type=click.Path(),
    help="Path to ledger file (overrides POCKETLEDGER_DATA_PATH environment variable)",
    envvar="POCKETLEDGER_DATA_PATH",
)
@click.option(
    "--rates-path",
    type=click.Path(),
    help="Path to rate cache file (overrides POCKETLEDGER_RATES_PATH environment variable)",
    envvar="POCKETLEDGER_RATES_PATH",
)
@click.option(
    "--base-currency",
    default=DEFAULT_CURRENCY,
    show_default=True,
    help="Currency balances and reports are expressed in",
    envvar="POCKETLEDGER_BASE_CURRENCY",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, data_path: str | None, rates_path: str | None, base_currency: str, verbose: bool):
    """Pocketledger - multi-currency personal finance ledger.

    Keep income and expenses in several named accounts and currencies,
    and report totals converted into a base currency.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Load the ledger only when actually running a command (not for --help)
    if ctx.invoked_subcommand is not None:
        try:
            ledger = Ledger(
                base_currency=base_currency,
                cache_path=resolve_rates_path(rates_path),
            )
            ledger.load_cached_rates()
            store = create_store(data_path)
            store.load(ledger)
        except DomainError as e:
            handle_domain_error(ctx, e)
        ctx.obj["ledger"] = ledger
        ctx.obj["store"] = store


# Register all commands
account.register_commands(cli)
entry.register_commands(cli)
report.register_commands(cli)
rates.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
