"""CLI error handling helpers."""

import click

from pocketledger.domain.errors import DomainError
from pocketledger.domain.ledger import Ledger


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def save_or_exit(ctx: click.Context, ledger: Ledger) -> None:
    """Persist the ledger through the store on the context, or exit with a CLI error."""
    try:
        ctx.obj["store"].save(ledger)
    except DomainError as e:
        handle_domain_error(ctx, e)


def format_money(amount, currency: str) -> str:
    return f"{amount:,.2f} {currency}"
