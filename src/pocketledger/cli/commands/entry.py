"""Entry commands: add, remove, list and tag search."""

import click

from pocketledger.cli.error_handling import handle_domain_error, save_or_exit
from pocketledger.domain.entry import Direction
from pocketledger.domain.errors import DomainError
from pocketledger.utils.amount_parser import parse_amount
from pocketledger.utils.date_parser import parse_date


@click.command("add")
@click.option("--amount", required=True, help="Positive amount (e.g., 123.45)")
@click.option("--category", required=True, help="Category name")
@click.option(
    "--income/--expense",
    "is_income",
    default=False,
    help="Record income instead of an expense (default: expense)",
)
@click.option(
    "--date",
    "date_str",
    default="today",
    help="Entry date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--description", help="Entry description")
@click.option("--currency", help="Currency code (defaults to the base currency)")
@click.option("--tag", "tags", multiple=True, help="Tag (repeat for up to five tags)")
@click.option("--account", help="Account name (defaults to the default account)")
@click.pass_context
def add_entry(
    ctx,
    amount: str,
    category: str,
    is_income: bool,
    date_str: str,
    description: str | None,
    currency: str | None,
    tags: tuple[str, ...],
    account: str | None,
):
    """Add an income or expense entry.

    Examples:
        pocketledger add --amount 12.50 --category Food --tag lunch
        pocketledger add --amount 1000 --category Salary --income --currency USD
    """
    ledger = ctx.obj["ledger"]
    try:
        entry = ledger.new_entry(
            amount=parse_amount(amount),
            category=category,
            direction=Direction.CREDIT if is_income else Direction.DEBIT,
            date=parse_date(date_str),
            description=description,
            currency=currency,
            tags=tags,
        )
        target = ledger.add_entry(entry, account=account)
    except DomainError as e:
        handle_domain_error(ctx, e)

    save_or_exit(ctx, ledger)
    click.echo(f"Created entry {entry.id}")
    click.echo(f"  Account: {target.name}")
    click.echo(f"  {entry.summary()}")
    if entry.tags:
        click.echo(f"  Tags: {', '.join(entry.tags)}")


@click.command("remove")
@click.argument("entry_id", type=int)
@click.option("--account", help="Account name (defaults to the default account)")
@click.pass_context
def remove_entry(ctx, entry_id: int, account: str | None):
    """Remove an entry by ID."""
    ledger = ctx.obj["ledger"]
    try:
        removed = ledger.remove_entry(entry_id, account=account)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not removed:
        click.echo(f"Error: Entry {entry_id} not found", err=True)
        ctx.exit(1)
    save_or_exit(ctx, ledger)
    click.echo(f"Removed entry {entry_id}")


@click.command("list")
@click.option("--account", help="Account name (defaults to the default account)")
@click.option("--income", "only", flag_value="income", help="Show only income")
@click.option("--expense", "only", flag_value="expense", help="Show only expenses")
@click.pass_context
def list_entries(ctx, account: str | None, only: str | None):
    """List the entries of an account."""
    ledger = ctx.obj["ledger"]
    try:
        if only is None:
            entries = list(ledger.account(account).entries)
        else:
            direction = Direction.CREDIT if only == "income" else Direction.DEBIT
            entries = ledger.entries_by_direction(direction, account=account)
        name = ledger.account(account).name
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not entries:
        click.echo("No entries found.")
        return

    click.echo(f"\n{name} ({len(entries)} entries):")
    click.echo("-" * 80)
    for item in entries:
        click.echo(f"{item.id:5d} | {item.summary()}")


@click.command("search")
@click.option("--tag", "tags", multiple=True, required=True, help="Tag to match (repeatable)")
@click.pass_context
def search_entries(ctx, tags: tuple[str, ...]):
    """Find entries carrying any of the given tags, across all accounts."""
    ledger = ctx.obj["ledger"]
    matches = ledger.search_by_tags(tags)

    if not matches:
        click.echo("No entries found.")
        return

    for match in matches:
        click.echo(f"{match.entry.id:5d} | {match.account_name:15s} | {match.entry.summary()}")


def register_commands(cli):
    """Register entry commands with main CLI."""
    cli.add_command(add_entry)
    cli.add_command(remove_entry)
    cli.add_command(list_entries)
    cli.add_command(search_entries)
