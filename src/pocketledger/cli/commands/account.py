"""Account management commands."""

import click

from pocketledger.cli.error_handling import format_money, handle_domain_error, save_or_exit
from pocketledger.domain.errors import DomainError
from pocketledger.domain.ledger import DEFAULT_ACCOUNT


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.pass_context
def create_account(ctx, name: str):
    """Create a new, empty account.

    Examples:
        pocketledger account create "Savings"
    """
    ledger = ctx.obj["ledger"]
    try:
        ledger.create_account(name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    save_or_exit(ctx, ledger)
    click.echo(f"Created account '{name}'")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts with their balances."""
    ledger = ctx.obj["ledger"]

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for name, acc in ledger.accounts.items():
        marker = "*" if name == ledger.current_account.name else " "
        click.echo(
            f"{marker} {name:20s} | {len(acc):4d} entries | "
            f"{format_money(acc.cached_balance, ledger.base_currency)}"
        )


@account_group.command("rename")
@click.argument("old_name", metavar="ACCOUNT")
@click.argument("new_name", metavar="NEW_NAME")
@click.pass_context
def rename_account(ctx, old_name: str, new_name: str) -> None:
    """Rename an account.

    Renaming the default account moves its entries to NEW_NAME and keeps
    an empty default account.

    Examples:
        pocketledger account rename "Cash" "Wallet"
    """
    ledger = ctx.obj["ledger"]
    try:
        ledger.rename_account(old_name, new_name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    save_or_exit(ctx, ledger)
    click.echo(f"Renamed account '{old_name}' to '{new_name}'")
    if old_name == DEFAULT_ACCOUNT:
        click.echo(f"Account '{DEFAULT_ACCOUNT}' is kept, now empty")


@account_group.command("delete")
@click.argument("name", metavar="ACCOUNT")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, name: str, yes: bool) -> None:
    """Delete an account together with its entries.

    Examples:
        pocketledger account delete "Old card"
    """
    ledger = ctx.obj["ledger"]
    try:
        acc = ledger.account(name)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{name}' ({len(acc)} entries)?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        ledger.delete_account(name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    save_or_exit(ctx, ledger)
    click.echo(f"Deleted account '{name}'")


@account_group.command("merge")
@click.argument("target", metavar="TARGET")
@click.argument("source", metavar="SOURCE")
@click.pass_context
def merge_accounts(ctx, target: str, source: str) -> None:
    """Move every entry of SOURCE into TARGET.

    SOURCE is kept as an empty account. Nothing moves if any entry id of
    SOURCE already exists in TARGET.
    """
    ledger = ctx.obj["ledger"]
    try:
        moved = len(ledger.account(source))
        ledger.merge_accounts(target, source)
    except DomainError as e:
        handle_domain_error(ctx, e)
    save_or_exit(ctx, ledger)
    click.echo(f"Moved {moved} entries from '{source}' to '{target}'")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
