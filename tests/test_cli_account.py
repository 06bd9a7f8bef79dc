"""Tests for account CLI commands."""

from pathlib import Path


def test_create_and_list(run_cli):
    result = run_cli("account", "create", "Savings")
    assert result.exit_code == 0
    assert "Created account 'Savings'" in result.output

    result = run_cli("account", "list")
    assert result.exit_code == 0
    assert "* General" in result.output
    assert "  Savings" in result.output


def test_create_duplicate_fails(run_cli):
    run_cli("account", "create", "Savings")
    result = run_cli("account", "create", "Savings")
    assert result.exit_code == 1
    assert "Error: Account with name 'Savings' already exists" in result.output


def test_create_persists_to_data_file(run_cli, cli_paths):
    run_cli("account", "create", "Savings")
    assert "[Account:Savings]" in Path(cli_paths["data"]).read_text()


def test_rename(run_cli):
    run_cli("account", "create", "Cash")
    result = run_cli("account", "rename", "Cash", "Wallet")
    assert result.exit_code == 0
    assert "Renamed account 'Cash' to 'Wallet'" in result.output

    listing = run_cli("account", "list").output
    assert "Wallet" in listing
    assert "Cash" not in listing


def test_rename_default_keeps_it(run_cli):
    run_cli("add", "--amount", "10", "--category", "Food", "--date", "2024-01-01")
    result = run_cli("account", "rename", "General", "Home")
    assert result.exit_code == 0
    assert "Account 'General' is kept, now empty" in result.output

    listing = run_cli("account", "list").output
    assert "General" in listing
    assert "Home" in listing


def test_rename_unknown_fails(run_cli):
    result = run_cli("account", "rename", "Nope", "Other")
    assert result.exit_code == 1
    assert "Error: Account 'Nope' not found" in result.output


def test_delete_with_confirmation(run_cli):
    run_cli("account", "create", "Old")
    result = run_cli("account", "delete", "Old", input="y\n")
    assert result.exit_code == 0
    assert "Deleted account 'Old'" in result.output
    assert "Old" not in run_cli("account", "list").output


def test_delete_cancelled(run_cli):
    run_cli("account", "create", "Old")
    result = run_cli("account", "delete", "Old", input="n\n")
    assert result.exit_code == 0
    assert "Deletion cancelled." in result.output
    assert "Old" in run_cli("account", "list").output


def test_delete_last_account_fails(run_cli):
    result = run_cli("account", "delete", "General", "--yes")
    assert result.exit_code == 1
    assert "only account left" in result.output


def test_merge(run_cli):
    run_cli("account", "create", "Trip")
    run_cli("add", "--amount", "5", "--category", "Food", "--account", "Trip")
    run_cli("add", "--amount", "7", "--category", "Food", "--account", "Trip")

    result = run_cli("account", "merge", "General", "Trip")
    assert result.exit_code == 0
    assert "Moved 2 entries from 'Trip' to 'General'" in result.output

    listing = run_cli("list").output
    assert "General (2 entries)" in listing
