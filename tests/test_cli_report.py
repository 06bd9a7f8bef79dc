"""Tests for report and rate CLI commands."""

import json
from decimal import Decimal
from pathlib import Path

import pytest

from pocketledger.domain.errors import RateSourceError
from pocketledger.rates.source import RateSource


@pytest.fixture
def populated(run_cli, cached_rates):
    """Entries in RUB and USD across two accounts."""
    run_cli("add", "--amount", "1000", "--category", "Salary", "--income", "--date", "2024-01-05")
    run_cli("add", "--amount", "200", "--category", "Food", "--date", "2024-01-10")
    run_cli("account", "create", "Travel")
    run_cli(
        "add", "--amount", "10", "--category", "Transport", "--currency", "USD",
        "--date", "2024-02-03", "--account", "Travel",
    )
    return run_cli


def test_total(populated):
    result = populated("report", "total")
    assert result.exit_code == 0
    assert "Income:   1,000.00 RUB" in result.output
    assert "Expenses: 950.00 RUB" in result.output
    assert "Balance:  50.00 RUB" in result.output


def test_total_in_other_base_currency(populated, cli_paths, cli_runner):
    from pocketledger.cli.main import cli

    result = cli_runner.invoke(
        cli,
        [
            "--data-path", cli_paths["data"], "--rates-path", cli_paths["rates"],
            "--base-currency", "USD", "report", "total",
        ],
    )
    assert result.exit_code == 0
    assert "Expenses: 12.67 USD" in result.output


def test_category(populated):
    result = populated("report", "category")
    assert result.exit_code == 0
    rows = [line for line in result.output.splitlines() if "|" in line][1:]
    lines = [row.split("|")[0].strip() for row in rows]
    assert lines == ["Food", "Salary", "Transport"]


def test_month(populated):
    result = populated("report", "month")
    assert "2024-01" in result.output
    assert "2024-02" in result.output


def test_currency(populated):
    result = populated("report", "currency")
    assert "RUB |    2 entries" in result.output
    assert "USD |    1 entries" in result.output
    assert "-750.00 RUB" in result.output


def test_account_stats(populated):
    result = populated("report", "account", "Travel")
    assert result.exit_code == 0
    assert "Account:  Travel" in result.output
    assert "Entries:  1" in result.output
    assert "Balance:  -750.00 RUB" in result.output


def test_reports_on_empty_ledger(run_cli):
    assert "No entries found." in run_cli("report", "category").output
    assert "Balance:  0.00 RUB" in run_cli("report", "total").output


def test_report_without_rates_fails(run_cli, cli_paths):
    run_cli("add", "--amount", "10", "--category", "Taxi", "--currency", "USD")
    result = run_cli("report", "total")
    assert result.exit_code == 1
    assert "Currency 'USD' is not in the exchange rate table" in result.output


class OfflineSource(RateSource):
    def __init__(self, url=None):
        self.url = url

    def fetch(self):
        raise RateSourceError("offline")


class FixedSource(RateSource):
    def __init__(self, url=None):
        self.url = url

    def fetch(self):
        return {"RUB": Decimal("1"), "USD": Decimal("100")}


def test_rates_refresh(run_cli, cli_paths, monkeypatch):
    monkeypatch.setattr("pocketledger.cli.commands.rates.CbrRateSource", FixedSource)
    result = run_cli("rates", "refresh")
    assert result.exit_code == 0
    assert "Rates updated: 2 currencies" in result.output
    assert json.loads(Path(cli_paths["rates"]).read_text()) == {"RUB": 1.0, "USD": 100.0}


def test_rates_refresh_falls_back_to_cache(run_cli, cached_rates, monkeypatch):
    monkeypatch.setattr("pocketledger.cli.commands.rates.CbrRateSource", OfflineSource)
    result = run_cli("rates", "refresh")
    assert result.exit_code == 0
    assert "Rates updated: 3 currencies" in result.output


def test_rates_refresh_offline_without_cache(run_cli, monkeypatch):
    monkeypatch.setattr("pocketledger.cli.commands.rates.CbrRateSource", OfflineSource)
    result = run_cli("rates", "refresh")
    assert result.exit_code == 1
    assert "Could not fetch rates and no usable cache found" in result.output


def test_rates_show(run_cli, cached_rates):
    result = run_cli("rates", "show")
    assert "USD: 75.0" in result.output
    assert "EUR: 90.0" in result.output


def test_rates_show_empty(run_cli):
    assert "No rates loaded" in run_cli("rates", "show").output


def test_rates_convert(run_cli, cached_rates):
    assert "750.00 RUB" in run_cli("rates", "convert", "10", "USD").output
    assert "1.00 EUR" in run_cli("rates", "convert", "90", "RUB", "EUR").output


def test_rates_convert_unknown(run_cli, cached_rates):
    result = run_cli("rates", "convert", "10", "GBP")
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_account_stats_unaffected_by_other_accounts(run_cli):
    run_cli("add", "--amount", "100", "--category", "Gift", "--income")
    run_cli("account", "create", "Trip")
    run_cli("add", "--amount", "10", "--category", "Taxi", "--currency", "GBP", "--account", "Trip")

    result = run_cli("report", "account", "General")
    assert result.exit_code == 0
    assert "Balance:  100.00 RUB" in result.output
    assert "Warning" not in result.output
