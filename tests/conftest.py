"""Shared pytest fixtures for pocketledger tests."""

from decimal import Decimal

import pytest

from pocketledger.domain.dates import CalendarDate
from pocketledger.domain.entry import Direction, EntryIdGenerator, LedgerEntry
from pocketledger.domain.errors import RateSourceError
from pocketledger.domain.ledger import Ledger
from pocketledger.domain.rates import ExchangeRateTable
from pocketledger.rates.source import RateSource


class FailingRateSource(RateSource):
    """Rate source that is always offline."""

    def __init__(self):
        self.calls = 0

    def fetch(self) -> dict[str, Decimal]:
        self.calls += 1
        raise RateSourceError("rate source offline")


@pytest.fixture
def rates():
    """Rate table with roubles as reference currency."""
    return ExchangeRateTable({"RUB": 1, "USD": 75, "EUR": 90})


@pytest.fixture
def ledger(rates, tmp_path):
    """Empty ledger in roubles with a rate cache under tmp_path."""
    return Ledger(base_currency="RUB", rates=rates, cache_path=tmp_path / "rates.json")


@pytest.fixture
def make_entry():
    """Factory for valid entries with sequential ids."""
    ids = EntryIdGenerator()

    def _make(
        amount="100",
        direction=Direction.DEBIT,
        category="Food",
        date=None,
        currency="RUB",
        tags=(),
        description="",
        entry_id=None,
    ):
        return LedgerEntry(
            entry_id=entry_id if entry_id is not None else ids.next_id(),
            amount=amount,
            category=category,
            direction=direction,
            date=date or CalendarDate(2024, 1, 15),
            description=description,
            currency=currency,
            tags=tags,
        )

    return _make


@pytest.fixture
def sample_ledger(ledger):
    """Ledger with a rouble account and a mixed-currency travel account.

    General: +1000 RUB Salary (2024-01-05), -200 RUB Food (2024-01-10)
    Travel:  -10 USD Transport (2024-02-03), +5 EUR Refund (2024-02-20)
    """
    ledger.add_entry(
        ledger.new_entry(
            "1000", "Salary", Direction.CREDIT, CalendarDate(2024, 1, 5),
            description="January salary", tags=["work"],
        )
    )
    ledger.add_entry(
        ledger.new_entry(
            "200", "Food", Direction.DEBIT, CalendarDate(2024, 1, 10),
            description="Groceries", tags=["food", "lunch"],
        )
    )
    ledger.create_account("Travel")
    ledger.add_entry(
        ledger.new_entry(
            "10", "Transport", Direction.DEBIT, CalendarDate(2024, 2, 3),
            currency="USD", description="Taxi", tags=["travel"],
        ),
        account="Travel",
    )
    ledger.add_entry(
        ledger.new_entry(
            "5", "Refund", Direction.CREDIT, CalendarDate(2024, 2, 20),
            currency="EUR", tags=["travel", "refund"],
        ),
        account="Travel",
    )
    return ledger


@pytest.fixture
def failing_source():
    return FailingRateSource()


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def cli_paths(tmp_path):
    """Data and rate cache paths for CLI invocations."""
    return {
        "data": str(tmp_path / "ledger.dat"),
        "rates": str(tmp_path / "rates.json"),
    }


@pytest.fixture
def run_cli(cli_runner, cli_paths):
    """Invoke the CLI against the temporary data and rate cache paths."""
    from pocketledger.cli.main import cli

    def _run(*args, input=None):
        return cli_runner.invoke(
            cli,
            ["--data-path", cli_paths["data"], "--rates-path", cli_paths["rates"], *args],
            input=input,
        )

    return _run


@pytest.fixture
def cached_rates(cli_paths):
    """Write a rate cache so CLI runs can convert USD and EUR."""
    with open(cli_paths["rates"], "w", encoding="utf-8") as f:
        f.write('{"RUB": 1.0, "USD": 75.0, "EUR": 90.0}')
    return cli_paths["rates"]
