"""Tests for ledger stores and store factories."""

from decimal import Decimal

import pytest

from pocketledger.domain.dates import CalendarDate
from pocketledger.domain.entry import Direction
from pocketledger.domain.ledger import DEFAULT_ACCOUNT, Ledger
from pocketledger.storage import FlatFileStore, SQLAlchemyStore, create_store
from pocketledger.storage.factories import (
    DATA_PATH_ENV,
    RATES_PATH_ENV,
    resolve_data_path,
    resolve_rates_path,
)
from pocketledger.storage.mappers import account_to_orm, entry_to_domain, entry_to_orm


@pytest.fixture
def sql_store(tmp_path):
    store = SQLAlchemyStore(f"sqlite:///{tmp_path / 'ledger.db'}")
    yield store
    store.disconnect()


class TestMappers:
    """Tests for domain <-> ORM mapping."""

    def test_entry_round_trip(self, make_entry):
        entry = make_entry(
            amount="12.345", direction=Direction.CREDIT, currency="USD",
            tags=["b", "a"], description="Mapped",
        )
        orm_entry = entry_to_orm(entry, position=0)
        assert orm_entry.amount == "12.345"
        assert [tag.tag for tag in orm_entry.tags] == ["b", "a"]
        assert entry_to_domain(orm_entry) == entry

    def test_account_to_orm_keeps_order(self, sample_ledger):
        row = account_to_orm(sample_ledger.account("Travel"), position=1)
        assert row.name == "Travel"
        assert row.position == 1
        assert [entry.entry_id for entry in row.entries] == [3, 4]
        assert [entry.position for entry in row.entries] == [0, 1]


class TestSQLAlchemyStore:
    """Tests for the relational snapshot store."""

    def test_round_trip(self, sample_ledger, rates, sql_store):
        sql_store.save(sample_ledger)

        restored = Ledger(rates=rates)
        sql_store.load(restored)

        assert restored.account_names() == [DEFAULT_ACCOUNT, "Travel"]
        for name, account in sample_ledger.accounts.items():
            assert list(restored.account(name).entries) == list(account.entries)
        assert restored.account("Travel").cached_balance == Decimal("-300")
        assert restored.new_entry("1", "Food", Direction.DEBIT).id == 5

    def test_save_replaces_previous_snapshot(self, sample_ledger, rates, sql_store):
        sql_store.save(sample_ledger)
        sample_ledger.delete_account("Travel")
        sample_ledger.remove_entry(2)
        sql_store.save(sample_ledger)

        restored = Ledger(rates=rates)
        sql_store.load(restored)
        assert restored.account_names() == [DEFAULT_ACCOUNT]
        assert [entry.id for entry in restored.account(DEFAULT_ACCOUNT)] == [1]

    def test_load_empty_database(self, rates, sql_store):
        ledger = Ledger(rates=rates)
        ledger.create_account("Temp")
        sql_store.load(ledger)
        assert ledger.account_names() == [DEFAULT_ACCOUNT]

    def test_amounts_stay_exact(self, ledger, rates, sql_store):
        ledger.add_entry(
            ledger.new_entry("0.10", "Fee", Direction.DEBIT, CalendarDate(2024, 1, 1))
        )
        sql_store.save(ledger)

        restored = Ledger(rates=rates)
        sql_store.load(restored)
        assert restored.current_account.entries[0].amount == Decimal("0.10")


class TestFlatFileStore:
    """Tests for the text file store."""

    def test_save_creates_parent_directory(self, sample_ledger, rates, tmp_path):
        store = FlatFileStore(tmp_path / "nested" / "ledger.dat")
        store.save(sample_ledger)

        restored = Ledger(rates=rates)
        store.load(restored)
        assert restored.account_names() == [DEFAULT_ACCOUNT, "Travel"]


class TestFactories:
    """Tests for path resolution and store selection."""

    def test_explicit_paths(self, tmp_path):
        assert resolve_data_path(str(tmp_path / "a.dat")) == tmp_path / "a.dat"
        assert resolve_rates_path(str(tmp_path / "r.json")) == tmp_path / "r.json"

    def test_environment_paths(self, tmp_path, monkeypatch):
        monkeypatch.setenv(DATA_PATH_ENV, str(tmp_path / "env.dat"))
        monkeypatch.setenv(RATES_PATH_ENV, str(tmp_path / "env.json"))
        assert resolve_data_path() == tmp_path / "env.dat"
        assert resolve_rates_path() == tmp_path / "env.json"

    def test_default_paths_under_home(self, tmp_path, monkeypatch):
        monkeypatch.delenv(DATA_PATH_ENV, raising=False)
        monkeypatch.delenv(RATES_PATH_ENV, raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert resolve_data_path() == tmp_path / ".pocketledger" / "ledger.dat"
        assert resolve_rates_path() == tmp_path / ".pocketledger" / "rates.json"

    def test_create_store_picks_backend(self, tmp_path):
        assert isinstance(create_store(str(tmp_path / "ledger.dat")), FlatFileStore)
        store = create_store(str(tmp_path / "ledger.sqlite"))
        assert isinstance(store, SQLAlchemyStore)
        store.disconnect()
