"""Tests for report aggregation."""

from decimal import Decimal

import pytest

from pocketledger.domain.errors import UnknownCurrency
from pocketledger.domain.ledger import DEFAULT_ACCOUNT
from pocketledger.domain.rates import ExchangeRateTable
from pocketledger.domain.reports import ReportService, Totals


class TestTotals:
    """Tests for the totals value object."""

    def test_plus_splits_by_sign(self):
        totals = Totals().plus(Decimal("10")).plus(Decimal("-4"))
        assert totals == Totals(Decimal("10"), Decimal("4"))
        assert totals.net == Decimal("6")


def test_total_balance(sample_ledger):
    totals = sample_ledger.total_balance()
    assert totals.income == Decimal("1450")
    assert totals.expenses == Decimal("950")
    assert totals.net == Decimal("500")


def test_total_balance_empty(ledger):
    assert ledger.total_balance() == Totals()


def test_total_matches_sum_of_balances(sample_ledger):
    balances = sum(account.cached_balance for account in sample_ledger.accounts.values())
    assert sample_ledger.total_balance().net == balances


def test_by_category(sample_ledger):
    report = sample_ledger.by_category()
    assert list(report) == ["Food", "Refund", "Salary", "Transport"]
    assert report["Transport"] == Totals(Decimal("0"), Decimal("750"))
    assert report["Refund"] == Totals(Decimal("450"), Decimal("0"))


def test_by_month(sample_ledger):
    report = sample_ledger.by_month()
    assert list(report) == [(2024, 1), (2024, 2)]
    assert report[(2024, 1)] == Totals(Decimal("1000"), Decimal("200"))
    assert report[(2024, 2)] == Totals(Decimal("450"), Decimal("750"))


def test_by_currency(sample_ledger):
    report = sample_ledger.by_currency()
    assert list(report) == ["EUR", "RUB", "USD"]
    assert report["RUB"].entry_count == 2
    assert report["RUB"].native_net == Decimal("800")
    assert report["USD"].native_net == Decimal("-10")
    assert report["USD"].base_net == Decimal("-750")
    assert report["EUR"].base_net == Decimal("450")


def test_reports_need_rates(sample_ledger):
    service = ReportService(sample_ledger.accounts, ExchangeRateTable({"RUB": 1}), "RUB")
    with pytest.raises(UnknownCurrency):
        service.total_balance()


class TestTagSearch:
    """Tests for tag search."""

    def test_single_tag(self, sample_ledger):
        matches = sample_ledger.search_by_tags(["travel"])
        assert [(match.account_name, match.entry.id) for match in matches] == [
            ("Travel", 3),
            ("Travel", 4),
        ]

    def test_any_of_several_tags_matches(self, sample_ledger):
        """An entry matches when it carries at least one of the tags."""
        matches = sample_ledger.search_by_tags(["work", "refund"])
        assert [(match.account_name, match.entry.id) for match in matches] == [
            (DEFAULT_ACCOUNT, 1),
            ("Travel", 4),
        ]

    def test_entry_matching_two_tags_listed_once(self, sample_ledger):
        matches = sample_ledger.search_by_tags(["food", "lunch"])
        assert [match.entry.id for match in matches] == [2]

    def test_empty_tag_list(self, sample_ledger):
        assert sample_ledger.search_by_tags([]) == []

    def test_no_match(self, sample_ledger):
        assert sample_ledger.search_by_tags(["nothing"]) == []
