"""Read-side aggregation over the accounts of a ledger."""

from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Iterator, Mapping

from pocketledger.domain.account import Account
from pocketledger.domain.entry import LedgerEntry
from pocketledger.domain.rates import ExchangeRateTable

ZERO = Decimal("0")


@dataclass(frozen=True)
class Totals:
    """Income and expense sums in the base currency."""

    income: Decimal = ZERO
    expenses: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.income - self.expenses

    def plus(self, signed_base_amount: Decimal) -> "Totals":
        """Return new totals with one signed base-currency amount added."""
        if signed_base_amount >= 0:
            return Totals(self.income + signed_base_amount, self.expenses)
        return Totals(self.income, self.expenses - signed_base_amount)


@dataclass(frozen=True)
class CurrencyBreakdown:
    """Entries of one currency: count, net in that currency and in base."""

    currency: str
    entry_count: int
    native_net: Decimal
    base_net: Decimal


@dataclass(frozen=True)
class AccountStats:
    """Summary of a single account."""

    name: str
    entry_count: int
    income: Decimal
    expenses: Decimal
    balance: Decimal


@dataclass(frozen=True)
class TagMatch:
    """Search hit: the entry and the account that holds it."""

    account_name: str
    entry: LedgerEntry


class ReportService:
    """Builds reports from accounts, a rate table and a base currency.

    Every currency-sensitive figure is converted with the given rate table,
    so ``UnknownCurrency`` propagates when a referenced currency is missing.
    """

    def __init__(
        self,
        accounts: Mapping[str, Account],
        rates: ExchangeRateTable,
        base_currency: str,
    ):
        self.accounts = accounts
        self.rates = rates
        self.base_currency = base_currency

    def _all_entries(self) -> Iterator[tuple[str, LedgerEntry]]:
        for name, account in self.accounts.items():
            for entry in account.entries:
                yield name, entry

    def _in_base(self, entry: LedgerEntry) -> Decimal:
        return entry.amount_in_base(self.rates, self.base_currency)

    def total_balance(self) -> Totals:
        """Income, expenses and net over every account."""
        totals = Totals()
        for _, entry in self._all_entries():
            totals = totals.plus(self._in_base(entry))
        return totals

    def by_category(self) -> dict[str, Totals]:
        """Totals per category, sorted by category name."""
        grouped: dict[str, Totals] = defaultdict(Totals)
        for _, entry in self._all_entries():
            grouped[entry.category] = grouped[entry.category].plus(self._in_base(entry))
        return dict(sorted(grouped.items()))

    def by_month(self) -> dict[tuple[int, int], Totals]:
        """Totals per (year, month), oldest first."""
        grouped: dict[tuple[int, int], Totals] = defaultdict(Totals)
        for _, entry in self._all_entries():
            key = (entry.date.year, entry.date.month)
            grouped[key] = grouped[key].plus(self._in_base(entry))
        return dict(sorted(grouped.items()))

    def by_currency(self) -> dict[str, CurrencyBreakdown]:
        """Entry count and net amount per entry currency."""
        counts: dict[str, int] = defaultdict(int)
        native: dict[str, Decimal] = defaultdict(Decimal)
        base: dict[str, Decimal] = defaultdict(Decimal)
        for _, entry in self._all_entries():
            counts[entry.currency] += 1
            native[entry.currency] += entry.signed_amount()
            base[entry.currency] += self._in_base(entry)
        return {
            code: CurrencyBreakdown(
                currency=code,
                entry_count=counts[code],
                native_net=native[code],
                base_net=base[code],
            )
            for code in sorted(counts)
        }

    def search_by_tags(self, tags: Iterable[str]) -> list[TagMatch]:
        """Entries carrying at least one of ``tags``.

        Matching is OR across the given tags. An empty tag list matches
        nothing.
        """
        wanted = list(tags)
        if not wanted:
            return []
        return [
            TagMatch(account_name=name, entry=entry)
            for name, entry in self._all_entries()
            if entry.has_any_tag(wanted)
        ]

    def account_stats(self, account: Account) -> AccountStats:
        """Entry count, income and expenses in base currency, cached balance."""
        totals = Totals()
        for entry in account.entries:
            totals = totals.plus(self._in_base(entry))
        return AccountStats(
            name=account.name,
            entry_count=len(account),
            income=totals.income,
            expenses=totals.expenses,
            balance=account.cached_balance,
        )
