"""Account domain object: an ordered set of ledger entries plus a cached balance."""

from decimal import Decimal
from typing import Iterator, Optional

from pocketledger.domain.entry import LedgerEntry, has_line_break
from pocketledger.domain.errors import DuplicateId, InvalidArgument, duplicate_entry_id
from pocketledger.domain.rates import ExchangeRateTable

BALANCE_TOLERANCE = Decimal("0.01")


class Account:
    """Named account owning its ledger entries.

    ``cached_balance`` equals the sum of the entries converted into the
    base currency right after ``recalculate_balance``. ``add`` and
    ``remove`` only adjust it by the entry's signed amount in its own
    currency, so after adding foreign-currency entries or changing rates
    the cache is provisional until the next recalculation.
    """

    def __init__(self, name: str):
        if not isinstance(name, str) or not name.strip():
            raise InvalidArgument("Account name cannot be empty")
        if has_line_break(name):
            raise InvalidArgument("Account name cannot contain line breaks")
        self.name = name
        self._entries: list[LedgerEntry] = []
        self.cached_balance = Decimal("0")

    def __repr__(self) -> str:
        return f"Account(name={self.name!r}, entries={len(self._entries)}, balance={self.cached_balance})"

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LedgerEntry]:
        return iter(list(self._entries))

    @property
    def entries(self) -> tuple[LedgerEntry, ...]:
        return tuple(self._entries)

    def get(self, entry_id: int) -> Optional[LedgerEntry]:
        """Return the first entry with ``entry_id`` or None."""
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def has_entry(self, entry_id: int) -> bool:
        return self.get(entry_id) is not None

    def add(self, entry: LedgerEntry) -> None:
        """Append an entry and adjust the cached balance by its signed amount.

        Raises:
            InvalidArgument: If the entry is still in builder state
            DuplicateId: If an entry with the same id is already present
        """
        entry.validate()
        if self.has_entry(entry.id):
            raise DuplicateId(duplicate_entry_id(entry.id, self.name))
        self._entries.append(entry)
        self.cached_balance += entry.signed_amount()

    def remove(self, entry_id: int) -> bool:
        """Remove the first entry with ``entry_id``.

        Returns:
            True if an entry was removed, False if none matched
        """
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                del self._entries[index]
                self.cached_balance -= entry.signed_amount()
                return True
        return False

    def compute_balance(self, rates: ExchangeRateTable, base_currency: str) -> Decimal:
        """Sum of all entries converted into ``base_currency``, without caching."""
        total = Decimal("0")
        for entry in self._entries:
            total += entry.amount_in_base(rates, base_currency)
        return total

    def recalculate_balance(self, rates: ExchangeRateTable, base_currency: str) -> Decimal:
        """Recompute the cached balance from scratch.

        Raises:
            UnknownCurrency: If an entry's currency cannot be converted; the
                cached balance is unchanged in that case
        """
        self.cached_balance = self.compute_balance(rates, base_currency)
        return self.cached_balance

    def validate(self, rates: ExchangeRateTable, base_currency: str) -> bool:
        """Return True if the cached balance matches a fresh recomputation."""
        recomputed = self.compute_balance(rates, base_currency)
        return abs(recomputed - self.cached_balance) < BALANCE_TOLERANCE

    def balance_in_currency(self, rates: ExchangeRateTable, code: str) -> Decimal:
        """Sum of all entries converted into an arbitrary currency."""
        total = Decimal("0")
        for entry in self._entries:
            total += rates.convert(entry.signed_amount(), entry.currency, code)
        return total

    def merge_from(self, other: "Account", rates: ExchangeRateTable, base_currency: str) -> None:
        """Move every entry of ``other`` into this account.

        The merge is all-or-nothing: an id collision or an unconvertible
        currency aborts it before anything moves. ``other`` is left empty
        but usable.

        Raises:
            DuplicateId: If an entry id of ``other`` already exists here
            UnknownCurrency: If an entry of either account cannot be
                converted into ``base_currency``
        """
        if other is self:
            return
        for entry in other._entries:
            if self.has_entry(entry.id):
                raise DuplicateId(duplicate_entry_id(entry.id, self.name))
        merged_balance = self.compute_balance(rates, base_currency) + other.compute_balance(
            rates, base_currency
        )
        self._entries.extend(other._entries)
        self.cached_balance = merged_balance
        other._entries = []
        other.cached_balance = Decimal("0")

    def move_entries_from(self, other: "Account") -> None:
        """Take over the entries and cached balance of ``other`` unchecked.

        Intended for renames where ``self`` is a fresh, empty account.
        """
        self._entries = other._entries
        self.cached_balance = other.cached_balance
        other._entries = []
        other.cached_balance = Decimal("0")
