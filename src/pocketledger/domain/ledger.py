"""Ledger: the account directory, the shared rate table and persistence.

The ledger owns every account, the "current account" selection, the
exchange rate table and the entry id counter. Whenever the rate table
changes it recomputes every account's cached balance while holding its
lock, so readers see either the old or the new balances, never a mix.
"""

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from decimal import Decimal
from pathlib import Path
from typing import TYPE_CHECKING, ContextManager, Iterable, Optional

from pocketledger.domain.account import Account
from pocketledger.domain.dates import CalendarDate
from pocketledger.domain.entry import (
    DEFAULT_CURRENCY,
    AmountValue,
    Direction,
    EntryIdGenerator,
    LedgerEntry,
    is_currency_code,
    to_decimal,
)
from pocketledger.domain.errors import (
    DomainError,
    DuplicateId,
    DuplicateName,
    InvalidArgument,
    LastAccountError,
    PersistenceError,
    RateSourceError,
    UnknownAccount,
    UnknownCurrency,
    UnsupportedCurrency,
    account_not_found,
    duplicate_account_name,
    last_account,
)
from pocketledger.domain.rates import ExchangeRateTable
from pocketledger.domain.reports import (
    AccountStats,
    CurrencyBreakdown,
    ReportService,
    TagMatch,
    Totals,
)

if TYPE_CHECKING:
    from pocketledger.rates.source import RateSource

logger = logging.getLogger(__name__)

DEFAULT_ACCOUNT = "General"
ACCOUNT_HEADER_PREFIX = "[Account:"
ACCOUNT_HEADER_SUFFIX = "]"


def format_account_header(name: str) -> str:
    return f"{ACCOUNT_HEADER_PREFIX}{name}{ACCOUNT_HEADER_SUFFIX}"


def parse_account_header(line: str) -> Optional[str]:
    """Return the account name of a section header line, else None."""
    if line.startswith(ACCOUNT_HEADER_PREFIX) and line.endswith(ACCOUNT_HEADER_SUFFIX):
        return line[len(ACCOUNT_HEADER_PREFIX):-len(ACCOUNT_HEADER_SUFFIX)]
    return None


def parse_ledger_text(text: str, default_currency: str = DEFAULT_CURRENCY) -> list[Account]:
    """Parse the sectioned data-file format into accounts.

    Malformed lines are logged and skipped; they never abort the parse.
    Repeated section headers continue the existing account.
    """
    accounts: dict[str, Account] = {}
    current: Optional[Account] = None

    for line_number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue

        name = parse_account_header(line)
        if name is not None:
            current = accounts.get(name)
            if current is None:
                try:
                    current = Account(name)
                except InvalidArgument as e:
                    logger.warning("Line %d: skipping section with bad account name: %s", line_number, e)
                    continue
                accounts[name] = current
            continue

        if current is None:
            logger.warning("Line %d: entry outside of any account section, skipped", line_number)
            continue

        try:
            entry = LedgerEntry.from_record(line, default_currency=default_currency)
            current.add(entry)
        except DomainError as e:
            logger.warning("Line %d: skipping malformed entry %r: %s", line_number, line, e)

    return list(accounts.values())


def format_ledger_text(accounts: Iterable[Account]) -> str:
    """Serialize accounts into the sectioned data-file format."""
    lines: list[str] = []
    for account in accounts:
        lines.append(format_account_header(account.name))
        lines.extend(entry.to_record() for entry in account.entries)
    return "".join(f"{line}\n" for line in lines)


class Ledger:
    """Named accounts, the current-account selection and the rate table.

    There is always at least one account; the reserved ``General`` account
    is created at start-up and after every load.
    """

    def __init__(
        self,
        base_currency: str = DEFAULT_CURRENCY,
        rates: Optional[ExchangeRateTable] = None,
        id_generator: Optional[EntryIdGenerator] = None,
        cache_path: Optional[str | Path] = None,
        lock: Optional[ContextManager] = None,
    ):
        """Initialize the ledger.

        Args:
            base_currency: Currency cached balances and reports are expressed in
            rates: Exchange rate table; an empty one by default
            id_generator: Entry id source; a fresh counter by default
            cache_path: Rate cache file used to persist and fall back on rates
            lock: Re-entrant lock guarding rate application and report
                reads; ``threading.RLock`` by default
        """
        if not is_currency_code(base_currency):
            raise InvalidArgument(f"Base currency must be a three-letter code, got {base_currency!r}")
        self.base_currency = base_currency
        self.rates = rates if rates is not None else ExchangeRateTable()
        self.ids = id_generator if id_generator is not None else EntryIdGenerator()
        self.cache_path = Path(cache_path) if cache_path is not None else None
        self._lock = lock if lock is not None else threading.RLock()
        self._accounts: dict[str, Account] = {DEFAULT_ACCOUNT: Account(DEFAULT_ACCOUNT)}
        self._current = DEFAULT_ACCOUNT

    # Account directory

    @property
    def accounts(self) -> dict[str, Account]:
        """Snapshot of the name -> account mapping, in insertion order."""
        with self._lock:
            return dict(self._accounts)

    def account_names(self) -> list[str]:
        with self._lock:
            return list(self._accounts)

    @property
    def current_account(self) -> Account:
        with self._lock:
            return self._accounts[self._current]

    def account(self, name: Optional[str] = None) -> Account:
        """Return the named account, or the current one when name is None.

        Raises:
            UnknownAccount: If the name is not in the ledger
        """
        with self._lock:
            if name is None:
                return self._accounts[self._current]
            try:
                return self._accounts[name]
            except KeyError:
                raise UnknownAccount(account_not_found(name)) from None

    def create_account(self, name: str) -> Account:
        """Create an empty account.

        Raises:
            DuplicateName: If the name is taken
            InvalidArgument: If the name is empty
        """
        with self._lock:
            if name in self._accounts:
                raise DuplicateName(duplicate_account_name(name))
            account = Account(name)
            self._accounts[name] = account
            logger.debug("Created account '%s'", name)
            return account

    def delete_account(self, name: str) -> None:
        """Delete an account and its entries.

        Deleting the current account selects the reserved default account.

        Raises:
            UnknownAccount: If the name is not in the ledger
            LastAccountError: If it is the only account
        """
        with self._lock:
            self.account(name)
            if len(self._accounts) == 1:
                raise LastAccountError(last_account(name))
            if name == self._current:
                if DEFAULT_ACCOUNT not in self._accounts or name == DEFAULT_ACCOUNT:
                    fallback = next(other for other in self._accounts if other != name)
                else:
                    fallback = DEFAULT_ACCOUNT
                self._current = fallback
            del self._accounts[name]
            logger.debug("Deleted account '%s'", name)

    def rename_account(self, old: str, new: str) -> Account:
        """Rename an account, moving its entries to the new name.

        The reserved default account is never renamed away: renaming it
        creates the new account with its entries and leaves ``General``
        in place, empty.

        Raises:
            UnknownAccount: If ``old`` is not in the ledger
            DuplicateName: If ``new`` is taken
        """
        with self._lock:
            source = self.account(old)
            if new in self._accounts:
                raise DuplicateName(duplicate_account_name(new))
            target = Account(new)
            target.move_entries_from(source)
            self._accounts[new] = target
            if old != DEFAULT_ACCOUNT:
                del self._accounts[old]
            if self._current == old:
                self._current = new
            return target

    def select_account(self, name: str) -> Account:
        """Make ``name`` the current account.

        Raises:
            UnknownAccount: If the name is not in the ledger
        """
        with self._lock:
            account = self.account(name)
            self._current = name
            return account

    def merge_accounts(self, target: str, source: str) -> Account:
        """Move every entry of ``source`` into ``target``; ``source`` stays, empty."""
        with self._lock:
            into = self.account(target)
            into.merge_from(self.account(source), self.rates, self.base_currency)
            return into

    # Entries

    def new_entry(
        self,
        amount: AmountValue,
        category: str,
        direction: Direction,
        date: Optional[CalendarDate] = None,
        description: Optional[str] = None,
        currency: Optional[str] = None,
        tags: Iterable[str] = (),
    ) -> LedgerEntry:
        """Build a validated entry with the next id; it is not inserted.

        Defaults: today's date and the ledger's base currency.
        """
        with self._lock:
            entry = LedgerEntry(
                entry_id=self.ids.peek,
                amount=amount,
                category=category,
                direction=direction,
                date=date if date is not None else CalendarDate.today(),
                description=description,
                currency=currency if currency is not None else self.base_currency,
                tags=tags,
            )
            self.ids.next_id()
            return entry

    def add_entry(self, entry: LedgerEntry, account: Optional[str] = None) -> Account:
        """Insert an entry into an account (current by default).

        The account balance is then recomputed in base currency. When the
        entry's currency cannot be converted yet, the provisional cached
        balance is kept and a warning is logged.
        """
        with self._lock:
            target = self.account(account)
            target.add(entry)
            self.ids.advance_past(entry.id)
            self._recalculate(target)
            return target

    def remove_entry(self, entry_id: int, account: Optional[str] = None) -> bool:
        """Remove an entry by id from an account (current by default)."""
        with self._lock:
            target = self.account(account)
            removed = target.remove(entry_id)
            if removed:
                self._recalculate(target)
            return removed

    def entries_by_direction(
        self, direction: Direction, account: Optional[str] = None
    ) -> list[LedgerEntry]:
        """Entries of one direction in an account (current by default)."""
        with self._lock:
            return [entry for entry in self.account(account).entries if entry.direction == direction]

    # Rates and balances

    def _recalculate(self, account: Account) -> bool:
        try:
            account.recalculate_balance(self.rates, self.base_currency)
            return True
        except UnknownCurrency as e:
            logger.warning(
                "Balance of account '%s' is provisional until rates are available: %s",
                account.name,
                e,
            )
            return False

    def recalculate_all(self) -> list[str]:
        """Recompute every account; return names that could not be converted."""
        with self._lock:
            return [name for name, account in self._accounts.items() if not self._recalculate(account)]

    def refresh_rates(self, source: "RateSource") -> bool:
        """Fetch rates, install them and recompute every account.

        On a failed fetch the rate cache is loaded instead. If that fails
        too, the previous rates stay in force and nothing is recomputed.

        Returns:
            True if new rates (fetched or cached) were applied
        """
        try:
            fetched = source.fetch()
        except RateSourceError as e:
            logger.warning("Rate refresh failed, falling back to cache: %s", e)
            return self.load_cached_rates()

        with self._lock:
            try:
                self.rates.replace_all(fetched)
            except InvalidArgument as e:
                logger.warning("Rate source returned unusable rates, falling back to cache: %s", e)
                return self.load_cached_rates()
            logger.info("Applied %d exchange rates", len(self.rates))
            if self.cache_path is not None:
                try:
                    self.rates.save(self.cache_path)
                except PersistenceError as e:
                    logger.warning("Could not update rate cache: %s", e)
            self.recalculate_all()
        return True

    def refresh_rates_async(
        self, source: "RateSource", executor: Optional[Executor] = None
    ) -> "Future[bool]":
        """Run ``refresh_rates`` on a worker thread and return its future."""
        if executor is not None:
            return executor.submit(self.refresh_rates, source)
        pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="rate-refresh")
        try:
            return pool.submit(self.refresh_rates, source)
        finally:
            pool.shutdown(wait=False)

    def load_cached_rates(self) -> bool:
        """Install rates from the cache file and recompute every account."""
        if self.cache_path is None:
            return False
        if not self.cache_path.exists():
            logger.info("No rate cache at %s yet", self.cache_path)
            return False
        with self._lock:
            try:
                self.rates.load(self.cache_path)
            except PersistenceError as e:
                logger.warning("No usable rate cache: %s", e)
                return False
            logger.info("Loaded %d exchange rates from cache", len(self.rates))
            self.recalculate_all()
            return True

    def convert(self, amount: AmountValue, from_code: str, to_code: Optional[str] = None) -> Decimal:
        """Convert an amount, into the base currency by default."""
        value = to_decimal(amount)
        with self._lock:
            return self.rates.convert(value, from_code, to_code or self.base_currency)

    def set_base_currency(self, code: str) -> None:
        """Switch the base currency and recompute every account.

        Raises:
            UnsupportedCurrency: If the currency has no rate
        """
        with self._lock:
            if not self.rates.is_supported(code):
                raise UnsupportedCurrency(f"Currency '{code}' is not supported by the current rates")
            self.base_currency = code
            self.recalculate_all()

    def validate_account(self, name: Optional[str] = None) -> bool:
        """Check one cached balance (current account by default)."""
        with self._lock:
            return self.account(name).validate(self.rates, self.base_currency)

    def validate_all(self) -> dict[str, bool]:
        """Check every cached balance against a fresh recomputation."""
        with self._lock:
            return {
                name: account.validate(self.rates, self.base_currency)
                for name, account in self._accounts.items()
            }

    # Reports

    def _reports(self) -> ReportService:
        return ReportService(self._accounts, self.rates, self.base_currency)

    def total_balance(self) -> Totals:
        with self._lock:
            return self._reports().total_balance()

    def by_category(self) -> dict[str, Totals]:
        with self._lock:
            return self._reports().by_category()

    def by_month(self) -> dict[tuple[int, int], Totals]:
        with self._lock:
            return self._reports().by_month()

    def by_currency(self) -> dict[str, CurrencyBreakdown]:
        with self._lock:
            return self._reports().by_currency()

    def search_by_tags(self, tags: Iterable[str]) -> list[TagMatch]:
        with self._lock:
            return self._reports().search_by_tags(tags)

    def account_stats(self, name: Optional[str] = None) -> AccountStats:
        with self._lock:
            return self._reports().account_stats(self.account(name))

    # Persistence

    def restore(self, accounts: Iterable[Account]) -> None:
        """Replace all accounts with ``accounts``.

        ``General`` is always recreated first. Entries whose id repeats
        within one account are skipped. Afterwards the id counter restarts
        after the highest id seen and every balance is recomputed.
        """
        restored: dict[str, Account] = {DEFAULT_ACCOUNT: Account(DEFAULT_ACCOUNT)}
        for account in accounts:
            existing = restored.get(account.name)
            if existing is None:
                restored[account.name] = account
                continue
            for entry in account.entries:
                try:
                    existing.add(entry)
                except DuplicateId as e:
                    logger.warning("Skipping entry while restoring: %s", e)

        max_id = max(
            (entry.id for account in restored.values() for entry in account.entries),
            default=0,
        )
        with self._lock:
            previous = self._current
            self._accounts = restored
            self._current = previous if previous in restored else DEFAULT_ACCOUNT
            self.ids.reset(max_id + 1)
            self.recalculate_all()

    def save(self, path: str | Path) -> None:
        """Write every account and entry to the sectioned text format."""
        with self._lock:
            text = format_ledger_text(self._accounts.values())
        try:
            Path(path).write_text(text, encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Could not write ledger '{path}': {e}")
        logger.debug("Saved %d accounts to %s", len(self._accounts), path)

    def load(self, path: str | Path) -> None:
        """Replace the ledger contents with the accounts stored at ``path``.

        A missing file yields just the default account.

        Raises:
            PersistenceError: If the file exists but cannot be read
        """
        try:
            text = Path(path).read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("Ledger file %s not found, starting with the default account", path)
            self.restore([])
            return
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Could not read ledger '{path}': {e}")
        self.restore(parse_ledger_text(text, default_currency=self.base_currency))
