"""Domain layer for pocketledger."""

from pocketledger.domain.account import Account
from pocketledger.domain.dates import CalendarDate
from pocketledger.domain.entry import Direction, EntryIdGenerator, LedgerEntry
from pocketledger.domain.ledger import DEFAULT_ACCOUNT, Ledger
from pocketledger.domain.rates import ExchangeRateTable
from pocketledger.domain.reports import ReportService

__all__ = [
    "Account",
    "CalendarDate",
    "Direction",
    "EntryIdGenerator",
    "LedgerEntry",
    "DEFAULT_ACCOUNT",
    "Ledger",
    "ExchangeRateTable",
    "ReportService",
]
