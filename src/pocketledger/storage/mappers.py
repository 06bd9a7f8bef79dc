"""Mapper functions to convert between domain objects and SQLAlchemy models."""

from pocketledger.domain.account import Account
from pocketledger.domain.dates import CalendarDate
from pocketledger.domain.entry import LedgerEntry
from pocketledger.storage.models import (
    Account as ORMAccount,
    Entry as ORMEntry,
    EntryTag as ORMEntryTag,
)


def entry_to_domain(orm_entry: ORMEntry) -> LedgerEntry:
    """Convert SQLAlchemy Entry model to a domain LedgerEntry."""
    return LedgerEntry(
        entry_id=orm_entry.entry_id,
        amount=orm_entry.amount,
        category=orm_entry.category,
        direction=orm_entry.direction,
        date=CalendarDate(orm_entry.year, orm_entry.month, orm_entry.day),
        description=orm_entry.description,
        currency=orm_entry.currency,
        tags=[tag.tag for tag in orm_entry.tags],
    )


def entry_to_orm(entry: LedgerEntry, position: int) -> ORMEntry:
    """Convert a domain LedgerEntry to a SQLAlchemy Entry model."""
    return ORMEntry(
        entry_id=entry.id,
        position=position,
        amount=format(entry.amount, "f"),
        direction=int(entry.direction),
        category=entry.category,
        year=entry.date.year,
        month=entry.date.month,
        day=entry.date.day,
        currency=entry.currency,
        description=entry.description,
        tags=[ORMEntryTag(position=index, tag=tag) for index, tag in enumerate(entry.tags)],
    )


def account_to_orm(account: Account, position: int) -> ORMAccount:
    """Convert a domain Account and its entries to SQLAlchemy models."""
    return ORMAccount(
        name=account.name,
        position=position,
        entries=[entry_to_orm(entry, index) for index, entry in enumerate(account.entries)],
    )
