"""Storage layer for pocketledger."""

from pocketledger.storage.base import LedgerStore
from pocketledger.storage.factories import create_store
from pocketledger.storage.flat_file import FlatFileStore
from pocketledger.storage.sqlalchemy_store import SQLAlchemyStore

__all__ = ["LedgerStore", "create_store", "FlatFileStore", "SQLAlchemyStore"]
