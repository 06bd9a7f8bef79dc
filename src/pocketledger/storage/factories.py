"""Factory functions for storage paths and store instances."""

import os
from pathlib import Path
from typing import Optional

from pocketledger.storage.base import LedgerStore
from pocketledger.storage.flat_file import FlatFileStore
from pocketledger.storage.sqlalchemy_store import SQLAlchemyStore

DATA_PATH_ENV = "POCKETLEDGER_DATA_PATH"
RATES_PATH_ENV = "POCKETLEDGER_RATES_PATH"
DEFAULT_DIR_NAME = ".pocketledger"
DEFAULT_DATA_FILE = "ledger.dat"
DEFAULT_RATES_FILE = "rates.json"
SQL_SUFFIXES = {".db", ".sqlite", ".sqlite3"}


def _default_path(file_name: str) -> Path:
    data_dir = Path.home() / DEFAULT_DIR_NAME
    data_dir.mkdir(exist_ok=True)
    return data_dir / file_name


def resolve_data_path(data_path: Optional[str] = None) -> Path:
    """Return the ledger data path.

    Args:
        data_path: Explicit path. If None, checks POCKETLEDGER_DATA_PATH
            environment variable, then defaults to ~/.pocketledger/ledger.dat
    """
    if data_path is None:
        data_path = os.environ.get(DATA_PATH_ENV)
    if data_path is None:
        return _default_path(DEFAULT_DATA_FILE)
    return Path(data_path)


def resolve_rates_path(rates_path: Optional[str] = None) -> Path:
    """Return the rate cache path.

    Args:
        rates_path: Explicit path. If None, checks POCKETLEDGER_RATES_PATH
            environment variable, then defaults to ~/.pocketledger/rates.json
    """
    if rates_path is None:
        rates_path = os.environ.get(RATES_PATH_ENV)
    if rates_path is None:
        return _default_path(DEFAULT_RATES_FILE)
    return Path(rates_path)


def create_store(data_path: Optional[str] = None) -> LedgerStore:
    """Create the store matching the data path.

    SQLite file suffixes (.db, .sqlite, .sqlite3) select the SQLAlchemy
    snapshot store; anything else uses the sectioned text file.
    """
    path = resolve_data_path(data_path)
    if path.suffix.lower() in SQL_SUFFIXES:
        return SQLAlchemyStore(f"sqlite:///{path}")
    return FlatFileStore(path)
