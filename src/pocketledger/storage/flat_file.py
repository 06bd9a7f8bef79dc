"""Sectioned text file storage."""

from pathlib import Path

from pocketledger.domain.ledger import Ledger
from pocketledger.storage.base import LedgerStore


class FlatFileStore(LedgerStore):
    """Stores the ledger as ``[Account:<name>]`` sections of entry lines."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"FlatFileStore({str(self.path)!r})"

    def load(self, ledger: Ledger) -> None:
        ledger.load(self.path)

    def save(self, ledger: Ledger) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        ledger.save(self.path)
