"""Abstract ledger storage interface."""

from abc import ABC, abstractmethod

from pocketledger.domain.ledger import Ledger


class LedgerStore(ABC):
    """Persists the accounts and entries of a ledger."""

    @abstractmethod
    def load(self, ledger: Ledger) -> None:
        """Replace the ledger's accounts with the stored ones.

        A store that does not exist yet leaves only the default account.
        """
        pass

    @abstractmethod
    def save(self, ledger: Ledger) -> None:
        """Write every account and entry of the ledger."""
        pass
