"""SQLAlchemy snapshot storage."""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pocketledger.domain.account import Account
from pocketledger.domain.errors import DomainError, PersistenceError
from pocketledger.domain.ledger import Ledger
from pocketledger.storage.base import LedgerStore
from pocketledger.storage.mappers import account_to_orm, entry_to_domain
from pocketledger.storage.models import (
    Account as ORMAccount,
    Entry as ORMEntry,
    EntryTag as ORMEntryTag,
    create_session_factory,
)

logger = logging.getLogger(__name__)


class SQLAlchemyStore(LedgerStore):
    """Keeps a full snapshot of the ledger in a relational database.

    ``save`` replaces the previous snapshot inside one transaction, so a
    failed save leaves the old snapshot intact.
    """

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy store.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
        """
        self.database_url = database_url
        self.session_factory = create_session_factory(database_url)
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def disconnect(self) -> None:
        """Close the session."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def load(self, ledger: Ledger) -> None:
        session = self._get_session()
        try:
            rows = session.query(ORMAccount).order_by(ORMAccount.position).all()
            accounts = [self._account_to_domain(row) for row in rows]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not read ledger from {self.database_url}: {e}")
        finally:
            session.rollback()
        ledger.restore(accounts)

    def save(self, ledger: Ledger) -> None:
        accounts = ledger.accounts
        session = self._get_session()
        try:
            session.query(ORMEntryTag).delete()
            session.query(ORMEntry).delete()
            session.query(ORMAccount).delete()
            session.add_all(
                account_to_orm(account, position)
                for position, account in enumerate(accounts.values())
            )
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceError(f"Could not write ledger to {self.database_url}: {e}")
        logger.debug("Saved %d accounts to %s", len(accounts), self.database_url)

    @staticmethod
    def _account_to_domain(row: ORMAccount) -> Account:
        account = Account(row.name)
        for orm_entry in row.entries:
            try:
                account.add(entry_to_domain(orm_entry))
            except DomainError as e:
                logger.warning(
                    "Skipping stored entry %s of account '%s': %s",
                    orm_entry.entry_id,
                    row.name,
                    e,
                )
        return account
