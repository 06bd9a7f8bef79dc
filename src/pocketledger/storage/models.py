"""SQLAlchemy models for ledger snapshots."""

from sqlalchemy import (
    Column,
    ForeignKey,
    Integer,
    SmallInteger,
    String,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import Session, declarative_base, relationship, sessionmaker

Base = declarative_base()


class Account(Base):
    """Account row; ``position`` keeps the ledger's account order."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    position = Column(Integer, nullable=False)

    # Relationships
    entries = relationship(
        "Entry",
        back_populates="account",
        cascade="all, delete-orphan",
        order_by="Entry.position",
    )


class Entry(Base):
    """Ledger entry row."""

    __tablename__ = "entries"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    entry_id = Column(Integer, nullable=False)
    position = Column(Integer, nullable=False)
    # Decimal text keeps amounts exact on SQLite
    amount = Column(String, nullable=False)
    direction = Column(SmallInteger, nullable=False)
    category = Column(String, nullable=False)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    day = Column(Integer, nullable=False)
    currency = Column(String(3), nullable=False)
    description = Column(String, nullable=False)

    # Entry ids are unique per account
    __table_args__ = (UniqueConstraint("account_id", "entry_id", name="uq_account_entry_id"),)

    # Relationships
    account = relationship("Account", back_populates="entries")
    tags = relationship(
        "EntryTag",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="EntryTag.position",
    )


class EntryTag(Base):
    """Tag attached to an entry; ``position`` keeps insertion order."""

    __tablename__ = "entry_tags"

    id = Column(Integer, primary_key=True)
    entry_row_id = Column(Integer, ForeignKey("entries.id"), nullable=False)
    position = Column(Integer, nullable=False)
    tag = Column(String, nullable=False)

    # Relationships
    entry = relationship("Entry", back_populates="tags")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
