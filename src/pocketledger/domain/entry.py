"""Ledger entry (income or expense record) and its flat-file line codec."""

from decimal import Decimal, InvalidOperation
from enum import IntEnum
from typing import Iterable, Optional, Union

from pocketledger.domain.dates import CalendarDate
from pocketledger.domain.errors import (
    DuplicateTag,
    InvalidArgument,
    InvalidDate,
    TagLimitExceeded,
)
from pocketledger.domain.rates import ExchangeRateTable

MAX_TAGS = 5
DEFAULT_CURRENCY = "RUB"
DEFAULT_CATEGORY = "Uncategorized"
DESCRIPTION_PLACEHOLDER = "No description"
NO_TAGS_MARKER = "-"
FIELD_SEPARATOR = ","
TAG_SEPARATOR = ";"

AmountValue = Union[Decimal, int, float, str]


class Direction(IntEnum):
    """Entry direction; the integer value is what the data file stores."""

    CREDIT = 0
    DEBIT = 1

    @property
    def label(self) -> str:
        return "income" if self is Direction.CREDIT else "expense"


class EntryIdGenerator:
    """Monotonic id source owned by a ledger."""

    def __init__(self, start: int = 1):
        if start < 1:
            raise InvalidArgument(f"Entry ids start at 1, got {start}")
        self._next = start

    @property
    def peek(self) -> int:
        """Id the next call to ``next_id`` will return."""
        return self._next

    def next_id(self) -> int:
        entry_id = self._next
        self._next += 1
        return entry_id

    def reset(self, start: int) -> None:
        """Restart the sequence at ``start``."""
        if start < 1:
            raise InvalidArgument(f"Entry ids start at 1, got {start}")
        self._next = start

    def advance_past(self, entry_id: int) -> None:
        """Make sure future ids are greater than ``entry_id``."""
        if entry_id >= self._next:
            self._next = entry_id + 1


def has_line_break(text: str) -> bool:
    """Return True if ``text`` would be split by ``str.splitlines``."""
    return "".join(text.splitlines()) != text


def is_currency_code(code: object) -> bool:
    """Return True for three ASCII letters (case is preserved, not checked)."""
    return isinstance(code, str) and len(code) == 3 and code.isascii() and code.isalpha()


def to_decimal(value: AmountValue) -> Decimal:
    """Coerce a number or numeric string to a finite Decimal.

    Raises:
        InvalidArgument: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise InvalidArgument(f"Amount must be a number, got {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidArgument(f"Amount must be a number, got {value!r}")
    if not amount.is_finite():
        raise InvalidArgument(f"Amount must be finite, got {value!r}")
    return amount


def _to_amount(value: AmountValue) -> Decimal:
    amount = to_decimal(value)
    if amount <= 0:
        raise InvalidArgument(f"Amount must be positive, got {value!r}")
    return amount


def _check_category(category: str) -> str:
    if not isinstance(category, str) or not category.strip():
        raise InvalidArgument("Category cannot be empty")
    if FIELD_SEPARATOR in category or has_line_break(category):
        raise InvalidArgument(f"Category cannot contain ',' or line breaks: {category!r}")
    return category


def _check_date(value: CalendarDate) -> CalendarDate:
    if not isinstance(value, CalendarDate):
        raise InvalidArgument(f"Invalid date: {value!r}")
    return value


def _check_direction(direction: Direction) -> Direction:
    try:
        return Direction(direction)
    except ValueError:
        raise InvalidArgument(f"Direction must be 0 (credit) or 1 (debit), got {direction!r}")


def _check_currency(code: str) -> str:
    if not is_currency_code(code):
        raise InvalidArgument(f"Currency must be a three-letter code, got {code!r}")
    return code


def _check_description(description: Optional[str]) -> str:
    if not description:
        return DESCRIPTION_PLACEHOLDER
    if has_line_break(description):
        raise InvalidArgument("Description cannot contain line breaks")
    return description


def _check_tag(tag: str) -> str:
    if not isinstance(tag, str) or not tag.strip():
        raise InvalidArgument("Tag cannot be empty")
    if tag == NO_TAGS_MARKER or FIELD_SEPARATOR in tag or TAG_SEPARATOR in tag or has_line_break(tag):
        raise InvalidArgument(f"Tag cannot be '-' or contain ',' ';' or line breaks: {tag!r}")
    return tag


class LedgerEntry:
    """A single dated, categorized income or expense record.

    Amounts are always stored positive; the sign comes from ``direction``.
    Every setter validates its field and leaves the entry untouched when
    the new value is rejected.
    """

    def __init__(
        self,
        entry_id: int,
        amount: AmountValue,
        category: str,
        direction: Direction,
        date: CalendarDate,
        description: Optional[str] = None,
        currency: str = DEFAULT_CURRENCY,
        tags: Iterable[str] = (),
    ):
        """Create a validated entry.

        Args:
            entry_id: Positive id, usually from the ledger's EntryIdGenerator
            amount: Positive amount in ``currency`` units
            category: Non-empty category name
            direction: CREDIT (income) or DEBIT (expense)
            date: Entry date
            description: Free text; empty becomes a placeholder
            currency: Three-letter currency code
            tags: Up to five unique tags

        Raises:
            InvalidArgument: For the first violated invariant, checked in the
                order amount, category, date
            TagLimitExceeded: If more than five tags are given
            DuplicateTag: If a tag repeats
        """
        if isinstance(entry_id, bool) or not isinstance(entry_id, int) or entry_id < 1:
            raise InvalidArgument(f"Entry id must be a positive integer, got {entry_id!r}")
        self._id = entry_id
        self._amount = _to_amount(amount)
        self._category = _check_category(category)
        self._date = _check_date(date)
        self._direction = _check_direction(direction)
        self._description = _check_description(description)
        self._currency = _check_currency(currency)
        self._tags: list[str] = []
        if isinstance(tags, str):
            tags = [tags]
        for tag in tags:
            self.add_tag(tag)

    @classmethod
    def blank(cls, entry_id: int, currency: str = DEFAULT_CURRENCY) -> "LedgerEntry":
        """Return a builder-state entry with a zero amount.

        The entry is not insertable into an account until ``set_amount``
        has been called with a positive value.
        """
        entry = cls.__new__(cls)
        entry._id = entry_id
        entry._amount = Decimal("0")
        entry._category = DEFAULT_CATEGORY
        entry._direction = Direction.DEBIT
        entry._date = CalendarDate.today()
        entry._description = DESCRIPTION_PLACEHOLDER
        entry._currency = _check_currency(currency)
        entry._tags = []
        return entry

    @property
    def id(self) -> int:
        return self._id

    @property
    def amount(self) -> Decimal:
        return self._amount

    @property
    def category(self) -> str:
        return self._category

    @property
    def direction(self) -> Direction:
        return self._direction

    @property
    def date(self) -> CalendarDate:
        return self._date

    @property
    def description(self) -> str:
        return self._description

    @property
    def currency(self) -> str:
        return self._currency

    @property
    def tags(self) -> tuple[str, ...]:
        return tuple(self._tags)

    @property
    def is_credit(self) -> bool:
        return self._direction is Direction.CREDIT

    def set_amount(self, amount: AmountValue) -> None:
        self._amount = _to_amount(amount)

    def set_category(self, category: str) -> None:
        self._category = _check_category(category)

    def set_date(self, date: CalendarDate) -> None:
        self._date = _check_date(date)

    def set_direction(self, direction: Direction) -> None:
        self._direction = _check_direction(direction)

    def set_description(self, description: Optional[str]) -> None:
        self._description = _check_description(description)

    def set_currency(self, currency: str) -> None:
        self._currency = _check_currency(currency)

    def add_tag(self, tag: str) -> None:
        """Append a tag, keeping insertion order.

        Raises:
            TagLimitExceeded: If the entry already has five tags
            DuplicateTag: If the tag is already present
        """
        if len(self._tags) >= MAX_TAGS:
            raise TagLimitExceeded(f"Entry {self._id} already has {MAX_TAGS} tags")
        if tag in self._tags:
            raise DuplicateTag(f"Entry {self._id} already has tag '{tag}'")
        self._tags.append(_check_tag(tag))

    def remove_tag(self, index: int) -> None:
        """Remove the tag at ``index``; out-of-range indexes are ignored."""
        if 0 <= index < len(self._tags):
            del self._tags[index]

    def has_any_tag(self, tags: Iterable[str]) -> bool:
        return any(tag in self._tags for tag in tags)

    def validate(self) -> None:
        """Raise InvalidArgument if the entry is not in an insertable state."""
        _to_amount(self._amount)
        _check_category(self._category)
        _check_date(self._date)

    def signed_amount(self) -> Decimal:
        """Amount with the sign implied by the direction."""
        return self._amount if self.is_credit else -self._amount

    def amount_in_base(self, rates: ExchangeRateTable, base_currency: str) -> Decimal:
        """Signed amount converted into ``base_currency``.

        Raises:
            UnknownCurrency: If the conversion needs a missing rate
        """
        return rates.convert(self.signed_amount(), self._currency, base_currency)

    def summary(self) -> str:
        """One-line human readable form."""
        sign = "[+]" if self.is_credit else "[-]"
        return (
            f"{self._date} {sign} {self._amount:.2f} {self._currency} "
            f"({self._category}) {self._description}"
        )

    def to_record(self) -> str:
        """Serialize to one data-file line (without the newline)."""
        tags = TAG_SEPARATOR.join(self._tags) if self._tags else NO_TAGS_MARKER
        return FIELD_SEPARATOR.join(
            [
                str(self._id),
                format(self._amount, "f"),
                str(int(self._direction)),
                self._category,
                self._date.to_record(),
                self._currency,
                self._description,
                tags,
            ]
        )

    @classmethod
    def from_record(cls, line: str, default_currency: str = DEFAULT_CURRENCY) -> "LedgerEntry":
        """Parse one data-file line.

        Currency, description and tags are optional trailing fields. A line
        with exactly six fields is read as the legacy layout when the sixth
        field is not a currency code.

        Raises:
            InvalidArgument: If the line is malformed or a field is invalid
        """
        parts = line.rstrip("\r\n").split(FIELD_SEPARATOR)
        if len(parts) < 5:
            raise InvalidArgument(f"Expected at least 5 fields, got {len(parts)}")

        raw_id, raw_amount, raw_direction, category, raw_date = parts[:5]
        try:
            entry_id = int(raw_id)
            direction = Direction(int(raw_direction))
        except ValueError as e:
            raise InvalidArgument(f"Bad id or direction field: {e}")
        try:
            entry_date = CalendarDate.from_record(raw_date)
        except InvalidDate as e:
            raise InvalidArgument(str(e))

        currency = default_currency
        description = None
        tags: list[str] = []
        rest = parts[5:]
        if len(rest) == 1:
            if is_currency_code(rest[0]):
                currency = rest[0]
            else:
                description = rest[0]
        elif len(rest) == 2:
            currency, description = rest
        elif len(rest) >= 3:
            currency = rest[0]
            description = FIELD_SEPARATOR.join(rest[1:-1])
            if rest[-1] != NO_TAGS_MARKER and rest[-1]:
                tags = rest[-1].split(TAG_SEPARATOR)

        return cls(
            entry_id=entry_id,
            amount=raw_amount,
            category=category,
            direction=direction,
            date=entry_date,
            description=description,
            currency=currency,
            tags=tags,
        )

    def _key(self) -> tuple:
        return (
            self._id,
            self._amount,
            self._direction,
            self._category,
            self._date,
            self._currency,
            self._description,
            tuple(self._tags),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LedgerEntry):
            return NotImplemented
        return self._key() == other._key()

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return (
            f"LedgerEntry(id={self._id}, amount={self._amount}, "
            f"direction={self._direction.name}, category={self._category!r}, "
            f"date={self._date}, currency={self._currency!r})"
        )
