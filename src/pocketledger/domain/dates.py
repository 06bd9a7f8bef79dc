"""Calendar date value object used by ledger entries."""

import re
from dataclasses import dataclass, replace
from datetime import date

from pocketledger.domain.errors import InvalidDate

MIN_YEAR = 2000
MAX_YEAR = 2100

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
_ISO_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def is_leap_year(year: int) -> bool:
    """Return True for Gregorian leap years."""
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_month(month: int, year: int) -> int:
    """Return the number of days in the given month of the given year."""
    if month == 2 and is_leap_year(year):
        return 29
    return _DAYS_IN_MONTH[month - 1]


@dataclass(frozen=True, order=True)
class CalendarDate:
    """Validated (year, month, day) triple limited to years 2000-2100.

    Ordering follows the field order, so comparisons are lexicographic on
    (year, month, day).
    """

    year: int
    month: int
    day: int

    def __post_init__(self):
        for field_name in ("year", "month", "day"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidDate(f"Date {field_name} must be an integer, got {value!r}")
        if not MIN_YEAR <= self.year <= MAX_YEAR:
            raise InvalidDate(f"Year {self.year} is outside {MIN_YEAR}-{MAX_YEAR}")
        if not 1 <= self.month <= 12:
            raise InvalidDate(f"Month {self.month} is outside 1-12")
        limit = days_in_month(self.month, self.year)
        if not 1 <= self.day <= limit:
            raise InvalidDate(
                f"Day {self.day} is outside 1-{limit} for {self.year:04d}-{self.month:02d}"
            )

    @classmethod
    def today(cls) -> "CalendarDate":
        """Return the current local date."""
        return cls.from_date(date.today())

    @classmethod
    def from_date(cls, value: date) -> "CalendarDate":
        """Build from a standard library date."""
        return cls(value.year, value.month, value.day)

    @classmethod
    def parse(cls, text: str) -> "CalendarDate":
        """Parse the exact ``YYYY-MM-DD`` form produced by ``str()``.

        Raises:
            InvalidDate: If the text is malformed or names an invalid day
        """
        match = _ISO_PATTERN.match(text.strip()) if isinstance(text, str) else None
        if match is None:
            raise InvalidDate(f"Could not parse date '{text}': expected YYYY-MM-DD")
        year, month, day = (int(part) for part in match.groups())
        return cls(year, month, day)

    @classmethod
    def from_record(cls, text: str) -> "CalendarDate":
        """Parse the space separated ``Y M D`` form used by the data file."""
        parts = text.split()
        if len(parts) != 3:
            raise InvalidDate(f"Could not parse date '{text}': expected 'Y M D'")
        try:
            year, month, day = (int(part) for part in parts)
        except ValueError:
            raise InvalidDate(f"Could not parse date '{text}': non-numeric component")
        return cls(year, month, day)

    def to_record(self) -> str:
        """Return the space separated ``Y M D`` form used by the data file."""
        return f"{self.year} {self.month} {self.day}"

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)

    # Field mutators return a new validated date and leave self untouched.
    def with_year(self, year: int) -> "CalendarDate":
        return replace(self, year=year)

    def with_month(self, month: int) -> "CalendarDate":
        return replace(self, month=month)

    def with_day(self, day: int) -> "CalendarDate":
        return replace(self, day=day)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"
