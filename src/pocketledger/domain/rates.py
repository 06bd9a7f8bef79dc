"""Exchange rate table shared by every account during balance computation."""

import json
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Mapping, Union

from pocketledger.domain.errors import (
    InvalidArgument,
    PersistenceError,
    UnknownCurrency,
    unknown_currency,
)

logger = logging.getLogger(__name__)

RateValue = Union[Decimal, float, int, str]


def _to_rate(code: str, value: RateValue) -> Decimal:
    if isinstance(value, bool):
        raise InvalidArgument(f"Rate for '{code}' must be a number, got {value!r}")
    try:
        rate = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidArgument(f"Rate for '{code}' must be a number, got {value!r}")
    if not rate.is_finite() or rate <= 0:
        raise InvalidArgument(f"Rate for '{code}' must be positive, got {value!r}")
    return rate


def _validated(mapping: Mapping[str, RateValue]) -> dict[str, Decimal]:
    rates: dict[str, Decimal] = {}
    for code, value in mapping.items():
        if not isinstance(code, str) or not code:
            raise InvalidArgument(f"Currency code must be a non-empty string, got {code!r}")
        rates[code] = _to_rate(code, value)
    return rates


class ExchangeRateTable:
    """Mapping of currency code to its rate against the reference currency.

    The table is only ever replaced wholesale, from the network source or
    from the cache file; it is never merged incrementally.
    """

    def __init__(self, rates: Mapping[str, RateValue] | None = None):
        self._rates: dict[str, Decimal] = _validated(rates) if rates else {}

    def __len__(self) -> int:
        return len(self._rates)

    def __contains__(self, code: object) -> bool:
        return code in self._rates

    def __repr__(self) -> str:
        return f"ExchangeRateTable({len(self._rates)} currencies)"

    def is_supported(self, code: str) -> bool:
        """Return True if the currency has a rate."""
        return code in self._rates

    def rate(self, code: str) -> Decimal:
        """Return the rate for a currency.

        Raises:
            UnknownCurrency: If the currency is not in the table
        """
        try:
            return self._rates[code]
        except KeyError:
            raise UnknownCurrency(unknown_currency(code)) from None

    def currencies(self) -> list[str]:
        return sorted(self._rates)

    def as_dict(self) -> dict[str, Decimal]:
        return dict(self._rates)

    def convert(self, amount: Decimal, from_code: str, to_code: str) -> Decimal:
        """Convert an amount between two currencies.

        Converting a currency to itself returns the amount unchanged, even
        when the table is empty.

        Raises:
            UnknownCurrency: If either currency is missing from the table
        """
        if from_code == to_code:
            return amount
        return amount * self.rate(from_code) / self.rate(to_code)

    def replace_all(self, mapping: Mapping[str, RateValue]) -> None:
        """Discard current rates and install ``mapping``.

        The mapping is validated first; on failure the table is unchanged.
        """
        self._rates = _validated(mapping)
        logger.debug("Installed %d exchange rates", len(self._rates))

    def save(self, path: str | Path) -> None:
        """Write the rates as a flat JSON object of code to number."""
        payload = {code: float(rate) for code, rate in sorted(self._rates.items())}
        try:
            Path(path).write_text(json.dumps(payload, indent=4), encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Could not write rate cache '{path}': {e}")

    def load(self, path: str | Path) -> None:
        """Replace the rates with the contents of a cache file.

        Raises:
            PersistenceError: If the file is missing or corrupt; the table
                is left unchanged in that case
        """
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"), parse_float=Decimal)
        except FileNotFoundError:
            raise PersistenceError(f"Rate cache '{path}' does not exist")
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Could not read rate cache '{path}': {e}")

        if not isinstance(raw, dict) or not raw:
            raise PersistenceError(f"Rate cache '{path}' does not hold a currency mapping")
        try:
            rates = _validated(raw)
        except InvalidArgument as e:
            raise PersistenceError(f"Rate cache '{path}' is corrupt: {e}")

        self._rates = rates
        logger.debug("Loaded %d exchange rates from %s", len(rates), path)
