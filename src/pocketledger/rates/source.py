"""External exchange rate sources."""

import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Mapping, Optional

import requests

from pocketledger.domain.errors import RateSourceError

logger = logging.getLogger(__name__)

CBR_DAILY_URL = "https://www.cbr-xml-daily.ru/daily_json.js"
CBR_REFERENCE_CURRENCY = "RUB"
DEFAULT_TIMEOUT = 10.0


class RateSource(ABC):
    """Source of currency -> rate-to-reference mappings."""

    @abstractmethod
    def fetch(self) -> dict[str, Decimal]:
        """Return the current rates.

        Raises:
            RateSourceError: If no rates could be obtained
        """
        pass


class StaticRateSource(RateSource):
    """Serves a fixed mapping; useful offline and in tests."""

    def __init__(self, rates: Mapping[str, Any]):
        self.rates = {code: Decimal(str(rate)) for code, rate in rates.items()}

    def fetch(self) -> dict[str, Decimal]:
        if not self.rates:
            raise RateSourceError("Static rate source is empty")
        return dict(self.rates)


class CbrRateSource(RateSource):
    """Daily rates published by the Central Bank of Russia as JSON.

    Each ``Valute`` item carries ``CharCode``, ``Value`` and ``Nominal``; the
    rate per unit is ``Value / Nominal`` in roubles. The rouble itself is
    added with rate 1.
    """

    def __init__(
        self,
        url: str = CBR_DAILY_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self) -> dict[str, Decimal]:
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.Timeout:
            raise RateSourceError(f"Timed out fetching rates from {self.url}")
        except requests.exceptions.RequestException as e:
            raise RateSourceError(f"Could not fetch rates from {self.url}: {e}")
        except ValueError as e:
            raise RateSourceError(f"Rate source returned invalid JSON: {e}")

        rates = self.parse(payload)
        logger.info("Fetched %d rates from %s", len(rates), self.url)
        return rates

    @staticmethod
    def parse(payload: Any) -> dict[str, Decimal]:
        """Extract rates from a CBR daily JSON document.

        Raises:
            RateSourceError: If the document has no usable ``Valute`` section
        """
        if not isinstance(payload, dict) or not isinstance(payload.get("Valute"), dict):
            raise RateSourceError("Rate document has no 'Valute' section")

        rates: dict[str, Decimal] = {}
        for item in payload["Valute"].values():
            try:
                code = item["CharCode"]
                value = Decimal(str(item["Value"]))
                nominal = Decimal(str(item["Nominal"]))
                rates[code] = value / nominal
            except (KeyError, TypeError, ArithmeticError) as e:
                logger.warning("Skipping malformed rate item %r: %s", item, e)
        if not rates:
            raise RateSourceError("Rate document contains no usable rates")

        rates[CBR_REFERENCE_CURRENCY] = Decimal("1")
        return rates
