"""Exchange rate sources for pocketledger."""

from pocketledger.rates.source import CbrRateSource, RateSource, StaticRateSource

__all__ = ["RateSource", "CbrRateSource", "StaticRateSource"]
