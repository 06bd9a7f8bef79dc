"""Utility functions for pocketledger."""

from pocketledger.utils.amount_parser import parse_amount
from pocketledger.utils.date_parser import parse_date

__all__ = ["parse_date", "parse_amount"]
