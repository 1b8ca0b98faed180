"""Utility functions for bankbook."""

from bankbook.utils.date_parser import parse_date
from bankbook.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_amount"]
