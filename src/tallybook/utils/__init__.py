"""Utility functions for tallybook."""

from tallybook.utils.date_parser import parse_date, parse_iso_date, resolve_period
from tallybook.utils.amount_parser import parse_amount, parse_csv_amount

__all__ = ["parse_date", "parse_iso_date", "resolve_period", "parse_amount", "parse_csv_amount"]
