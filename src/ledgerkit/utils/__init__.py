"""Utility functions for ledgerkit."""

from ledgerkit.utils.amount_parser import parse_amount
from ledgerkit.utils.date_parser import parse_date
from ledgerkit.utils.match_groups import extract_group
from ledgerkit.utils.number_format import format_number, format_totals

__all__ = ["parse_amount", "parse_date", "extract_group", "format_number", "format_totals"]
