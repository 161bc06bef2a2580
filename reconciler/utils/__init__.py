"""Utility functions and helpers."""

from .normalization import (
    normalize_identifier,
    normalize_name,
    parse_amount,
    parse_percentage,
    parse_port_percentage,
    format_spreadsheet_date,
)
from .spreadsheet import Workbook

__all__ = [
    'normalize_identifier',
    'normalize_name',
    'parse_amount',
    'parse_percentage',
    'parse_port_percentage',
    'format_spreadsheet_date',
    'Workbook'
]
