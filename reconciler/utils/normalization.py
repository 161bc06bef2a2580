"""Locale-aware scalar normalization utilities.

This module provides the parsers that turn raw spreadsheet cells into the
values used for matching and reporting: CPF identifiers, personal names,
Brazilian or US formatted amounts, percentages and spreadsheet dates.

None of these functions raise on bad input. Anything that cannot be parsed
degrades to the zero value of its type ('' or 0.0).
"""

import logging
import numbers
import re
import unicodedata
from datetime import date, datetime, timedelta
from typing import Any

from .cell_normalization import is_missing

logger = logging.getLogger(__name__)

# Day zero of the spreadsheet serial date convention
SERIAL_DATE_EPOCH = datetime(1899, 12, 30)
# Largest serial a spreadsheet accepts (31/12/9999)
MAX_SERIAL_DATE = 2958465
DATE_FORMAT = '%d/%m/%Y'

_NON_DIGITS = re.compile(r'\D')
_COMBINING_MARKS = re.compile(r'[\u0300-\u036f]')
_WHITESPACE = re.compile(r'\s+')
_NUMERIC_CHARS = re.compile(r'[^\d.,-]')
_NUMBER_PREFIX = re.compile(r'-?(?:\d+\.?\d*|\.\d+)')


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _render_number(value: Any) -> str:
    """Render a number the way it reads in a cell ('45000', not '45000.0')."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def normalize_identifier(value: Any) -> str:
    """Reduce a CPF (or any identifier) to its digits.

    Numeric cells are rendered first so that a CPF stored as the float
    ``11122233344.0`` does not pick up an extra zero.

    Examples:
        >>> normalize_identifier('111.222.333-44')
        '11122233344'
        >>> normalize_identifier(11122233344.0)
        '11122233344'
        >>> normalize_identifier(None)
        ''
    """
    if is_missing(value):
        return ''
    text = _render_number(value) if _is_number(value) else str(value)
    return _NON_DIGITS.sub('', text)


def normalize_name(value: Any) -> str:
    """Normalize a personal name into its comparison key.

    Applies the following transformations in order:
    1. Convert to lowercase
    2. Decompose (NFD) and drop the combining accent marks
    3. Collapse runs of whitespace into one space
    4. Trim

    Two names identify the same person when their keys are equal and
    non-empty.

    Examples:
        >>> normalize_name('JOÃO  SILVA')
        'joao silva'
        >>> normalize_name('  Conceição ')
        'conceicao'
        >>> normalize_name(None)
        ''
    """
    if is_missing(value):
        return ''
    text = unicodedata.normalize('NFD', str(value).lower())
    text = _COMBINING_MARKS.sub('', text)
    return _WHITESPACE.sub(' ', text).strip()


def parse_amount(value: Any) -> float:
    """Parse a currency amount in either Brazilian or US notation.

    The separator that appears last is the decimal separator and the other
    one, if present, is a thousands separator. A lone separator is always
    decimal. Numbers pass through unchanged.

    Args:
        value: Raw cell value

    Returns:
        The parsed amount, or 0.0 when nothing numeric is left

    Examples:
        >>> parse_amount('1.234,56')
        1234.56
        >>> parse_amount('1,234.56')
        1234.56
        >>> parse_amount('R$ 150,00')
        150.0
        >>> parse_amount('')
        0.0
    """
    if is_missing(value):
        return 0.0
    if _is_number(value):
        return value

    text = str(value).strip()
    last_comma = text.rfind(',')
    last_dot = text.rfind('.')
    cleaned = _NUMERIC_CHARS.sub('', text)

    if last_comma > last_dot:
        cleaned = cleaned.replace('.', '').replace(',', '.', 1)
    elif last_dot > last_comma:
        cleaned = cleaned.replace(',', '')

    # Leading numeric prefix only, trailing garbage is ignored
    match = _NUMBER_PREFIX.match(cleaned)
    if not match:
        logger.debug(f"Unparseable amount {value!r}, using 0")
        return 0.0
    return float(match.group())


def parse_percentage(value: Any) -> float:
    """Parse a percentage figure, with or without a ``%`` sign.

    Examples:
        >>> parse_percentage('2,5%')
        2.5
        >>> parse_percentage(1.5)
        1.5
    """
    if is_missing(value):
        return 0.0
    if _is_number(value):
        return value
    return parse_amount(str(value).replace('%', '').strip())


def parse_port_percentage(value: Any) -> float:
    """Parse a PORT commission percentage.

    PORT exports mix both encodings: ``0,025`` (a fraction) and ``2,5`` (a
    percentage) both mean 2.5%. Values strictly between 0 and 1 are read as
    fractions. Only the PORT layout uses this rule.

    Examples:
        >>> parse_port_percentage('0,025')
        2.5
        >>> parse_port_percentage('2,5')
        2.5
    """
    if isinstance(value, str):
        value = value.replace('%', '').strip()
    number = parse_amount(value)
    if 0 < number < 1:
        return number * 100
    return number


def format_spreadsheet_date(value: Any) -> str:
    """Render an issue date cell as DD/MM/YYYY.

    Numbers are spreadsheet serial dates (days since 30/12/1899). Serials
    outside the range a spreadsheet accepts are returned as the literal
    number. Text is assumed to be readable already and passes through.

    Examples:
        >>> format_spreadsheet_date(45000)
        '15/03/2023'
        >>> format_spreadsheet_date('15/03/2023')
        '15/03/2023'
        >>> format_spreadsheet_date(-5)
        '-5'
    """
    if is_missing(value) or (_is_number(value) and value == 0):
        return ''

    if isinstance(value, (datetime, date)):
        return value.strftime(DATE_FORMAT)

    if _is_number(value):
        days = int(value)
        if 1 <= days <= MAX_SERIAL_DATE:
            return (SERIAL_DATE_EPOCH + timedelta(days=days)).strftime(DATE_FORMAT)
        logger.debug(f"Serial date {value!r} out of range, keeping literal value")
        return _render_number(value)

    return str(value)
