"""Spreadsheet cell and header label normalization utilities."""

from typing import Any, Dict, Iterable, List
import numpy as np
import pandas as pd

EMPTY_LABEL = '__EMPTY'


def is_missing(value: Any) -> bool:
    """Check whether a cell value is absent.

    None, NaN-like values (``np.nan``, ``pd.NA``, ``pd.NaT``) and blank
    strings are all treated as missing.

    Examples:
        >>> is_missing(np.nan)
        True
        >>> is_missing('   ')
        True
        >>> is_missing(0)
        False
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if pd.api.types.is_scalar(value):
        return bool(pd.isna(value))
    return False


def normalize_cell_value(value: Any) -> Any:
    """Normalize a raw cell read by pandas into a plain Python scalar.

    Handles:
    - NaN/None -> empty string (blank cells)
    - numpy types -> Python native types
    - Everything else passes through unchanged

    Args:
        value: Any value read from a worksheet

    Returns:
        The cell value with numpy/pandas wrappers removed

    Examples:
        >>> normalize_cell_value(np.nan)
        ''
        >>> normalize_cell_value(np.int64(42))
        42
    """
    if value is None:
        return ''
    if pd.api.types.is_scalar(value) and not isinstance(value, str) and pd.isna(value):
        return ''

    if isinstance(value, (np.integer, np.floating)):
        return value.item()

    if isinstance(value, np.bool_):
        return bool(value)

    return value


def normalize_header_label(label: Any) -> str:
    """Turn a header cell into a column label.

    Labels keep their literal text, case and punctuation. Numeric header
    cells are rendered without a trailing ``.0``; blank cells become ''.

    Examples:
        >>> normalize_header_label('Comissão %')
        'Comissão %'
        >>> normalize_header_label(2024.0)
        '2024'
    """
    value = normalize_cell_value(label)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def disambiguate_labels(labels: Iterable[Any]) -> List[str]:
    """Give every column a unique label.

    Repeated labels get ``_1``, ``_2``... suffixes in order of appearance
    and blank labels become ``__EMPTY``, ``__EMPTY_1``... so a file that
    repeats a header keeps every one of its values.

    Example:
        >>> disambiguate_labels(['CPF', 'Comissão %', 'Comissão %', ''])
        ['CPF', 'Comissão %', 'Comissão %_1', '__EMPTY']
    """
    seen: Dict[str, int] = {}
    result = []
    for raw in labels:
        base = normalize_header_label(raw) or EMPTY_LABEL
        label = base
        count = seen.get(base, 0)
        while label in seen:
            count += 1
            label = f"{base}_{count}"
        seen[base] = count
        seen.setdefault(label, 0)
        result.append(label)
    return result
