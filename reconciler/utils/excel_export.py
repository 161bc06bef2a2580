"""
Excel Export Utilities
"""
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import pandas as pd


def rows_to_frame(rows: Sequence[Dict[str, Any]], columns: Optional[List[str]] = None) -> pd.DataFrame:
    """Build a DataFrame keeping the column order even when there are no rows."""
    return pd.DataFrame(list(rows), columns=columns)


def write_sheets(target: Union[Path, BytesIO], sheets: Dict[str, pd.DataFrame]) -> None:
    """
    Write one or more DataFrames as sheets of a single workbook.

    Args:
        target: File path or buffer to write to
        sheets: Sheet name -> DataFrame, written in order
    """
    with pd.ExcelWriter(target, engine="openpyxl") as writer:
        for sheet_name, df in sheets.items():
            df.to_excel(writer, index=False, sheet_name=sheet_name)


def convert_sheets_to_excel(sheets: Dict[str, pd.DataFrame]) -> bytes:
    """
    Convert DataFrames to Excel bytes.

    Returns:
        bytes: Excel file as bytes
    """
    output = BytesIO()
    write_sheets(output, sheets)
    return output.getvalue()
