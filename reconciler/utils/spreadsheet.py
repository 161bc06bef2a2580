"""Spreadsheet reading.

Turns .xlsx/.xls/.csv files into the row dicts the processors consume. A
workbook is read from disk once; choosing another sheet or header row
re-derives the rows from the cached grid.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from ..models import FileRole, LayoutTag, RawRow, SourceFile
from .cell_normalization import disambiguate_labels, is_missing, normalize_cell_value

logger = logging.getLogger(__name__)

# Words expected in the header row of master and promoter files
HEADER_KEYWORDS = ('VENDEDOR', 'NOME', 'CPF', 'CLIENTE')

CSV_ENCODINGS = ('utf-8-sig', 'cp1252')

# Candidate CSV separators, in order of preference when counts tie
CSV_DELIMITERS = (';', ',', '\t')

EXCEL_ENGINES = {
    '.xlsx': 'openpyxl',
    '.xlsm': 'openpyxl',
    '.xls': 'xlrd',
}


def _csv_delimiter(path: Path, encoding: str) -> str:
    """Pick the separator that occurs most often in the header line.

    A single-column file has none of them and is read with ','.
    """
    with open(path, encoding=encoding, newline='') as f:
        header = f.readline()
    counts = [header.count(delimiter) for delimiter in CSV_DELIMITERS]
    if not any(counts):
        return ','
    return CSV_DELIMITERS[counts.index(max(counts))]


def _read_csv(path: Path) -> pd.DataFrame:
    for encoding in CSV_ENCODINGS:
        try:
            return pd.read_csv(
                path,
                header=None,
                dtype=str,  # Keep CPFs and amounts exactly as written
                keep_default_na=False,
                sep=_csv_delimiter(path, encoding),
                encoding=encoding,
            )
        except UnicodeDecodeError:
            logger.debug(f"{path.name} is not {encoding}, trying next encoding")
    raise ValueError(f"Could not decode {path.name} with any of: {', '.join(CSV_ENCODINGS)}")


class Workbook:
    """The raw cell grids of every sheet of one file."""

    def __init__(self, name: str, sheets: Dict[str, pd.DataFrame]):
        if not sheets:
            raise ValueError(f"'{name}' has no sheets")
        self.name = name
        self._sheets = sheets

    @classmethod
    def load(cls, path: Path) -> 'Workbook':
        """Read every sheet of a file without interpreting any header.

        Raises:
            ValueError: If the file type is unsupported, or the file has no
                sheets or cannot be decoded
        """
        path = Path(path)
        suffix = path.suffix.lower()
        if suffix != '.csv' and suffix not in EXCEL_ENGINES:
            raise ValueError(f"Unsupported file type '{path.suffix}' for {path.name}")
        logger.info(f"Reading {path.name}")
        if suffix == '.csv':
            sheets = {path.stem: _read_csv(path)}
        else:
            sheets = pd.read_excel(
                path, sheet_name=None, header=None, dtype=object, engine=EXCEL_ENGINES[suffix]
            )
        return cls(path.name, sheets)

    @classmethod
    def from_rows(cls, name: str, sheets: Dict[str, List[List[Any]]]) -> 'Workbook':
        """Build a workbook from in-memory grids (lists of cell lists)."""
        return cls(name, {sheet: pd.DataFrame(grid) for sheet, grid in sheets.items()})

    @property
    def sheet_names(self) -> List[str]:
        return list(self._sheets)

    def _grid(self, sheet: Optional[str]) -> pd.DataFrame:
        if sheet is None:
            return next(iter(self._sheets.values()))
        if sheet not in self._sheets:
            raise ValueError(
                f"Sheet '{sheet}' not found in {self.name}. "
                f"Available sheets: {', '.join(self.sheet_names)}"
            )
        return self._sheets[sheet]

    def detect_header_row(self, sheet: Optional[str] = None) -> int:
        """Guess whether the header is on the first or the second row.

        Returns 1 when the second row carries more header keywords than the
        first, else 0.
        """
        grid = self._grid(sheet)

        def score(position: int) -> int:
            if position >= len(grid):
                return 0
            line = ' '.join(str(normalize_cell_value(v)) for v in grid.iloc[position]).upper()
            return sum(1 for keyword in HEADER_KEYWORDS if keyword in line)

        return 1 if score(1) > score(0) else 0

    def rows(self, sheet: Optional[str] = None, header_row: int = 0) -> Tuple[List[str], List[RawRow]]:
        """Derive labelled rows from a sheet.

        Args:
            sheet: Sheet name, defaults to the first sheet
            header_row: 0-based position of the header row

        Returns:
            Tuple of (column labels, rows). Fully blank rows are skipped and
            blank cells are ''.
        """
        if header_row < 0:
            raise ValueError("header_row must not be negative")
        grid = self._grid(sheet)
        if header_row >= len(grid):
            return [], []

        labels = disambiguate_labels(grid.iloc[header_row].tolist())
        rows = []
        for values in grid.iloc[header_row + 1:].itertuples(index=False):
            cells = [normalize_cell_value(v) for v in values]
            if all(is_missing(c) for c in cells):
                continue
            rows.append(dict(zip(labels, cells)))
        return labels, rows

    def source_file(self, role: FileRole, sheet: Optional[str] = None,
                    header_row: Optional[int] = None,
                    layout: Optional[LayoutTag] = None) -> SourceFile:
        """Freeze one sheet/header choice of this workbook into a SourceFile.

        The header row is auto-detected when not given.
        """
        sheet_name = sheet or self.sheet_names[0]
        if header_row is None:
            header_row = self.detect_header_row(sheet_name)
        labels, rows = self.rows(sheet_name, header_row)
        logger.debug(f"{self.name}[{sheet_name}] header row {header_row}: {len(rows)} rows")
        return SourceFile(
            name=self.name,
            role=role,
            rows=tuple(rows),
            columns=tuple(labels),
            sheet_name=sheet_name,
            header_row=header_row,
            layout=layout,
        )
