"""Tests for the Found / Pendências row views and the workbook writer."""
from datetime import date
from io import BytesIO

import pandas as pd

from ..models import LayoutTag, MatchKind, MatchResult
from ..processors.export import (
    FOUND_COLUMNS,
    FOUND_SHEET,
    PENDING_COLUMNS,
    PENDING_SHEET,
    build_export_views,
    long_date_stamp,
    short_date_stamp,
)
from ..utils.excel_export import convert_sheets_to_excel, rows_to_frame
from .conftest import make_entry, make_record

RUN_DATE = date(2026, 10, 18)


def test_date_stamps():
    assert short_date_stamp(RUN_DATE) == '18/out'
    assert long_date_stamp(RUN_DATE) == '18 de outubro'
    assert short_date_stamp(date(2026, 3, 5)) == '05/mar'
    assert long_date_stamp(date(2026, 3, 5)) == '5 de março'


def test_build_export_views():
    master = make_entry('Carlos', 'Maria Souza', '111.222.333-44', source_file='mestre.xlsx')
    matched = MatchResult(
        record=make_record('Maria Souza', '111.222.333-44', commission=150.0,
                           layout=LayoutTag.PORT, source_file='port.xlsx'),
        kind=MatchKind.ID_EXACT,
        master=master,
    )
    pending = MatchResult(
        record=make_record('Xavier', layout=LayoutTag.CREDFORYOU, source_file='cfy.xlsx'),
        kind=MatchKind.NONE,
    )

    found, missing = build_export_views([pending, matched], today=RUN_DATE)

    assert len(found) == 1
    row = found[0]
    assert list(row) == FOUND_COLUMNS
    assert row['PROMOTORA'] == 'PORT'
    assert row['CPF'] == '11122233344'
    assert row['VENDEDOR'] == 'Carlos'
    assert row['FILIAL'] == ''
    assert row['COMISSÃO'] == 150.0
    assert row['STATUS'] == 'LIBERADO'
    assert row['DATA'] == '18/out'
    assert row['ARQUIVO (PROMOTORA)'] == 'port.xlsx'
    assert row['ARQUIVO (MESTRE)'] == 'mestre.xlsx'

    assert len(missing) == 1
    row = missing[0]
    assert list(row) == PENDING_COLUMNS
    assert row['PROMOTORA'] == 'CREDFORYOU'
    assert row['CLIENTE'] == 'Xavier'
    assert row['DATA RELATORIO'] == '18 de outubro'
    assert row['ARQUIVO (PROMOTORA)'] == 'cfy.xlsx'


def test_build_export_views_empty():
    assert build_export_views([], today=RUN_DATE) == ([], [])


def test_write_sheets_keeps_headers_without_rows():
    content = convert_sheets_to_excel({
        FOUND_SHEET: rows_to_frame([], FOUND_COLUMNS),
        PENDING_SHEET: rows_to_frame([], PENDING_COLUMNS),
    })
    sheets = pd.read_excel(BytesIO(content), sheet_name=None)

    assert list(sheets) == [FOUND_SHEET, PENDING_SHEET]
    assert list(sheets[FOUND_SHEET].columns) == FOUND_COLUMNS
    assert list(sheets[PENDING_SHEET].columns) == PENDING_COLUMNS
    assert sheets[FOUND_SHEET].empty
