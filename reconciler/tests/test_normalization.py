"""Tests for scalar normalization utilities."""
import math
from datetime import date, datetime

import numpy as np
import pytest

from ..utils.normalization import (
    format_spreadsheet_date,
    normalize_identifier,
    normalize_name,
    parse_amount,
    parse_percentage,
    parse_port_percentage,
)
from ..utils.cell_normalization import disambiguate_labels, is_missing, normalize_cell_value


def test_normalize_identifier():
    """Test CPF normalization for various cell shapes."""
    assert normalize_identifier('111.222.333-44') == '11122233344'
    assert normalize_identifier(' 111 222 333 44 ') == '11122233344'
    assert normalize_identifier(11122233344) == '11122233344'

    # Numeric cells read as floats must not gain a digit
    assert normalize_identifier(11122233344.0) == '11122233344'
    assert normalize_identifier(np.float64(11122233344.0)) == '11122233344'

    # Absent values
    assert normalize_identifier(None) == ''
    assert normalize_identifier('') == ''
    assert normalize_identifier(float('nan')) == ''
    assert normalize_identifier('sem cpf') == ''


def test_normalize_name():
    """Test name keys ignore case, accents and spacing."""
    assert normalize_name('JOÃO  SILVA') == 'joao silva'
    assert normalize_name('JOÃO  SILVA') == normalize_name('joão silva')
    assert normalize_name('  Conceição\tAraújo ') == 'conceicao araujo'
    assert normalize_name('Ana') == normalize_name('ana ') == normalize_name('ANA')

    # Absent values
    assert normalize_name(None) == ''
    assert normalize_name('   ') == ''
    assert normalize_name(float('nan')) == ''


@pytest.mark.parametrize('value', [
    'JOÃO  SILVA', ' Maria de Souza ', 'ÁÉÍÓÚ ãõ ç', '', 'x', 'Ana\n\nBeatriz',
])
def test_normalize_name_is_idempotent(value):
    assert normalize_name(normalize_name(value)) == normalize_name(value)


def test_parse_amount_conventions():
    """Test both decimal conventions resolve to the same value."""
    assert parse_amount('1.234,56') == 1234.56
    assert parse_amount('1,234.56') == 1234.56
    assert parse_amount('1.234.567,89') == 1234567.89
    assert parse_amount('1,234,567.89') == 1234567.89

    # A lone separator is decimal
    assert parse_amount('1,5') == 1.5
    assert parse_amount('1.5') == 1.5

    # Currency symbols and spaces
    assert parse_amount('R$ 150,00') == 150.0
    assert parse_amount('  42 ') == 42.0

    # Sign is kept
    assert parse_amount('-1.234,56') == -1234.56


def test_parse_amount_passthrough_and_degradation():
    assert parse_amount(10) == 10
    assert parse_amount(12.75) == 12.75

    assert parse_amount('') == 0.0
    assert parse_amount(None) == 0.0
    assert parse_amount(float('nan')) == 0.0
    assert parse_amount('abc') == 0.0

    # Leading numeric prefix only
    assert parse_amount('12.3.4') == 12.3


def test_parse_percentage():
    assert parse_percentage('2,5%') == 2.5
    assert parse_percentage('3 %') == 3.0
    assert parse_percentage(1.5) == 1.5
    assert parse_percentage('') == 0.0


def test_parse_port_percentage():
    """Test PORT percentages accept both fractions and percentages."""
    assert parse_port_percentage('0,025') == pytest.approx(2.5)
    assert parse_port_percentage('2,5') == 2.5
    assert parse_port_percentage('2,5%') == 2.5
    assert parse_port_percentage(0.03) == pytest.approx(3.0)

    # Boundaries are not fractions
    assert parse_port_percentage(1) == 1
    assert parse_port_percentage('0') == 0.0
    assert parse_port_percentage(None) == 0.0


def test_format_spreadsheet_date():
    """Test serial dates, native dates and text."""
    assert format_spreadsheet_date(45000) == '15/03/2023'
    assert format_spreadsheet_date(45292) == '01/01/2024'
    # Time of day is dropped
    assert format_spreadsheet_date(45000.75) == '15/03/2023'

    assert format_spreadsheet_date(datetime(2024, 2, 1, 13, 30)) == '01/02/2024'
    assert format_spreadsheet_date(date(2024, 2, 1)) == '01/02/2024'

    assert format_spreadsheet_date('01/02/2024') == '01/02/2024'
    assert format_spreadsheet_date('') == ''
    assert format_spreadsheet_date(None) == ''
    assert format_spreadsheet_date(0) == ''


def test_format_spreadsheet_date_out_of_range():
    assert format_spreadsheet_date(-5) == '-5'
    assert format_spreadsheet_date(99999999) == '99999999'


def test_is_missing():
    assert is_missing(None)
    assert is_missing(np.nan)
    assert is_missing('  ')
    assert not is_missing(0)
    assert not is_missing('0')


def test_normalize_cell_value():
    assert normalize_cell_value(np.nan) == ''
    assert normalize_cell_value(None) == ''
    value = normalize_cell_value(np.int64(42))
    assert value == 42 and type(value) is int
    assert math.isclose(normalize_cell_value(np.float64(1.5)), 1.5)
    assert normalize_cell_value('texto') == 'texto'


def test_disambiguate_labels():
    """Test repeated and blank headers keep every column."""
    assert disambiguate_labels(['CPF', 'Comissão %', 'Comissão %', '']) == \
        ['CPF', 'Comissão %', 'Comissão %_1', '__EMPTY']
    assert disambiguate_labels(['A', 'A', 'A']) == ['A', 'A_1', 'A_2']
    assert disambiguate_labels([None, np.nan]) == ['__EMPTY', '__EMPTY_1']
    assert disambiguate_labels([2024.0, ' Nome ']) == ['2024', 'Nome']
