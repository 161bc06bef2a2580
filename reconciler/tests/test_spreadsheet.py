"""Tests for spreadsheet row derivation."""
import pandas as pd
import pytest

from ..models import FileRole, LayoutTag
from ..utils.spreadsheet import Workbook
from .conftest import create_test_workbook


@pytest.fixture
def registry_workbook():
    return Workbook.from_rows('mestre.xlsx', {
        'Resumo': [
            ['Relatório de vendas', None, None],
            ['VENDEDOR', 'NOME', 'CPF'],
            ['Carlos', 'Maria Souza', '111.222.333-44'],
            [None, None, None],
            ['Paula', 'João da Silva', '555.666.777-88'],
        ],
        'Plan2': [
            ['VENDEDOR', 'NOME', 'CPF'],
            ['Rita', 'Antônio Pereira', 33344455566],
        ],
    })


def test_sheet_names(registry_workbook):
    assert registry_workbook.sheet_names == ['Resumo', 'Plan2']


def test_detect_header_row(registry_workbook):
    assert registry_workbook.detect_header_row() == 1
    assert registry_workbook.detect_header_row('Plan2') == 0


def test_rows_skip_blank_lines(registry_workbook):
    labels, rows = registry_workbook.rows('Resumo', header_row=1)

    assert labels == ['VENDEDOR', 'NOME', 'CPF']
    assert [r['VENDEDOR'] for r in rows] == ['Carlos', 'Paula']


def test_rows_are_rederived_per_header_choice(registry_workbook):
    """Another header row gives other rows from the same grid."""
    labels, rows = registry_workbook.rows('Resumo', header_row=0)
    assert labels[0] == 'Relatório de vendas'
    assert len(rows) == 3

    assert registry_workbook.rows('Resumo', header_row=1) == registry_workbook.rows('Resumo', header_row=1)


def test_rows_header_past_end(registry_workbook):
    assert registry_workbook.rows('Plan2', header_row=5) == ([], [])
    with pytest.raises(ValueError):
        registry_workbook.rows('Plan2', header_row=-1)


def test_numeric_cells_become_native(registry_workbook):
    _, rows = registry_workbook.rows('Plan2')
    assert rows[0]['CPF'] == 33344455566
    assert type(rows[0]['CPF']) is int


def test_unknown_sheet(registry_workbook):
    with pytest.raises(ValueError, match="Sheet 'Plan9' not found"):
        registry_workbook.rows('Plan9')


def test_empty_workbook():
    with pytest.raises(ValueError):
        Workbook.from_rows('vazio.xlsx', {})


def test_duplicate_headers_are_suffixed():
    workbook = Workbook.from_rows('port.xlsx', {
        'Sheet1': [['Cliente', 'Comissão %', 'Comissão %'], ['Ana', '0,01', '0,015']],
    })
    labels, rows = workbook.rows()

    assert labels == ['Cliente', 'Comissão %', 'Comissão %_1']
    assert rows[0]['Comissão %_1'] == '0,015'


def test_source_file(registry_workbook):
    source = registry_workbook.source_file(FileRole.MASTER)

    assert source.name == 'mestre.xlsx'
    assert source.sheet_name == 'Resumo'
    assert source.header_row == 1
    assert source.columns == ('VENDEDOR', 'NOME', 'CPF')
    assert len(source.rows) == 2
    assert source.layout is None

    forced = registry_workbook.source_file(FileRole.PROMOTER, sheet='Plan2', header_row=0,
                                           layout=LayoutTag.GENERIC)
    assert forced.sheet_name == 'Plan2'
    assert forced.layout is LayoutTag.GENERIC
    assert forced.rows[0]['NOME'] == 'Antônio Pereira'


def test_load_xlsx(tmp_path):
    path = create_test_workbook(tmp_path / 'mestre.xlsx', {
        'Plan1': [{'VENDEDOR': 'Carlos', 'NOME': 'Maria Souza', 'CPF': '11122233344'}],
    })
    workbook = Workbook.load(path)
    labels, rows = workbook.rows()

    assert workbook.name == 'mestre.xlsx'
    assert labels == ['VENDEDOR', 'NOME', 'CPF']
    assert rows == [{'VENDEDOR': 'Carlos', 'NOME': 'Maria Souza', 'CPF': '11122233344'}]


def test_load_csv(tmp_path):
    path = tmp_path / 'promotora.csv'
    path.write_text('CLIENTE;CPF;COMISSAO\nAna Lima;111.222.333-44;10,50\nBruno;;0\n',
                    encoding='utf-8')
    labels, rows = Workbook.load(path).rows()

    assert labels == ['CLIENTE', 'CPF', 'COMISSAO']
    assert rows[0] == {'CLIENTE': 'Ana Lima', 'CPF': '111.222.333-44', 'COMISSAO': '10,50'}
    assert rows[1]['CPF'] == ''


def test_load_cp1252_csv(tmp_path):
    path = tmp_path / 'legado.csv'
    path.write_bytes('NOME;CPF\nJoão;123\nConceição;456\n'.encode('cp1252'))
    _, rows = Workbook.load(path).rows()

    assert [r['NOME'] for r in rows] == ['João', 'Conceição']


def test_load_single_column_csv(tmp_path):
    path = tmp_path / 'lista.csv'
    path.write_text('Nome\nAna\nana\nBruno\n', encoding='utf-8')
    labels, rows = Workbook.load(path).rows()

    assert labels == ['Nome']
    assert [r['Nome'] for r in rows] == ['Ana', 'ana', 'Bruno']


@pytest.mark.parametrize('separator', [',', '\t'])
def test_load_csv_other_separators(tmp_path, separator):
    path = tmp_path / 'lista.csv'
    path.write_text(separator.join(['Nome', 'Cidade']) + '\n'
                    + separator.join(['Ana', 'São Paulo']) + '\n', encoding='utf-8')
    labels, rows = Workbook.load(path).rows()

    assert labels == ['Nome', 'Cidade']
    assert rows == [{'Nome': 'Ana', 'Cidade': 'São Paulo'}]


def test_load_xls_uses_xlrd(tmp_path, monkeypatch):
    calls = {}

    def fake_read_excel(path, **kwargs):
        calls.update(kwargs)
        return {'Plan1': pd.DataFrame([['NOME'], ['Ana']])}

    monkeypatch.setattr(pd, 'read_excel', fake_read_excel)
    labels, rows = Workbook.load(tmp_path / 'legado.xls').rows()

    assert calls['engine'] == 'xlrd'
    assert labels == ['NOME']
    assert rows == [{'NOME': 'Ana'}]


def test_load_rejects_unsupported_file_type(tmp_path):
    path = tmp_path / 'notas.txt'
    path.write_text('NOME\nAna\n', encoding='utf-8')

    with pytest.raises(ValueError, match='Unsupported file type'):
        Workbook.load(path)
