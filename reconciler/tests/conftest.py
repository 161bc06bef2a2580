"""Shared test fixtures and utilities."""

import pytest
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from ..models import CanonicalRecord, FileRole, LayoutTag, MasterEntry, SourceFile
from ..utils.excel_export import write_sheets
from ..utils.normalization import normalize_identifier, normalize_name

PORT_HEADERS = [
    'Cliente', 'CPF', 'Banco', 'Convenio', 'Valor Líquido', 'Comissão %',
    'Comissão %_1', 'Produto', 'Vlr. Pagto.', 'Digitador', 'Emissão', 'Forma Liberação',
]

CREDFORYOU_HEADERS = [
    'NOME CORRESPONDENTE', 'FECH_ID', 'CLIENTE', 'CPF', 'DESCR CONVENIO',
    'VLR_LIQUIDO', '%_PGTO', 'VLR_PGTO', 'VLR_PGTO2', 'ATENDENTE', 'DT_EMISSAO',
]

CIA_HEADERS = [
    'AG PROPOSTA', 'CLIENTE', 'CPF', 'BANCO', 'PRODUTO', 'VAL. LÍQUIDO',
    '% PAGO', 'VAL. COMISSÃO', 'DIGITADOR', 'CRC', 'BAIXA CMS',
]


def make_entry(representative: str, name: str, tax_id: str = '',
               source_file: str = 'mestre.xlsx') -> MasterEntry:
    """Build a registry entry the way the master loader does."""
    return MasterEntry(
        representative_name=representative,
        client_name=name,
        client_name_key=normalize_name(name),
        tax_id=normalize_identifier(tax_id),
        source_file=source_file,
    )


def make_record(name: str, tax_id: str = '', commission: float = 0.0,
                layout: LayoutTag = LayoutTag.GENERIC,
                source_file: str = 'promotora.xlsx') -> CanonicalRecord:
    """Build a canonical record with only the matching fields filled in."""
    return CanonicalRecord(
        client_name=name,
        client_name_key=normalize_name(name),
        tax_id=normalize_identifier(tax_id),
        bank='',
        agency_flag='-',
        gross_amount=0.0,
        commission_percent=0.0,
        commission_amount=commission,
        product='',
        agent_user='',
        issue_date='',
        source_file=source_file,
        layout=layout,
    )


def make_source(rows: List[Dict[str, Any]], role: FileRole = FileRole.PROMOTER,
                name: str = 'promotora.xlsx', layout: Optional[LayoutTag] = None) -> SourceFile:
    columns = list(rows[0]) if rows else []
    return SourceFile(name=name, role=role, rows=tuple(rows), columns=tuple(columns), layout=layout)


def create_test_workbook(path: Path, sheets: Dict[str, List[Dict[str, Any]]]) -> Path:
    """Write row dicts to an .xlsx file, one sheet per entry."""
    write_sheets(path, {name: pd.DataFrame(rows) for name, rows in sheets.items()})
    return path


@pytest.fixture
def master_rows():
    return [
        {'VENDEDOR': 'Carlos', 'NOME': 'Maria Souza', 'CPF': '111.222.333-44'},
        {'VENDEDOR': 'Paula', 'NOME': 'João da Silva', 'CPF': '555.666.777-88'},
        {'VENDEDOR': 'Rita', 'NOME': 'Antônio Pereira', 'CPF': ''},
    ]


@pytest.fixture
def master_source(master_rows):
    return make_source(master_rows, role=FileRole.MASTER, name='mestre.xlsx')


@pytest.fixture
def port_row():
    return {
        'Cliente': 'MARIA DE SOUZA',
        'CPF': '111.222.333-44',
        'Banco': 'BANRISUL',
        'Convenio': 'INSS - APOSENTADOS',
        'Valor Líquido': '10.000,00',
        'Comissão %': '0,01',
        'Comissão %_1': '0,015',
        'Produto': 'PORTABILIDADE',
        'Vlr. Pagto.': '150,00',
        'Digitador': 'ana.op',
        'Emissão': 45000,
        'Forma Liberação': 'TED',
    }


@pytest.fixture
def credforyou_row():
    return {
        'NOME CORRESPONDENTE': 'LOJA CENTRO',
        'FECH_ID': 991,
        'CLIENTE': 'Bruno Lima',
        'CPF': 22233344455.0,
        'DESCR CONVENIO': 'BMG INSS CONSIG',
        'VLR_LIQUIDO': '2.500,00',
        '%_PGTO': '3%',
        'VLR_PGTO': '100,00',
        'VLR_PGTO2': '50,50',
        'ATENDENTE': '',
        'COD_USUARIO': 'u123',
        'DT_EMISSAO': '01/02/2024',
    }


@pytest.fixture
def cia_row():
    return {
        'AG PROPOSTA': '0001',
        'CLIENTE': 'Carla Nunes',
        'CPF': '333.444.555-66',
        'BANCO': 'C6',
        'PRODUTO': 'CARTAO BENEFICIO',
        'VAL. LÍQUIDO': '1,200.50',
        '% PAGO': '4,5',
        'VAL. COMISSÃO': '54,02',
        'DIGITADOR': 'jose',
        'CRC': 45292,
        'BAIXA CMS': 'S',
    }
