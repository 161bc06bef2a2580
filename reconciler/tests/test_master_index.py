"""Tests for master registry loading and index build semantics."""
import pytest

from ..models import FileRole
from ..processors.master import MasterRegistryIndex, load_master_entries, master_entry
from .conftest import make_entry, make_source


def test_master_entry_from_row():
    entry = master_entry({'vendedor': 'Carlos', 'Nome': ' MARIA  Souza', 'cpf': 11122233344.0},
                         'mestre.xlsx')
    assert entry.representative_name == 'Carlos'
    assert entry.client_name == ' MARIA  Souza'
    assert entry.client_name_key == 'maria souza'
    assert entry.tax_id == '11122233344'
    assert entry.source_file == 'mestre.xlsx'


def test_load_master_entries_concatenates_in_upload_order(master_rows):
    second = [{'VENDEDOR': 'Bia', 'NOME': 'Lucas Rocha', 'CPF': '999.888.777-66'}]
    entries = load_master_entries([
        make_source(master_rows, role=FileRole.MASTER, name='janeiro.xlsx'),
        make_source(second, role=FileRole.MASTER, name='fevereiro.xlsx'),
    ])

    assert [e.representative_name for e in entries] == ['Carlos', 'Paula', 'Rita', 'Bia']
    assert [e.source_file for e in entries] == ['janeiro.xlsx'] * 3 + ['fevereiro.xlsx']


def test_load_master_entries_rejects_empty_file():
    with pytest.raises(ValueError, match='has no rows'):
        load_master_entries([make_source([], role=FileRole.MASTER, name='vazio.xlsx')])


def test_index_lookups(master_source):
    index = MasterRegistryIndex.build(load_master_entries([master_source]))

    assert index.find_by_tax_id('11122233344').representative_name == 'Carlos'
    assert index.find_by_name('joao da silva').representative_name == 'Paula'
    # Entries without CPF are still reachable by name
    assert index.find_by_name('antonio pereira').representative_name == 'Rita'
    assert index.find_by_tax_id('') is None
    assert index.find_by_name('') is None
    assert index.find_by_tax_id('00000000000') is None


def test_index_last_registered_wins():
    """Overlapping keys resolve to the later file; fuzzy search keeps both."""
    first = make_entry('Carlos', 'Maria Souza', '111.222.333-44', source_file='janeiro.xlsx')
    second = make_entry('Paula', 'Maria Souza', '111.222.333-44', source_file='fevereiro.xlsx')
    index = MasterRegistryIndex.build([first, second])

    assert index.find_by_tax_id('11122233344') is second
    assert index.find_by_name('maria souza') is second
    assert index.entries == (first, second)
    assert index.names == ('maria souza', 'maria souza')


def test_index_skips_empty_keys():
    nameless = make_entry('Carlos', '', '111.222.333-44')
    idless = make_entry('Paula', 'Lucas Rocha', '')
    blank = make_entry('Rita', '   ', '')
    index = MasterRegistryIndex.build([nameless, idless, blank])

    assert set(index.by_tax_id) == {'11122233344'}
    assert set(index.by_name) == {'lucas rocha'}
    assert index.entries == (idless,)


def test_index_of_no_entries():
    index = MasterRegistryIndex.build([])
    assert index.names == ()
    assert index.find_by_name('maria souza') is None
