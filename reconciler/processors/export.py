"""Row views of a matching run for the "Found" and "Pendências" sheets."""

from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..models import MatchResult

FOUND_SHEET = 'Found'
PENDING_SHEET = 'Pendências'

FOUND_COLUMNS = [
    'PROMOTORA', 'CLIENTE', 'CPF', 'BANCO', 'ÓRGÃO', 'VALOR', 'DATA', '%',
    'PRODUTO', 'VENDEDOR', 'FILIAL', 'COMISSÃO', 'STATUS', 'EMISSÃO',
    'ARQUIVO (PROMOTORA)', 'ARQUIVO (MESTRE)',
]

PENDING_COLUMNS = [
    'PROMOTORA', 'CLIENTE', 'CPF', 'BANCO', 'PRODUTO', 'USUARIO',
    'DATA RELATORIO', 'EMISSÃO', 'ARQUIVO (PROMOTORA)',
]

MONTHS_PT_BR = [
    'janeiro', 'fevereiro', 'março', 'abril', 'maio', 'junho', 'julho',
    'agosto', 'setembro', 'outubro', 'novembro', 'dezembro',
]


def short_date_stamp(day: date) -> str:
    """'18/out' style stamp for the Found sheet."""
    return f"{day.day:02d}/{MONTHS_PT_BR[day.month - 1][:3]}"


def long_date_stamp(day: date) -> str:
    """'18 de outubro' style stamp for the Pendências sheet."""
    return f"{day.day} de {MONTHS_PT_BR[day.month - 1]}"


def found_row(result: MatchResult, stamp: str) -> Dict[str, Any]:
    record = result.record
    master = result.master
    return {
        'PROMOTORA': record.layout.value,
        'CLIENTE': record.client_name,
        'CPF': record.tax_id,
        'BANCO': record.bank,
        'ÓRGÃO': record.agency_flag,
        'VALOR': record.gross_amount,
        'DATA': stamp,
        '%': record.commission_percent,
        'PRODUTO': record.product,
        'VENDEDOR': master.representative_name if master else '',
        'FILIAL': '',
        'COMISSÃO': record.commission_amount,
        'STATUS': result.status.value,
        'EMISSÃO': record.issue_date,
        'ARQUIVO (PROMOTORA)': record.source_file,
        'ARQUIVO (MESTRE)': master.source_file if master else '',
    }


def pending_row(result: MatchResult, stamp: str) -> Dict[str, Any]:
    record = result.record
    return {
        'PROMOTORA': record.layout.value,
        'CLIENTE': record.client_name,
        'CPF': record.tax_id,
        'BANCO': record.bank,
        'PRODUTO': record.product,
        'USUARIO': record.agent_user,
        'DATA RELATORIO': stamp,
        'EMISSÃO': record.issue_date,
        'ARQUIVO (PROMOTORA)': record.source_file,
    }


def build_export_views(results: Sequence[MatchResult], today: Optional[date] = None
                       ) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """Split results into the matched and pending sheet rows.

    Amounts stay raw numbers; formatting them is up to the writer. The run
    date is stamped on every row.

    Args:
        results: Match results of one run
        today: Date to stamp, defaults to the current date

    Returns:
        Tuple of (found rows, pending rows)
    """
    today = today or date.today()
    short_stamp = short_date_stamp(today)
    long_stamp = long_date_stamp(today)

    found = []
    pending = []
    for result in results:
        if result.matched:
            found.append(found_row(result, short_stamp))
        else:
            pending.append(pending_row(result, long_stamp))
    return found, pending
