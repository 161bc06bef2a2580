"""Promoter file layouts.

Each known promoter exports its spreadsheet with its own column names. A
layout is declared once, as data: the keywords that identify the file and,
for every canonical field, the source columns to probe and the parser to
apply. The schema mapper interprets these tables; nothing here inspects
rows by reflection.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from ..models import LayoutTag, RawRow
from ..utils.cell_normalization import is_missing
from ..utils.normalization import (
    format_spreadsheet_date,
    parse_amount,
    parse_percentage,
    parse_port_percentage,
)

logger = logging.getLogger(__name__)

# Suffixes the spreadsheet reader appends when a header label repeats
DUPLICATE_LABEL_SUFFIXES = ('', '_1')

FIRST = 'first'
SUM = 'sum'
SUM_VARIANTS = 'sum_variants'


def lookup(row: RawRow, label: str) -> Any:
    """Get a cell by column label.

    Tries the exact label first, then a case-insensitive match against the
    row's own labels. Missing cells (absent, None, NaN or blank) return None.
    """
    if label in row:
        value = row[label]
    else:
        folded = label.casefold()
        key = next((k for k in row if str(k).casefold() == folded), None)
        if key is None:
            return None
        value = row[key]
    return None if is_missing(value) else value


def text(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def first_word(value: Any) -> str:
    """First space-separated word of a cell ('BMG INSS CONSIG' -> 'BMG')."""
    return text(value).split(' ')[0]


@dataclass(frozen=True)
class FieldRule:
    """How one canonical field is pulled out of a raw row.

    Attributes:
        labels: Source column labels, in probing order
        parser: Applied to the raw cell value
        combine: FIRST takes the first present label; SUM adds up every
            present label; SUM_VARIANTS adds up each label together with its
            repeated-header variants
    """

    labels: Tuple[str, ...]
    parser: Callable[[Any], Any] = text
    combine: str = FIRST

    def extract(self, row: RawRow) -> Any:
        if self.combine == FIRST:
            for label in self.labels:
                value = lookup(row, label)
                if value is not None:
                    return self.parser(value)
            return self.parser(None)

        if self.combine == SUM_VARIANTS:
            labels = [f"{label}{suffix}" for label in self.labels
                      for suffix in DUPLICATE_LABEL_SUFFIXES]
        else:
            labels = list(self.labels)

        total = 0.0
        for label in labels:
            value = lookup(row, label)
            if value is not None:
                total += self.parser(value)
        return total


@dataclass(frozen=True)
class LayoutSpec:
    """Detection keywords and extraction rules of one layout."""

    tag: LayoutTag
    keywords: Tuple[str, ...]
    fields: Dict[str, FieldRule]
    agency_labels: Tuple[str, ...] = ()

    def matches(self, header_text: str) -> bool:
        return bool(self.keywords) and all(k in header_text for k in self.keywords)

    def agency_flag(self, row: RawRow) -> str:
        """'INSS' when any of the agency source fields mentions INSS."""
        for label in self.agency_labels:
            value = lookup(row, label)
            if value is not None and 'inss' in text(value).lower():
                return 'INSS'
        return '-'


def _rule(*labels: str, parser: Callable[[Any], Any] = text, combine: str = FIRST) -> FieldRule:
    return FieldRule(labels=tuple(labels), parser=parser, combine=combine)


PORT = LayoutSpec(
    tag=LayoutTag.PORT,
    keywords=('FORMA LIBERAÇÃO', 'VLR. PAGTO.', 'COMISSÃO %'),
    fields={
        'client_name': _rule('Cliente', 'CLIENTE'),
        'tax_id': _rule('CPF'),
        'bank': _rule('Banco'),
        'gross_amount': _rule('Valor Líquido', parser=parse_amount),
        # PORT repeats the 'Comissão %' header; both halves are added up
        'commission_percent': _rule('Comissão %', parser=parse_port_percentage,
                                    combine=SUM_VARIANTS),
        'product': _rule('Produto'),
        'commission_amount': _rule('Vlr. Pagto.', parser=parse_amount),
        'agent_user': _rule('Digitador'),
        'issue_date': _rule('Emissão', 'Emissao', parser=format_spreadsheet_date),
    },
    agency_labels=('Convenio',),
)

CREDFORYOU = LayoutSpec(
    tag=LayoutTag.CREDFORYOU,
    keywords=('NOME CORRESPONDENTE', 'FECH_ID', 'DESCR CONVENIO'),
    fields={
        'client_name': _rule('CLIENTE'),
        'tax_id': _rule('CPF'),
        'bank': _rule('DESCR CONVENIO', parser=first_word),
        'gross_amount': _rule('VLR_LIQUIDO', parser=parse_amount),
        'commission_percent': _rule('%_PGTO', parser=parse_percentage),
        'product': _rule('DESCR CONVENIO'),
        'commission_amount': _rule('VLR_PGTO', 'VLR_PGTO2', parser=parse_amount, combine=SUM),
        'agent_user': _rule('ATENDENTE', 'COD_USUARIO'),
        'issue_date': _rule('DT_EMISSAO', parser=format_spreadsheet_date),
    },
    agency_labels=('DESCR CONVENIO',),
)

CIA_DO_CREDITO = LayoutSpec(
    tag=LayoutTag.CIA_DO_CREDITO,
    keywords=('AG PROPOSTA', 'VAL. LÍQUIDO', 'BAIXA CMS'),
    fields={
        'client_name': _rule('CLIENTE'),
        'tax_id': _rule('CPF'),
        'bank': _rule('BANCO', 'Banco'),
        'gross_amount': _rule('VAL. LÍQUIDO', parser=parse_amount),
        'commission_percent': _rule('% PAGO', parser=parse_percentage),
        'product': _rule('PRODUTO'),
        'commission_amount': _rule('VAL. COMISSÃO', parser=parse_amount),
        'agent_user': _rule('DIGITADOR'),
        'issue_date': _rule('CRC', parser=format_spreadsheet_date),
    },
    agency_labels=('PRODUTO',),
)

GENERIC = LayoutSpec(
    tag=LayoutTag.GENERIC,
    keywords=(),
    fields={
        'client_name': _rule('CLIENTE', 'NOME'),
        'tax_id': _rule('CPF'),
        'bank': _rule('BANCO'),
        'gross_amount': _rule('VALOR', 'LIQUIDO', 'VALOR LIQUIDO', parser=parse_amount),
        'commission_percent': _rule('%', 'PERCENTUAL', parser=parse_percentage),
        'product': _rule('PRODUTO'),
        'commission_amount': _rule('COMISSAO', 'VALOR COMISSAO', parser=parse_amount),
        'agent_user': _rule('USUARIO', 'DIGITADOR'),
        'issue_date': _rule('DATA EMISSAO', 'EMISSAO', 'DATA', parser=format_spreadsheet_date),
    },
    agency_labels=('PRODUTO',),
)

# Detection priority order; GENERIC is the fallback and never detected
DETECTION_ORDER = (PORT, CREDFORYOU, CIA_DO_CREDITO)

LAYOUTS: Dict[LayoutTag, LayoutSpec] = {
    spec.tag: spec for spec in DETECTION_ORDER + (GENERIC,)
}


def detect_layout(headers: Iterable[Any]) -> LayoutTag:
    """Pick the layout whose keywords all appear in the file's headers.

    Args:
        headers: Column labels of the file, any case

    Returns:
        The first fully matched layout, or LayoutTag.GENERIC
    """
    header_text = ' '.join(text(h) for h in headers).upper()
    for spec in DETECTION_ORDER:
        if spec.matches(header_text):
            logger.debug(f"Detected layout {spec.tag.value}")
            return spec.tag
    logger.debug("No known layout matched, using generic mapping")
    return LayoutTag.GENERIC


def get_layout(tag: Optional[LayoutTag]) -> LayoutSpec:
    return LAYOUTS.get(tag, GENERIC)
