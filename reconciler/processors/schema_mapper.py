"""Promoter row to canonical record mapping."""

import logging
from typing import List, Optional, Sequence, Tuple

from ..models import CanonicalRecord, LayoutTag, RawRow, SourceFile
from ..utils.normalization import normalize_identifier, normalize_name
from .base import BaseProcessor
from .error_tracker import MISSING_IDENTITY, NEGATIVE_AMOUNT, UNKNOWN_LAYOUT
from .layouts import LayoutSpec, detect_layout, get_layout

logger = logging.getLogger(__name__)

AMOUNT_FIELDS = ('gross_amount', 'commission_amount')


def _extract(row: RawRow, spec: LayoutSpec, source_file: str) -> Tuple[CanonicalRecord, List[str]]:
    values = {name: rule.extract(row) for name, rule in spec.fields.items()}

    clamped = []
    for name in AMOUNT_FIELDS:
        if values[name] < 0:
            clamped.append(name)
            values[name] = 0.0

    record = CanonicalRecord(
        client_name=values['client_name'],
        client_name_key=normalize_name(values['client_name']),
        tax_id=normalize_identifier(values['tax_id']),
        bank=values['bank'],
        agency_flag=spec.agency_flag(row),
        gross_amount=float(values['gross_amount']),
        commission_percent=float(values['commission_percent']),
        commission_amount=float(values['commission_amount']),
        product=values['product'],
        agent_user=values['agent_user'],
        issue_date=values['issue_date'],
        source_file=source_file,
        layout=spec.tag,
    )
    return record, clamped


def map_row(row: RawRow, layout: Optional[LayoutTag], source_file: str) -> CanonicalRecord:
    """Map one raw promoter row into a canonical record.

    Missing or unparseable cells resolve to '' or 0.0; this never raises and
    never looks at other rows. Negative amounts are clamped to 0.0.

    Args:
        row: Raw row (column label -> cell value)
        layout: Layout of the file the row came from; None maps generically
        source_file: Name of that file, kept for provenance

    Returns:
        The canonical record
    """
    record, _ = _extract(row, get_layout(layout), source_file)
    return record


class PromoterProcessor(BaseProcessor[CanonicalRecord]):
    """Map every row of a promoter file into canonical records.

    The file's own layout is used when one was chosen for it; otherwise the
    layout is detected from the file's columns.
    """

    def __init__(self, source: SourceFile, batch_size: int = 500, debug: bool = False):
        super().__init__(batch_size=batch_size, debug=debug)
        self.source = source
        self.layout = source.layout or detect_layout(source.columns)
        self.spec = get_layout(self.layout)

    def validate_data(self, rows: Sequence[RawRow]) -> Tuple[List[str], List[str]]:
        critical_issues = []
        warnings = []
        if not rows:
            critical_issues.append(f"Promoter file '{self.source.name}' has no rows")
        if self.layout is LayoutTag.GENERIC:
            message = (f"'{self.source.name}' does not match a known layout, "
                       f"using generic column mapping")
            warnings.append(message)
            self.error_tracker.add_error(UNKNOWN_LAYOUT, message,
                                         {'columns': ', '.join(self.source.columns)})
        return critical_issues, warnings

    def _process_batch(self, batch: Sequence[RawRow]) -> List[CanonicalRecord]:
        records = []
        for row in batch:
            record, clamped = _extract(row, self.spec, self.source.name)
            if not record.client_name_key and not record.tax_id:
                self.error_tracker.add_error(
                    MISSING_IDENTITY,
                    "Row has neither client name nor CPF",
                    {'file': self.source.name}
                )
            for name in clamped:
                self.error_tracker.add_error(
                    NEGATIVE_AMOUNT,
                    f"Negative {name} replaced by 0",
                    {'file': self.source.name, 'client': record.client_name}
                )
            records.append(record)
        return records

    def run(self) -> List[CanonicalRecord]:
        """Map the whole file."""
        self.logger.info(f"Mapping '{self.source.name}' as {self.layout.value} "
                         f"({len(self.source.rows)} rows)")
        records = self.process(self.source.rows)
        self.stats.records_created = len(records)
        return records


def map_promoter_files(files: Sequence[SourceFile], batch_size: int = 500,
                       debug: bool = False) -> List[CanonicalRecord]:
    """Map several promoter files, concatenated in the given order."""
    records: List[CanonicalRecord] = []
    for source in files:
        records.extend(PromoterProcessor(source, batch_size=batch_size, debug=debug).run())
    logger.info(f"Mapped {len(records)} promoter rows from {len(files)} files")
    return records
