"""Master registry loading and indexing."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..models import MasterEntry, RawRow, SourceFile
from ..utils.normalization import normalize_identifier, normalize_name
from .base import BaseProcessor
from .error_tracker import MISSING_IDENTITY
from .layouts import lookup, text

logger = logging.getLogger(__name__)

REPRESENTATIVE_COLUMN = 'VENDEDOR'
NAME_COLUMN = 'NOME'
TAX_ID_COLUMN = 'CPF'


def master_entry(row: RawRow, source_file: str) -> MasterEntry:
    """Build a registry entry from one master row."""
    client_name = text(lookup(row, NAME_COLUMN))
    return MasterEntry(
        representative_name=text(lookup(row, REPRESENTATIVE_COLUMN)),
        client_name=client_name,
        client_name_key=normalize_name(client_name),
        tax_id=normalize_identifier(lookup(row, TAX_ID_COLUMN)),
        source_file=source_file,
    )


class MasterProcessor(BaseProcessor[MasterEntry]):
    """Turn the rows of one master file into registry entries."""

    def __init__(self, source: SourceFile, batch_size: int = 500, debug: bool = False):
        super().__init__(batch_size=batch_size, debug=debug)
        self.source = source

    def validate_data(self, rows: Sequence[RawRow]) -> Tuple[List[str], List[str]]:
        critical_issues = []
        warnings = []
        if not rows:
            critical_issues.append(f"Master file '{self.source.name}' has no rows")

        folded = {c.casefold() for c in self.source.columns}
        missing = [c for c in (REPRESENTATIVE_COLUMN, NAME_COLUMN, TAX_ID_COLUMN)
                   if c.casefold() not in folded]
        if missing:
            warnings.append(
                f"Master file '{self.source.name}' is missing columns: {', '.join(missing)}"
            )
        return critical_issues, warnings

    def _process_batch(self, batch: Sequence[RawRow]) -> List[MasterEntry]:
        entries = []
        for row in batch:
            entry = master_entry(row, self.source.name)
            if not entry.tax_id and not entry.client_name_key:
                self.error_tracker.add_error(
                    MISSING_IDENTITY,
                    "Master row has neither name nor CPF",
                    {'file': self.source.name, 'representative': entry.representative_name}
                )
            entries.append(entry)
        return entries


def load_master_entries(files: Sequence[SourceFile], batch_size: int = 500,
                        debug: bool = False) -> List[MasterEntry]:
    """Aggregate the entries of every master file, in upload order.

    Files never replace each other: all entries are kept and tagged with the
    file they came from.
    """
    entries: List[MasterEntry] = []
    for source in files:
        processor = MasterProcessor(source, batch_size=batch_size, debug=debug)
        file_entries = processor.process(source.rows)
        logger.info(f"Loaded {len(file_entries)} registry entries from '{source.name}'")
        entries.extend(file_entries)
    return entries


@dataclass(frozen=True)
class MasterRegistryIndex:
    """Lookup structures over the master registry, built once per run.

    Attributes:
        by_tax_id: CPF -> entry, the last registered entry wins
        by_name: normalized name -> entry, the last registered entry wins
        names: normalized names searched by the fuzzy tier
        entries: entry behind each position of ``names``
    """

    by_tax_id: Dict[str, MasterEntry] = field(default_factory=dict)
    by_name: Dict[str, MasterEntry] = field(default_factory=dict)
    names: Tuple[str, ...] = ()
    entries: Tuple[MasterEntry, ...] = ()

    @classmethod
    def build(cls, entries: Sequence[MasterEntry]) -> 'MasterRegistryIndex':
        by_tax_id: Dict[str, MasterEntry] = {}
        by_name: Dict[str, MasterEntry] = {}
        names: List[str] = []
        fuzzy_entries: List[MasterEntry] = []

        for entry in entries:
            tax_id = normalize_identifier(entry.tax_id)
            name_key = normalize_name(entry.client_name_key or entry.client_name)
            if tax_id:
                by_tax_id[tax_id] = entry
            if name_key:
                by_name[name_key] = entry
                names.append(name_key)
                fuzzy_entries.append(entry)

        logger.info(
            f"Indexed {len(entries)} registry entries: {len(by_tax_id)} CPFs, "
            f"{len(by_name)} distinct names"
        )
        return cls(
            by_tax_id=by_tax_id,
            by_name=by_name,
            names=tuple(names),
            entries=tuple(fuzzy_entries),
        )

    def find_by_tax_id(self, tax_id: str) -> Optional[MasterEntry]:
        if not tax_id:
            return None
        return self.by_tax_id.get(tax_id)

    def find_by_name(self, name_key: str) -> Optional[MasterEntry]:
        if not name_key:
            return None
        return self.by_name.get(name_key)
