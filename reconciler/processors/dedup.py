"""Duplicate row removal keyed on one normalized name column."""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..models import DedupPartition, RawRow
from ..utils.normalization import normalize_name
from .base import BaseProcessor

logger = logging.getLogger(__name__)

POSITION_FIELD = '_originalIndex'

# Column names picked by default as the dedup key, in this order
LIKELY_KEY_COLUMNS = ('nome', 'name', 'cliente', 'participante')


def suggest_key_column(columns: Sequence[str]) -> Optional[str]:
    """Pick the column most likely to hold a person's name.

    Returns the first column named like a name column (case-insensitive),
    else the first column, else None for an empty header.
    """
    for column in columns:
        if str(column).lower() in LIKELY_KEY_COLUMNS:
            return column
    return columns[0] if columns else None


def strip_position(row: RawRow) -> RawRow:
    """Drop the position tag added by the dedup pass."""
    return {k: v for k, v in row.items() if k != POSITION_FIELD}


def deduplicate(rows: Sequence[RawRow], key_column: str) -> DedupPartition:
    """Split rows into first occurrences and repeats of the same name.

    One left-to-right pass: a row whose normalized key was already seen is
    removed, any other row is kept. Both lists keep the input order and
    every row is tagged with its 1-based input position.

    Blank keys are not special-cased: the first blank row is kept and every
    later blank row is reported as its duplicate.
    """
    seen = set()
    partition = DedupPartition()
    for position, row in enumerate(rows, 1):
        key = normalize_name(row.get(key_column))
        tagged = {**row, POSITION_FIELD: position}
        if key in seen:
            partition.removed.append(tagged)
        else:
            seen.add(key)
            partition.kept.append(tagged)
    return partition


class DedupProcessor(BaseProcessor[RawRow]):
    """Run the dedup pass over a file, with validation and logging."""

    def __init__(self, key_column: str, batch_size: int = 500, debug: bool = False):
        super().__init__(batch_size=batch_size, debug=debug)
        self.key_column = key_column

    def validate_data(self, rows: Sequence[RawRow]) -> Tuple[List[str], List[str]]:
        critical_issues = []
        warnings = []
        if not rows:
            critical_issues.append("File has no rows to deduplicate")
        elif not any(self.key_column in row for row in rows):
            critical_issues.append(f"Column '{self.key_column}' not found")
        return critical_issues, warnings

    def _process_batch(self, batch: Sequence[RawRow]) -> List[RawRow]:
        # Keys must be compared across batches, so batching is a pass-through
        return list(batch)

    def run(self, rows: Sequence[RawRow]) -> DedupPartition:
        partition = deduplicate(self.process(rows), self.key_column)
        self.stats.unique = partition.kept_count
        self.stats.removed = partition.removed_count
        self.logger.info(
            f"Deduplicated {partition.total} rows on '{self.key_column}': "
            f"{partition.kept_count} kept, {partition.removed_count} removed"
        )
        return partition


def dedup_stats(partition: DedupPartition) -> Dict[str, Any]:
    return {
        'total': partition.total,
        'unique': partition.kept_count,
        'removed': partition.removed_count,
    }
