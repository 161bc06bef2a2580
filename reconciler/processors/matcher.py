"""Three-tier matching of canonical records against the master registry.

Tiers, first success wins:

1. CPF exact match
2. Normalized name exact match
3. Fuzzy name match over the normalized master names

Fuzzy similarity is pinned to rapidfuzz's normalized Indel distance
(``1 - fuzz.ratio / 100``): 0 means identical, 1 means nothing in common.
A similarity threshold ``t`` accepts a candidate when its distance is at
most ``1 - t``, so a score exactly equal to ``t`` is a match.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from rapidfuzz import process
from rapidfuzz.distance import Indel

from ..models import CanonicalRecord, MatchKind, MatchResult, RunStatistics
from .master import MasterRegistryIndex

logger = logging.getLogger(__name__)

DEFAULT_FUZZY_THRESHOLD = 0.85
MIN_FUZZY_THRESHOLD = 0.5
MAX_FUZZY_THRESHOLD = 1.0

# Absorbs float error in 1 - threshold so a score equal to the threshold passes
SIMILARITY_TOLERANCE = 1e-9


def validate_threshold(threshold: float) -> float:
    """Check a similarity threshold is within [0.5, 1.0].

    Raises:
        ValueError: If the threshold is not a number in range
    """
    try:
        value = float(threshold)
    except (TypeError, ValueError):
        raise ValueError(f"Fuzzy threshold must be a number, got {threshold!r}")
    if not MIN_FUZZY_THRESHOLD <= value <= MAX_FUZZY_THRESHOLD:
        raise ValueError(
            f"Fuzzy threshold must be between {MIN_FUZZY_THRESHOLD} and "
            f"{MAX_FUZZY_THRESHOLD}, got {value}"
        )
    return value


def name_similarity(a: str, b: str) -> float:
    """Similarity of two normalized names, 1.0 meaning identical."""
    return 1 - Indel.normalized_distance(a, b)


class MatchingEngine:
    """Resolve canonical records against a built registry index.

    The index is only read. Each record is matched on its own, so the order
    of the records never changes an individual outcome.
    """

    def __init__(self, index: MasterRegistryIndex,
                 fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD):
        self.index = index
        self.fuzzy_threshold = validate_threshold(fuzzy_threshold)
        self.max_distance = 1 - self.fuzzy_threshold
        self.logger = logging.getLogger(self.__class__.__name__)

    def _fuzzy(self, name_key: str) -> Optional[Tuple[int, float]]:
        if not self.index.names:
            return None
        best = process.extractOne(
            name_key,
            self.index.names,
            scorer=Indel.normalized_distance,
            processor=None,
        )
        if best is None:
            return None
        _, distance, position = best
        if distance > self.max_distance + SIMILARITY_TOLERANCE:
            return None
        return position, distance

    def match(self, record: CanonicalRecord) -> MatchResult:
        """Match a single record."""
        entry = self.index.find_by_tax_id(record.tax_id)
        if entry is not None:
            return MatchResult(record=record, kind=MatchKind.ID_EXACT, master=entry)

        entry = self.index.find_by_name(record.client_name_key)
        if entry is not None:
            return MatchResult(record=record, kind=MatchKind.NAME_EXACT, master=entry)

        if record.client_name_key:
            found = self._fuzzy(record.client_name_key)
            if found is not None:
                position, distance = found
                entry = self.index.entries[position]
                self.logger.debug(
                    f"Fuzzy match '{record.client_name_key}' -> "
                    f"'{entry.client_name_key}' (distance {distance:.3f})"
                )
                return MatchResult(record=record, kind=MatchKind.NAME_FUZZY,
                                   master=entry, score=1 - distance)

        return MatchResult(record=record, kind=MatchKind.NONE)

    def run(self, records: Sequence[CanonicalRecord]) -> Tuple[List[MatchResult], RunStatistics]:
        """Match every record and count the outcomes.

        Returns:
            Tuple of (results in input order, run statistics)
        """
        stats = RunStatistics()
        results = []
        for record in records:
            result = self.match(record)
            stats.record(result.kind)
            results.append(result)

        self.logger.info(
            f"Matched {stats.matched} of {stats.total_rows} rows "
            f"(CPF: {stats.matched_id}, name: {stats.matched_name_exact}, "
            f"fuzzy: {stats.matched_name_fuzzy}, pending: {stats.unmatched})"
        )
        return results, stats


def run_matching(records: Sequence[CanonicalRecord], index: MasterRegistryIndex,
                 fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD
                 ) -> Tuple[List[MatchResult], RunStatistics]:
    """Match records against an index in one call."""
    return MatchingEngine(index, fuzzy_threshold).run(records)
