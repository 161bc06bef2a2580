import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from .models import CanonicalRecord, MatchResult, RunStatistics, SourceFile
from .processors.export import build_export_views
from .processors.master import MasterRegistryIndex, load_master_entries
from .processors.matcher import MatchingEngine, validate_threshold
from .processors.schema_mapper import map_promoter_files
from .processors.validator import require_rows

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class AuditRun:
    """Everything one reconciliation run produced."""
    records: List[CanonicalRecord]
    results: List[MatchResult]
    stats: RunStatistics
    found: List[Dict[str, Any]]
    pending: List[Dict[str, Any]]

class CommissionAuditor:
    """Reconcile promoter files against master files.

    Nothing is kept between runs: the registry index is rebuilt from the
    given master files every time ``run`` is called.
    """

    def __init__(self, fuzzy_threshold: float, batch_size: int = 500, debug: bool = False):
        self.fuzzy_threshold = validate_threshold(fuzzy_threshold)
        self.batch_size = batch_size
        self.debug = debug

    def run(self, master_files: Sequence[SourceFile], promoter_files: Sequence[SourceFile],
            today: Optional[date] = None) -> AuditRun:
        """Run one reconciliation.

        Raises:
            ValueError: If either side has no files or a file has no rows
        """
        if not master_files:
            raise ValueError("At least one master file is required")
        if not promoter_files:
            raise ValueError("At least one promoter file is required")
        for source in list(master_files) + list(promoter_files):
            require_rows(source)

        entries = load_master_entries(master_files, self.batch_size, self.debug)
        index = MasterRegistryIndex.build(entries)
        records = map_promoter_files(promoter_files, self.batch_size, self.debug)

        results, stats = MatchingEngine(index, self.fuzzy_threshold).run(records)
        found, pending = build_export_views(results, today)
        logger.info(f"Audit complete: {len(found)} found, {len(pending)} pending")

        return AuditRun(
            records=records,
            results=results,
            stats=stats,
            found=found,
            pending=pending,
        )
