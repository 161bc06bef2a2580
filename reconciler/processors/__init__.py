"""
Processors turning spreadsheet rows into canonical records, registry
indexes, match results and dedup partitions.
"""

from .layouts import detect_layout
from .schema_mapper import map_row, PromoterProcessor
from .master import MasterRegistryIndex, MasterProcessor, load_master_entries
from .matcher import MatchingEngine, run_matching, validate_threshold
from .dedup import deduplicate, DedupProcessor
from .validator import validate_source_file

__all__ = [
    'detect_layout',
    'map_row',
    'PromoterProcessor',
    'MasterRegistryIndex',
    'MasterProcessor',
    'load_master_entries',
    'MatchingEngine',
    'run_matching',
    'validate_threshold',
    'deduplicate',
    'DedupProcessor',
    'validate_source_file'
]
