"""Base processor for spreadsheet row sets."""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Any, List, Sequence, Tuple, TypeVar, Generic
import logging
import time

from ..models import RawRow
from .error_tracker import ErrorTracker

class ProcessingStats:
    """Statistics for processing operations."""

    def __init__(self):
        """Initialize stats with default values."""
        self._stats = {
            'total_processed': 0,
            'batches': 0,
            'total_errors': 0,
            'total_warnings': 0,
            'processing_time': 0.0,
            'started_at': datetime.now(),
            'completed_at': None
        }

    def __getitem__(self, key: str) -> Any:
        """Get stat value by key."""
        return self._stats[key]

    def __setitem__(self, key: str, value: Any) -> None:
        """Set stat value by key."""
        self._stats[key] = value

    def __getattr__(self, name: str) -> Any:
        """Get stat value by attribute name."""
        if name.startswith('__'):
            raise AttributeError(name)
        try:
            return self._stats[name]
        except KeyError:
            # Create new stat with default value 0
            self._stats[name] = 0
            return 0

    def __setattr__(self, name: str, value: Any) -> None:
        """Set stat value by attribute name."""
        if name == '_stats':
            super().__setattr__(name, value)
        else:
            self._stats[name] = value

    def to_dict(self) -> Dict[str, Any]:
        """Convert stats to dictionary format."""
        result = {}
        for key, value in self._stats.items():
            if isinstance(value, datetime):
                result[key] = value.isoformat()
            elif isinstance(value, float):
                result[key] = round(value, 3)
            else:
                result[key] = value
        return result

# Output item type produced by a processor
T = TypeVar('T')

class BaseProcessor(ABC, Generic[T]):
    """Abstract base class for row processors.

    Subclasses validate the whole row set up front, then turn rows into
    output items batch by batch. Processing is pure: the same rows always
    produce the same items.
    """

    def __init__(self, batch_size: int = 500, debug: bool = False):
        """Initialize processor with configuration.

        Args:
            batch_size: Number of rows to process in each batch
            debug: Enable debug logging
        """
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self.batch_size = batch_size
        self.debug = debug
        self.logger = logging.getLogger(self.__class__.__name__)
        self.stats = ProcessingStats()
        self.error_tracker = ErrorTracker()

        if self.debug:
            self.logger.debug(f"Initialized {self.__class__.__name__} with batch_size={batch_size}")

    @abstractmethod
    def validate_data(self, rows: Sequence[RawRow]) -> Tuple[List[str], List[str]]:
        """Validate rows before processing.

        Args:
            rows: Rows to validate

        Returns:
            Tuple of (critical_issues, warnings)
        """
        pass

    @abstractmethod
    def _process_batch(self, batch: Sequence[RawRow]) -> List[T]:
        """Process a single batch of rows.

        Args:
            batch: Slice of the input rows

        Returns:
            One output item per input row
        """
        pass

    def process(self, rows: Sequence[RawRow]) -> List[T]:
        """Process the rows in batches.

        Args:
            rows: Rows to process

        Returns:
            Processed items, in input order

        Raises:
            ValueError: If validation reports critical issues
        """
        start_time = time.time()
        if self.debug:
            self.logger.debug(f"Starting processing of {len(rows)} rows")

        # Validate data first
        critical_issues, warnings = self.validate_data(rows)

        # Log warnings but continue
        if warnings:
            self.logger.warning("Validation warnings:")
            for warning in warnings:
                self.logger.warning(f"  - {warning}")
            self.stats.total_warnings += len(warnings)

        # Stop on critical issues
        if critical_issues:
            self.logger.error("Data validation failed:")
            for issue in critical_issues:
                self.logger.error(f"  - {issue}")
            self.stats.total_errors += len(critical_issues)
            raise ValueError("; ".join(critical_issues))

        total_rows = len(rows)
        total_batches = (total_rows + self.batch_size - 1) // self.batch_size
        results: List[T] = []

        for batch_num, start_idx in enumerate(range(0, total_rows, self.batch_size), 1):
            batch = rows[start_idx:start_idx + self.batch_size]
            if self.debug:
                batch_start = time.time()
                self.logger.debug(f"Starting batch {batch_num}/{total_batches}")

            results.extend(self._process_batch(batch))
            self.stats.batches += 1
            self.stats.total_processed += len(batch)

            if self.debug:
                self.logger.debug(f"Batch {batch_num} completed in {time.time() - batch_start:.3f}s")

        self.stats.processing_time += time.time() - start_time
        self.stats.completed_at = datetime.now()
        self.error_tracker.log_summary(self.logger)

        return results

    def get_stats(self) -> Dict[str, Any]:
        """Get processing statistics."""
        return self.stats.to_dict()
