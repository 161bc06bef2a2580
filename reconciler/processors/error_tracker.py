"""Aggregation of non-fatal row issues found while processing a file."""

from collections import defaultdict
from typing import Dict, Optional, Set
import logging

# Issue categories reported by the processors
UNKNOWN_LAYOUT = 'UNKNOWN_LAYOUT'
MISSING_IDENTITY = 'MISSING_IDENTITY'
NEGATIVE_AMOUNT = 'NEGATIVE_AMOUNT'
COMMAND_EXECUTION_ERROR = 'COMMAND_EXECUTION_ERROR'

class ErrorTracker:
    """Count issues per category and keep a few samples of each.

    Every occurrence is counted. Samples are capped and the same message is
    sampled only once, so a file with thousands of blank rows still logs a
    short summary.
    """

    def __init__(self, max_samples: int = 3):
        """Initialize error tracker.

        Args:
            max_samples: Maximum number of samples to store per issue type
        """
        self.error_counts: Dict[str, int] = defaultdict(int)
        self.error_samples = defaultdict(list)
        self.max_samples = max_samples
        self.sampled: Set[str] = set()

    def add_error(self, error_type: str, message: str, context: Optional[Dict] = None) -> None:
        """Record one issue occurrence.

        Args:
            error_type: Issue category
            message: Human readable description
            context: Optional row/file details for the sample
        """
        self.error_counts[error_type] += 1

        sample_key = f"{error_type}:{message}"
        if sample_key in self.sampled or len(self.error_samples[error_type]) >= self.max_samples:
            return
        self.sampled.add(sample_key)
        self.error_samples[error_type].append({
            'message': message,
            'context': context or {}
        })

    def count(self, error_type: str) -> int:
        return self.error_counts.get(error_type, 0)

    @property
    def total(self) -> int:
        return sum(self.error_counts.values())

    def get_summary(self) -> Dict:
        """Get issue counts and samples."""
        return {
            'counts': dict(self.error_counts),
            'samples': dict(self.error_samples)
        }

    def log_summary(self, logger: logging.Logger) -> None:
        """Log issue summary at WARNING level.

        Args:
            logger: Logger to use for output
        """
        if not self.error_counts:
            return

        logger.warning("Issue summary:")
        for error_type, count in self.error_counts.items():
            logger.warning(f"{error_type} ({count} occurrences):")
            for i, sample in enumerate(self.error_samples[error_type], 1):
                logger.warning(f"  Sample {i}: {sample['message']}")
                for key, value in sample['context'].items():
                    logger.warning(f"    {key}: {value}")
