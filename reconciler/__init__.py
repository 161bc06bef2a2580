"""Commission reconciliation package."""

from .auditor import CommissionAuditor
from .processors import validate_source_file, deduplicate

__all__ = ['CommissionAuditor', 'validate_source_file', 'deduplicate']
