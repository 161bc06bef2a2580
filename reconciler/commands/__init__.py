"""
Command implementations for the reconciler CLI.
Each submodule provides specific command functionality.
"""

from .audit import AuditCommand
from .dedup import DedupCommand
from .validate import DetectCommand

__all__ = ['AuditCommand', 'DedupCommand', 'DetectCommand']
