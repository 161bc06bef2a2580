"""
Commission audit command.
Reconciles promoter files against master files and writes the result workbook.
"""

import click
from pathlib import Path
from typing import Optional, Sequence

from ...auditor import AuditRun, CommissionAuditor
from ...cli.base import BaseCommand, command_error_handler
from ...cli.config import Config
from ...models import FileRole, LayoutTag
from ...processors.export import FOUND_COLUMNS, FOUND_SHEET, PENDING_COLUMNS, PENDING_SHEET
from ...utils.excel_export import rows_to_frame, write_sheets
from ...utils.spreadsheet import Workbook

class AuditCommand(BaseCommand):
    """Command to reconcile promoter commissions against the master registry."""

    def __init__(
        self,
        config: Config,
        master_files: Sequence[Path],
        promoter_files: Sequence[Path],
        layout: Optional[LayoutTag] = None,
        master_sheet: Optional[str] = None,
        header_row: Optional[int] = None,
        output_file: Optional[Path] = None
    ):
        super().__init__(config)
        self.master_files = list(master_files)
        self.promoter_files = list(promoter_files)
        self.layout = layout
        self.master_sheet = master_sheet
        self.header_row = header_row if header_row is not None else config.master_header_row
        self.output_file = output_file

    def validate(self) -> bool:
        """Validate that both sides have at least one readable file."""
        if not super().validate():
            return False
        if not self.master_files:
            self.logger.error("At least one master file is required")
            return False
        if not self.promoter_files:
            self.logger.error("At least one promoter file is required")
            return False
        for path in self.master_files + self.promoter_files:
            if not path.is_file():
                self.logger.error(f"Input file not found: {path}")
                return False
        return True

    @command_error_handler
    def execute(self) -> None:
        """Execute the audit."""
        if not self.validate():
            raise click.Abort()

        masters = [
            Workbook.load(path).source_file(
                FileRole.MASTER, sheet=self.master_sheet, header_row=self.header_row
            )
            for path in self.master_files
        ]
        promoters = [
            Workbook.load(path).source_file(FileRole.PROMOTER, header_row=0, layout=self.layout)
            for path in self.promoter_files
        ]

        auditor = CommissionAuditor(
            self.config.fuzzy_threshold,
            batch_size=self.config.batch_size,
            debug=self.debug
        )
        run = auditor.run(masters, promoters)

        self._display_summary(run)
        self._save_results(run)

    def _display_summary(self, run: AuditRun) -> None:
        """Display run statistics to console."""
        stats = run.stats
        click.echo("\nAudit Summary:")
        click.echo(f"Total Rows: {stats.total_rows}")
        click.echo(f"Matched by CPF: {stats.matched_id}")
        click.echo(f"Matched by Name: {stats.matched_name_exact}")
        click.echo(f"Matched by Fuzzy Name: {stats.matched_name_fuzzy}")
        color = 'yellow' if stats.unmatched else 'green'
        click.secho(f"Pending: {stats.unmatched}", fg=color)

    def _save_results(self, run: AuditRun) -> None:
        """Write the Found and Pendências sheets."""
        path = self.output_path(
            self.output_file,
            f"Auditoria_Comissoes_{self.timestamp('%Y-%m-%d_%H-%M')}.xlsx"
        )
        write_sheets(path, {
            FOUND_SHEET: rows_to_frame(run.found, FOUND_COLUMNS),
            PENDING_SHEET: rows_to_frame(run.pending, PENDING_COLUMNS),
        })
        click.echo(f"\nResults saved to {path}")

__all__ = ['AuditCommand']
