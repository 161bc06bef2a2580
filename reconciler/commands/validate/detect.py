"""File inspection command."""

import click
import json
from pathlib import Path
from typing import Optional, Dict, Any

from ...cli.base import FileInputCommand, command_error_handler
from ...cli.config import Config
from ...models import FileRole
from ...processors.layouts import detect_layout
from ...processors.validator import validate_source_file
from ...utils.spreadsheet import Workbook

class DetectCommand(FileInputCommand):
    """Command to show how a file will be read: sheet, header row and layout."""

    def __init__(
        self,
        config: Config,
        input_file: Path,
        output_file: Optional[Path] = None,
        sheet: Optional[str] = None,
        master: bool = False
    ):
        super().__init__(config, input_file, output_file)
        self.sheet = sheet
        self.role = FileRole.MASTER if master else FileRole.PROMOTER

    @command_error_handler
    def execute(self) -> None:
        """Execute the inspection."""
        if not self.validate():
            raise click.Abort()

        workbook = Workbook.load(self.input_file)
        header_row = 0
        if self.role is FileRole.MASTER:
            header_row = self.config.master_header_row
            if header_row is None:
                header_row = workbook.detect_header_row(self.sheet)
        source = workbook.source_file(self.role, sheet=self.sheet, header_row=header_row)

        click.echo(f"\nFile: {source.name}")
        click.echo(f"Sheets: {', '.join(workbook.sheet_names)}")
        click.echo(f"Sheet used: {source.sheet_name} (header on row {source.header_row + 1})")
        click.echo(f"Columns: {', '.join(source.columns)}")
        if self.role is FileRole.PROMOTER:
            click.echo(f"Detected layout: {detect_layout(source.columns).value}")

        results = validate_source_file(source)
        self._display_summary(results)

        if self.output_file:
            self._save_results(results)

        if not results['is_valid']:
            raise click.Abort()

    def _display_summary(self, results: Dict[str, Any]) -> None:
        """Display validation summary to console."""
        summary = results['summary']
        stats = summary['stats']

        click.echo("\nValidation Summary:")
        click.echo(f"Total Rows: {stats['total_rows']}")
        click.echo(f"Valid Rows: {stats['valid_rows']}")
        click.echo(f"Rows with Warnings: {stats['rows_with_warnings']}")

        if summary['errors']:
            click.echo("\nIssues Found:")
            for error in summary['errors']:
                color = 'red' if error['severity'] == 'CRITICAL' else 'yellow'
                click.secho(
                    f"[{error['severity']}] Row {error['row']}, "
                    f"Field: {error['field']} - {error['message']}",
                    fg=color
                )

    def _save_results(self, results: Dict[str, Any]) -> None:
        """Save validation results to file."""
        with open(self.output_file, 'w', encoding='utf-8') as f:
            json.dump(results, f, indent=2, ensure_ascii=False)
        click.echo(f"\nDetailed results saved to {self.output_file}")
