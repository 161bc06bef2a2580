"""
Duplicate removal command.
"""

import click
from pathlib import Path
from typing import Optional

from ...cli.base import FileInputCommand, command_error_handler
from ...cli.config import Config
from ...models import DedupPartition
from ...processors.dedup import DedupProcessor, POSITION_FIELD, strip_position, suggest_key_column
from ...utils.excel_export import rows_to_frame, write_sheets
from ...utils.spreadsheet import Workbook

CLEAN_SHEET = 'Dados Únicos'

class DedupCommand(FileInputCommand):
    """Command to remove rows whose name repeats an earlier row."""

    def __init__(
        self,
        config: Config,
        input_file: Path,
        output_file: Optional[Path] = None,
        column: Optional[str] = None,
        show_removed: bool = False
    ):
        super().__init__(config, input_file, output_file)
        self.column = column
        self.show_removed = show_removed

    @command_error_handler
    def execute(self) -> None:
        """Execute the dedup pass."""
        if not self.validate():
            raise click.Abort()

        labels, rows = Workbook.load(self.input_file).rows()
        if not rows:
            raise ValueError(f"{self.input_file.name} is empty or invalid")

        column = self.column or suggest_key_column(labels)
        if self.column is None:
            self.logger.info(f"Using column '{column}' as the dedup key")

        processor = DedupProcessor(column, batch_size=self.config.batch_size, debug=self.debug)
        partition = processor.run(rows)

        self._display_summary(partition, column)
        self._save_results(partition, labels)

    def _display_summary(self, partition: DedupPartition, column: str) -> None:
        click.echo(f"\nDuplicate Removal Summary ({column}):")
        click.echo(f"Total Rows: {partition.total}")
        click.secho(f"Unique (kept): {partition.kept_count}", fg='green')
        click.secho(f"Duplicates (removed): {partition.removed_count}", fg='red')

        if self.show_removed and partition.removed:
            click.echo("\nRemoved rows:")
            for row in partition.removed:
                click.echo(f"  Row {row[POSITION_FIELD]}: {row.get(column, '')}")

    def _save_results(self, partition: DedupPartition, labels) -> None:
        """Write the kept rows, without the position tag."""
        stem = self.input_file.stem
        path = self.output_path(self.output_file, f"Limpo_{stem}_{self.timestamp('%H-%M')}.xlsx")
        clean = [strip_position(row) for row in partition.kept]
        write_sheets(path, {CLEAN_SHEET: rows_to_frame(clean, labels)})
        click.echo(f"\nClean file saved to {path}")

__all__ = ['DedupCommand']
