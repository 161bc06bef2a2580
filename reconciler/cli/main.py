"""
Core CLI implementation for the reconciler package.
"""

import click
from dataclasses import replace
from pathlib import Path
from typing import Optional, Tuple

from .config import Config
from .logging import setup_logging, get_logger
from ..commands import AuditCommand, DedupCommand, DetectCommand
from ..models import LayoutTag

INPUT_FILE = click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path)
OUTPUT_FILE = click.Path(file_okay=True, dir_okay=False, path_type=Path)

def _layout(ctx, param, value: Optional[str]) -> Optional[LayoutTag]:
    if value is None:
        return None
    try:
        return LayoutTag.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e))

@click.group()
@click.option('--debug', is_flag=True, help='Enable detailed debug output')
@click.option('--env-file', type=INPUT_FILE, help='Read settings from this .env file')
@click.pass_context
def cli(ctx, debug: bool, env_file: Optional[Path]):
    """Commission reconciliation CLI tool"""
    # Store debug flag in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug

    # Initialize config and store in context
    try:
        config = Config.from_env(env_file)
        config.validate()
    except ValueError as e:
        click.echo(f"Error initializing configuration: {str(e)}", err=True)
        ctx.exit(1)
    ctx.obj['config'] = config

    # Setup logging with debug flag
    setup_logging(debug=debug, level=config.log_level)

    logger = get_logger('cli')
    if debug:
        logger.debug(f"Using configuration: {config}")

@cli.command()
@click.option('--master', 'masters', multiple=True, required=True, type=INPUT_FILE,
              help='Master registry file (repeatable, read in the given order)')
@click.option('--promoter', 'promoters', multiple=True, required=True, type=INPUT_FILE,
              help='Promoter commission file (repeatable)')
@click.option('--layout', callback=_layout,
              help='Force a promoter layout instead of detecting it (PORT, CREDFORYOU, "CIA DO CRÉDITO", GENÉRICO)')
@click.option('--threshold', type=click.FloatRange(0.5, 1.0),
              help='Fuzzy name similarity threshold, 0.5 (loose) to 1.0 (strict)')
@click.option('--master-sheet', help='Sheet to read from the master files')
@click.option('--header-row', type=click.IntRange(min=0),
              help='0-based header row of the master files (auto-detected by default)')
@click.option('--output', type=OUTPUT_FILE, help='Where to write the result workbook')
@click.pass_context
def audit(ctx, masters: Tuple[Path, ...], promoters: Tuple[Path, ...], layout: Optional[LayoutTag],
          threshold: Optional[float], master_sheet: Optional[str], header_row: Optional[int],
          output: Optional[Path]):
    """Reconcile promoter commissions against the master registry."""
    config = ctx.obj['config']
    if threshold is not None:
        config = replace(config, fuzzy_threshold=threshold)
    command = AuditCommand(config, masters, promoters, layout=layout, master_sheet=master_sheet,
                           header_row=header_row, output_file=output)
    command.execute()

@cli.command()
@click.argument('file', type=INPUT_FILE)
@click.option('--column', help='Column holding the names to compare (guessed by default)')
@click.option('--output', type=OUTPUT_FILE, help='Where to write the clean workbook')
@click.option('--show-removed', is_flag=True, help='List the removed rows')
@click.pass_context
def dedup(ctx, file: Path, column: Optional[str], output: Optional[Path], show_removed: bool):
    """Remove rows whose name repeats an earlier row."""
    command = DedupCommand(ctx.obj['config'], file, output, column=column, show_removed=show_removed)
    command.execute()

@cli.command()
@click.argument('file', type=INPUT_FILE)
@click.option('--sheet', help='Sheet to inspect (first sheet by default)')
@click.option('--master', is_flag=True, help='Inspect the file as a master registry')
@click.option('--output', type=OUTPUT_FILE, help='Save validation results to a JSON file')
@click.pass_context
def detect(ctx, file: Path, sheet: Optional[str], master: bool, output: Optional[Path]):
    """Show the sheets, header row and layout detected for a file."""
    command = DetectCommand(ctx.obj['config'], file, output, sheet=sheet, master=master)
    command.execute()
