"""
Base command infrastructure for the reconciler CLI.
Provides common functionality and utilities for all commands.
"""

import click
import functools
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import Config

from ..processors.error_tracker import COMMAND_EXECUTION_ERROR, ErrorTracker
import time

class BaseCommand(ABC):
    """Base class for all CLI commands."""

    def __init__(self, config: Config):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)
        self.error_tracker = ErrorTracker()

        # Get debug status from click context
        ctx = click.get_current_context(silent=True)
        self.debug = bool(ctx and ctx.obj and ctx.obj.get('debug'))
        if self.debug:
            self.logger.debug(f"Debug mode enabled for {self.__class__.__name__}")

    @abstractmethod
    def execute(self) -> None:
        """Execute the command. Must be implemented by subclasses."""
        pass

    def validate(self) -> bool:
        """Validate command configuration and requirements.

        Returns:
            bool: True if validation passes, False otherwise
        """
        if self.debug:
            self.logger.debug("Validating command configuration")
        try:
            return self.config.validate()
        except ValueError as e:
            self.logger.error(f"Invalid configuration: {e}")
            return False

    def output_path(self, output_file: Optional[Path], default_name: str) -> Path:
        """Resolve where a result workbook goes."""
        if output_file:
            return output_file
        return self.config.output_dir / default_name

    @staticmethod
    def timestamp(fmt: str) -> str:
        return datetime.now().strftime(fmt)

class FileInputCommand(BaseCommand):
    """Base class for commands that process one input file."""

    def __init__(self, config: Config, input_file: Path, output_file: Optional[Path] = None):
        super().__init__(config)
        self.input_file = input_file
        self.output_file = output_file

    def validate(self) -> bool:
        """Validate input file exists and is readable."""
        if not super().validate():
            return False

        if not self.input_file.exists():
            self.logger.error(f"Input file not found: {self.input_file}")
            return False

        if not self.input_file.is_file():
            self.logger.error(f"Input path is not a file: {self.input_file}")
            return False

        return True

def command_error_handler(f):
    """Decorator to handle command execution errors consistently."""
    @functools.wraps(f)
    def wrapper(self, *args, **kwargs):
        start = time.time()
        try:
            if self.debug:
                self.logger.debug(f"Starting command execution: {f.__name__}")

            result = f(self, *args, **kwargs)

            if self.debug:
                self.logger.debug(f"Command completed in {time.time() - start:.3f}s")

            return result

        except click.Abort:
            raise
        except Exception as e:
            self.error_tracker.add_error(
                COMMAND_EXECUTION_ERROR,
                f"Command failed: {str(e)}",
                {
                    'command': self.__class__.__name__,
                    'error': str(e)
                }
            )
            self.logger.error(f"Command failed: {str(e)}", exc_info=self.debug)
            click.secho(f"Error: {str(e)}", fg='red', err=True)
            raise click.Abort()
    return wrapper
