"""
Logging configuration for the reconciler CLI.
Provides consistent logging setup across all commands.
"""

import logging
import sys
import warnings

class DebugFormatter(logging.Formatter):
    """Custom formatter for console output."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with timestamp, level and source."""
        message = f"[{record.created:.3f}] {record.levelname} {record.name}: {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        # Add color if output is to terminal
        if sys.stderr.isatty():
            color = '\033[0;33m' if record.levelno >= logging.WARNING else '\033[0;36m'
            reset = '\033[0m'
            return f"{color}{message}{reset}"
        return message

def setup_logging(debug: bool = False, level: str = 'INFO') -> None:
    """Setup logging configuration.

    Args:
        debug: Enable debug logging, overrides level
        level: Log level name used when debug is off
    """
    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO))

    # Clear any existing handlers
    root_logger.handlers.clear()

    # Add console handler with debug formatter
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(DebugFormatter())
    root_logger.addHandler(console_handler)

    # openpyxl warns about every unsupported style in vendor exports
    warnings.filterwarnings('ignore', category=UserWarning, module='openpyxl')

def get_logger(name: str) -> logging.Logger:
    """Get a logger with the specified name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger: Configured logger instance
    """
    logger = logging.getLogger(name)

    # Ensure handler uses debug formatter
    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler):
            handler.setFormatter(DebugFormatter())

    return logger
