"""
Configuration management for the reconciler CLI.
Handles loading and validating configuration from environment variables and files.
"""

import os
from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path
from dotenv import load_dotenv

from ..processors.matcher import DEFAULT_FUZZY_THRESHOLD, validate_threshold

@dataclass
class Config:
    """Configuration settings for the reconciler CLI."""

    # Matching settings
    fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD

    # Processing settings
    batch_size: int = field(default=500)

    # Master files: None auto-detects the header row
    master_header_row: Optional[int] = None

    # Logging settings
    log_level: str = 'INFO'

    # Output settings
    output_dir: Path = field(default_factory=lambda: Path('.'))

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> 'Config':
        """Create configuration from environment variables.

        Args:
            env_file: Optional path to .env file

        Returns:
            Config: Configuration instance

        Raises:
            ValueError: If a variable holds a malformed number
        """
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()

        header_row = os.getenv('MASTER_HEADER_ROW')

        return cls(
            fuzzy_threshold=float(os.getenv('FUZZY_THRESHOLD', str(DEFAULT_FUZZY_THRESHOLD))),
            batch_size=int(os.getenv('BATCH_SIZE', '500')),
            master_header_row=int(header_row) if header_row else None,
            log_level=os.getenv('LOG_LEVEL', 'INFO'),
            output_dir=Path(os.getenv('OUTPUT_DIR', '.'))
        )

    def validate(self) -> bool:
        """Validate configuration settings.

        Returns:
            bool: True if configuration is valid

        Raises:
            ValueError: On the first invalid setting
        """
        validate_threshold(self.fuzzy_threshold)

        if self.batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if self.master_header_row is not None and self.master_header_row < 0:
            raise ValueError("master_header_row must not be negative")

        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR']
        if self.log_level.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")

        if not self.output_dir.exists():
            try:
                self.output_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise ValueError(f"Failed to create output directory: {e}")

        return True
