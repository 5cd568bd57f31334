"""
Configuration management with environment variables.

This module provides centralized configuration management
with validation and type safety.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _env_flag(name: str, default: str) -> str:
    return os.getenv(name, default).strip().lower()


class Config:
    """
    Application configuration manager.

    Loads configuration from environment variables and provides
    validated access to configuration values.

    Attributes:
        seed_path: Seed snapshot to load (None for the bundled seed)
        output_dir: Output directory for logs and run reports
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        strict_validation: Validate actions before dispatching them
        stats_check: Log dashboard counter drift after each dispatch

    Examples:
        >>> config = Config()
        >>> if config.validate():
        ...     store = AdminStore(load_seed(config.seed_path))
    """

    def __init__(self):
        """Initialize configuration by loading environment variables."""
        # Load .env file if it exists
        load_dotenv()

        seed = os.getenv("ADMIN_SEED_PATH")
        self._seed_path = Path(seed) if seed else None

        # Output settings
        self._output_dir = Path(os.getenv("OUTPUT_DIR", "output"))
        self._log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        # Store settings
        self._strict_validation_raw = _env_flag("ADMIN_STRICT_VALIDATION", "true")
        self._stats_check_raw = _env_flag("ADMIN_STATS_CHECK", "false")

    @property
    def seed_path(self) -> Optional[Path]:
        """Get seed snapshot path, or None to use the bundled seed."""
        return self._seed_path

    @property
    def output_dir(self) -> Path:
        """Get output directory path."""
        return self._output_dir

    @property
    def log_level(self) -> str:
        """Get logging level."""
        return self._log_level

    @property
    def strict_validation(self) -> bool:
        """Get whether actions are validated before dispatch."""
        return self._strict_validation_raw == "true"

    @property
    def stats_check(self) -> bool:
        """Get whether counter drift is checked after each dispatch."""
        return self._stats_check_raw == "true"

    def validate(self) -> bool:
        """
        Validate configuration values.

        Returns:
            True if all configuration is valid

        Raises:
            ValueError: If validation fails (all problems are listed)
        """
        errors = []

        if self._seed_path is not None and not self._seed_path.is_file():
            errors.append(f"ADMIN_SEED_PATH does not point to a file: {self._seed_path}")

        if self._log_level not in VALID_LOG_LEVELS:
            errors.append(
                f"LOG_LEVEL must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )

        for name, raw in (
            ("ADMIN_STRICT_VALIDATION", self._strict_validation_raw),
            ("ADMIN_STATS_CHECK", self._stats_check_raw),
        ):
            if raw not in ("true", "false"):
                errors.append(f"{name} must be true or false, got: {raw}")

        if errors:
            error_msg = "Configuration validation failed:\n  - " + "\n  - ".join(errors)
            raise ValueError(error_msg)

        return True

    def create_output_directories(self):
        """Create output directories if they don't exist."""
        directories = [
            self.output_dir / "logs",
            self.output_dir / "reports",
        ]

        for directory in directories:
            directory.mkdir(parents=True, exist_ok=True)


# Singleton instance
config = Config()
