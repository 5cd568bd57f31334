"""
File operation utilities.

This module provides utilities for saving and loading the JSON snapshots,
action batches and run reports, and for writing CSV reports.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import pandas as pd


logger = logging.getLogger(__name__)


def save_json(data: Any, filepath: Path) -> bool:
    """
    Save data to JSON file.

    Args:
        data: JSON-serializable data (dict or list)
        filepath: Path to save the JSON file

    Returns:
        True if save successful, False otherwise

    Examples:
        >>> save_json(store.state.to_dict(), Path("output/state.json"))
        True
    """
    try:
        filepath.parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

        logger.debug(f"Saved JSON file: {filepath}")
        return True

    except (OSError, TypeError, ValueError) as e:
        logger.error(f"Failed to save JSON file {filepath}: {e}", exc_info=True)
        return False


def load_json(filepath: Path, required: bool = False) -> Optional[Any]:
    """
    Load data from JSON file.

    Args:
        filepath: Path to the JSON file
        required: Raise instead of returning None when the file is
            missing or malformed

    Returns:
        Loaded data, or None if load failed

    Raises:
        ValueError: If ``required`` and the file cannot be loaded

    Examples:
        >>> actions = load_json(Path("actions.json"))
        >>> if actions:
        ...     print(len(actions))
    """
    try:
        if not filepath.exists():
            raise FileNotFoundError(f"JSON file not found: {filepath}")

        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)

        logger.debug(f"Loaded JSON file: {filepath}")
        return data

    except FileNotFoundError as e:
        if required:
            raise ValueError(str(e)) from e
        logger.warning(str(e))
        return None

    except json.JSONDecodeError as e:
        if required:
            raise ValueError(f"Invalid JSON in file {filepath}: {e}") from e
        logger.error(f"Invalid JSON in file {filepath}: {e}")
        return None


def save_csv(df: pd.DataFrame, filepath: Path) -> bool:
    """
    Save DataFrame to CSV file.

    Args:
        df: Pandas DataFrame to save
        filepath: Path to save the CSV file

    Returns:
        True if save successful, False otherwise

    Examples:
        >>> save_csv(transactions_frame(store.state), Path("output/transactions.csv"))
        True
    """
    try:
        filepath.parent.mkdir(parents=True, exist_ok=True)

        df.to_csv(filepath, index=False, encoding='utf-8')

        logger.debug(f"Saved CSV file: {filepath} ({len(df)} rows)")
        return True

    except OSError as e:
        logger.error(f"Failed to save CSV file {filepath}: {e}", exc_info=True)
        return False


def generate_filename(prefix: str, extension: str, now: Optional[datetime] = None) -> str:
    """
    Generate timestamped filename.

    Examples:
        >>> generate_filename("run_report", "json", datetime(2024, 3, 1, 10, 30, 45))
        'run_report_20240301_103045.json'
    """
    timestamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return f"{prefix}_{timestamp}.{extension}"
