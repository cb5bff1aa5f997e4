"""Configuration management for the expense tracker.

This module centralizes all configuration values including paths,
defaults, and environment variable overrides.
"""

from __future__ import annotations

import calendar
import os
from pathlib import Path

# Base project root - assumes this file is in expense_tracker/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directory
DATA_DIR = Path(os.getenv("EXPENSE_TRACKER_DATA_DIR", _PROJECT_ROOT / "data"))

# Single well-known key for the persisted transaction collection
STORAGE_KEY = "expense-tracker-transactions"

TRANSACTIONS_PATH = Path(
    os.getenv("EXPENSE_TRACKER_TRANSACTIONS_PATH", DATA_DIR / f"{STORAGE_KEY}.json")
)

# Analytics defaults
TREND_MONTHS = 6
DESCRIPTION_MAX_LENGTH = 100
# ``datetime.weekday()`` numbering (Monday == 0)
WEEK_START = calendar.SUNDAY


def get_data_dir() -> Path:
    """Resolve the data directory, honouring overrides set after import."""
    override = os.getenv("EXPENSE_TRACKER_DATA_DIR")
    return Path(override) if override else DATA_DIR


def get_transactions_path() -> Path:
    """Resolve the transactions file, honouring overrides set after import."""
    override = os.getenv("EXPENSE_TRACKER_TRANSACTIONS_PATH")
    if override:
        return Path(override)
    if os.getenv("EXPENSE_TRACKER_DATA_DIR"):
        return get_data_dir() / f"{STORAGE_KEY}.json"
    return TRANSACTIONS_PATH


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [get_data_dir(), get_transactions_path().parent]:
        directory.mkdir(parents=True, exist_ok=True)
