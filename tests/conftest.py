"""Pytest configuration for test isolation.

The storage layer defaults to a project-relative ``data/`` directory. To keep
tests hermetic, every test gets its own data directory through the
``EXPENSE_TRACKER_DATA_DIR`` override and runs with UTC as the local
timezone. Shared builders live here.
"""

from __future__ import annotations

import itertools
import os
import time
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest

from expense_tracker.models import Transaction, TransactionType

# Wednesday
NOW = datetime(2024, 3, 13, 15, 30, tzinfo=timezone.utc)

_ids = itertools.count(1)


@pytest.fixture(autouse=True)
def _isolate_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    data_dir = tmp_path / "data"
    data_dir.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("EXPENSE_TRACKER_DATA_DIR", os.fspath(data_dir))
    monkeypatch.delenv("EXPENSE_TRACKER_TRANSACTIONS_PATH", raising=False)


@pytest.fixture(autouse=True)
def local_tz():
    """Run each test in UTC local time; call the fixture with a zone name to switch."""
    original = os.environ.get("TZ")

    def use(name: str) -> None:
        if not hasattr(time, "tzset"):
            pytest.skip("changing the local timezone requires time.tzset")
        os.environ["TZ"] = name
        time.tzset()

    if hasattr(time, "tzset"):
        use("UTC")
    yield use
    if original is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = original
    if hasattr(time, "tzset"):
        time.tzset()


def make_tx(
    kind="expense",
    amount="10",
    category="Food & Dining",
    description="",
    timestamp=NOW,
    tx_id=None,
) -> Transaction:
    return Transaction(
        id=tx_id or f"t{next(_ids)}",
        kind=TransactionType(kind),
        amount=Decimal(str(amount)),
        category=category,
        description=description,
        timestamp=timestamp,
    )
