"""Monthly income/expense trend over a trailing window of calendar months.

The trend always runs over the complete history, independently of whatever
date or category filter the list view has selected. Each month is the closed
interval from its first to its last local instant, in the timezone of ``now``.

Labels are abbreviated month names without the year, so a window that
crosses New Year does not say which year each month belongs to.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List

import pandas as pd

from .aggregation import ZERO, total_expenses, total_income
from .config import TREND_MONTHS
from .date_filters import DateWindow, month_window, wall_time
from .models import Transaction, ensure_aware


@dataclass(frozen=True)
class MonthlyTotals:
    label: str
    window: DateWindow
    income: Decimal
    expenses: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expenses


def shift_months(moment: datetime, months_back: int) -> datetime:
    """Midnight on the first of the month ``months_back`` months before ``moment``."""
    index = moment.year * 12 + (moment.month - 1) - months_back
    year, month = divmod(index, 12)
    return wall_time(moment, year, month + 1, 1)


def month_label(moment: datetime) -> str:
    return calendar.month_abbr[moment.month]


def monthly_trend(
    transactions: Iterable[Transaction],
    now: datetime,
    window_size: int = TREND_MONTHS,
) -> List[MonthlyTotals]:
    """Income and expense sums for each of the last ``window_size`` months.

    The result always has exactly ``window_size`` entries, oldest first and
    ending with the month that contains ``now``; empty months report zero.
    """
    if window_size < 1:
        raise ValueError(f"window_size must be at least 1, got {window_size}")

    now = ensure_aware(now)
    items = list(transactions)
    trend: List[MonthlyTotals] = []
    for months_back in range(window_size - 1, -1, -1):
        window = month_window(shift_months(now, months_back))
        in_month = [tx for tx in items if window.contains(tx.timestamp)]
        trend.append(
            MonthlyTotals(
                label=month_label(window.start),
                window=window,
                income=total_income(in_month),
                expenses=total_expenses(in_month),
            )
        )
    return trend


def has_activity(trend: Iterable[MonthlyTotals]) -> bool:
    """True when at least one month recorded income or expenses."""
    return any(month.income != ZERO or month.expenses != ZERO for month in trend)


def trend_to_frame(trend: Iterable[MonthlyTotals]) -> pd.DataFrame:
    """Tabulate a trend for charting (amounts converted to float here)."""
    rows = [
        {
            "Month": month.label,
            "Month Start": month.window.start,
            "Income": float(month.income),
            "Expenses": float(month.expenses),
            "Net": float(month.net),
        }
        for month in trend
    ]
    return pd.DataFrame(rows, columns=["Month", "Month Start", "Income", "Expenses", "Net"])
