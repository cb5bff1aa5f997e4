"""Date range filters for the transaction list.

Every window is a closed interval ending at the last instant of the day that
contains ``now``. Boundaries are wall-clock times in the zone of ``now``,
resolved per instant across daylight-saving changes. Weeks start on Sunday
unless told otherwise. ``now`` is always passed in; nothing here reads the
clock.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import List, Optional, Sequence

from .config import WEEK_START
from .models import Transaction, ensure_aware


class DateRange(str, Enum):
    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"


_LABELS = {
    DateRange.ALL: "All Time",
    DateRange.TODAY: "Today",
    DateRange.WEEK: "This Week",
    DateRange.MONTH: "This Month",
}


@dataclass(frozen=True)
class DateWindow:
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= ensure_aware(moment) <= self.end


def wall_time(
    like: datetime,
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
    microsecond: int = 0,
) -> datetime:
    """Build a wall-clock time in the zone of ``like``.

    A fixed offset that matches the machine's local offset (what
    ``datetime.now().astimezone()`` produces) is treated as local time, so the
    offset is looked up for the new instant instead of copied from ``like``.
    """
    naive = datetime(year, month, day, hour, minute, second, microsecond)
    tz = like.tzinfo
    if isinstance(tz, timezone) and like.utcoffset() == like.astimezone().utcoffset():
        return naive.astimezone()
    return naive.replace(tzinfo=tz)


def start_of_day(moment: datetime) -> datetime:
    return wall_time(moment, moment.year, moment.month, moment.day)


def end_of_day(moment: datetime) -> datetime:
    return wall_time(moment, moment.year, moment.month, moment.day, 23, 59, 59, 999999)


def start_of_week(moment: datetime, week_start: int = WEEK_START) -> datetime:
    days_back = (moment.weekday() - week_start) % 7
    first = moment.date() - timedelta(days=days_back)
    return wall_time(moment, first.year, first.month, first.day)


def start_of_month(moment: datetime) -> datetime:
    return wall_time(moment, moment.year, moment.month, 1)


def end_of_month(moment: datetime) -> datetime:
    last_day = calendar.monthrange(moment.year, moment.month)[1]
    return wall_time(moment, moment.year, moment.month, last_day, 23, 59, 59, 999999)


def month_window(moment: datetime) -> DateWindow:
    """The whole calendar month containing ``moment``."""
    return DateWindow(start_of_month(moment), end_of_month(moment))


def get_date_range(
    selector: DateRange | str,
    now: datetime,
    week_start: int = WEEK_START,
) -> Optional[DateWindow]:
    """Return the window for a selector, or ``None`` for no restriction."""
    selector = DateRange(selector)
    if selector is DateRange.ALL:
        return None

    now = ensure_aware(now)
    end = end_of_day(now)
    if selector is DateRange.TODAY:
        return DateWindow(start_of_day(now), end)
    if selector is DateRange.WEEK:
        return DateWindow(start_of_week(now, week_start), end)
    return DateWindow(start_of_month(now), end)


def filter_by_date_range(
    transactions: Sequence[Transaction],
    selector: DateRange | str,
    now: datetime,
    week_start: int = WEEK_START,
) -> Sequence[Transaction]:
    """Keep the transactions whose timestamp falls inside the window.

    ``DateRange.ALL`` hands back the input sequence itself.
    """
    window = get_date_range(selector, now, week_start)
    if window is None:
        return transactions
    filtered: List[Transaction] = [tx for tx in transactions if window.contains(tx.timestamp)]
    return filtered


def date_range_label(selector: DateRange | str) -> str:
    return _LABELS[DateRange(selector)]
