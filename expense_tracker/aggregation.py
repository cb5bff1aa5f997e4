"""Totals and category breakdowns over a list of transactions.

All sums are accumulated as :class:`~decimal.Decimal`; rounding is left to
the display layer (see :mod:`expense_tracker.formatting`).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, NamedTuple

from .date_filters import month_window
from .models import Transaction, TransactionType, ensure_aware

ZERO = Decimal("0")


class CategoryTotal(NamedTuple):
    category: str
    total: Decimal


@dataclass(frozen=True)
class FinancialSummary:
    income: Decimal
    expenses: Decimal
    balance: Decimal


def _sum_kind(transactions: Iterable[Transaction], kind: TransactionType) -> Decimal:
    return sum((tx.amount for tx in transactions if tx.kind is kind), ZERO)


def total_income(transactions: Iterable[Transaction]) -> Decimal:
    return _sum_kind(transactions, TransactionType.INCOME)


def total_expenses(transactions: Iterable[Transaction]) -> Decimal:
    return _sum_kind(transactions, TransactionType.EXPENSE)


def balance(transactions: Iterable[Transaction]) -> Decimal:
    """Income minus expenses; negative when spending exceeds income."""
    items = list(transactions)
    return total_income(items) - total_expenses(items)


def summarize(transactions: Iterable[Transaction]) -> FinancialSummary:
    items = list(transactions)
    income = total_income(items)
    expenses = total_expenses(items)
    return FinancialSummary(income=income, expenses=expenses, balance=income - expenses)


def category_breakdown(transactions: Iterable[Transaction]) -> List[CategoryTotal]:
    """Sum amounts per category, largest first.

    Ties keep the order in which categories were first seen. Callers usually
    pass expenses for a single month; no kind filtering happens here.
    """
    totals: Dict[str, Decimal] = {}
    for tx in transactions:
        totals[tx.category] = totals.get(tx.category, ZERO) + tx.amount
    # sorted() is stable, so equal totals stay in insertion order
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [CategoryTotal(category, total) for category, total in ranked if total != ZERO]


def expense_breakdown_for_month(
    transactions: Iterable[Transaction], now: datetime
) -> List[CategoryTotal]:
    """This calendar month's expenses grouped by category."""
    window = month_window(ensure_aware(now))
    return category_breakdown(
        tx for tx in transactions if tx.is_expense and window.contains(tx.timestamp)
    )
