"""Category filter for the transaction list."""

from __future__ import annotations

from typing import List, Optional, Sequence

from .models import Transaction

# Sentinel meaning "do not filter by category"
ALL_CATEGORIES = None


def filter_by_category(
    transactions: Sequence[Transaction], category: Optional[str]
) -> Sequence[Transaction]:
    """Keep transactions whose category matches exactly (case-sensitive).

    Passing :data:`ALL_CATEGORIES` returns the input unchanged.
    """
    if category is ALL_CATEGORIES:
        return transactions
    return [tx for tx in transactions if tx.category == category]


def category_options(transactions: Sequence[Transaction]) -> List[str]:
    """Distinct categories in first-encountered order, for filter buttons."""
    return list(dict.fromkeys(tx.category for tx in transactions))
