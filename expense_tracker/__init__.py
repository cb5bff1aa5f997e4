"""Top‑level package for the Expense Tracker.

The primary modules are:

* ``store`` – the transaction store, the only holder of mutable state
* ``date_filters`` / ``category_filter`` – pure filters over transaction lists
* ``aggregation`` – income, expense, balance and category totals
* ``monthly_trend`` – trailing six‑month income/expense trend
* ``storage`` – JSON file persistence for the store
* ``dashboard`` – a Streamlit app that ties everything together

To run the dashboard from the command line you can execute:

```bash
streamlit run expense_tracker/dashboard.py
```

The dashboard is not imported here so the core can be used without
Streamlit's import cost.
"""

from .aggregation import (
    CategoryTotal,
    FinancialSummary,
    balance,
    category_breakdown,
    expense_breakdown_for_month,
    summarize,
    total_expenses,
    total_income,
)
from .category_filter import ALL_CATEGORIES, category_options, filter_by_category
from .date_filters import DateRange, DateWindow, date_range_label, filter_by_date_range, get_date_range
from .errors import (
    ExpenseTrackerError,
    PersistenceLoadError,
    PersistenceSaveError,
    StoreStateError,
    ValidationError,
)
from .models import (
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    Transaction,
    TransactionType,
    categories_for,
    decode_transaction,
    encode_transaction,
)
from .monthly_trend import MonthlyTotals, monthly_trend
from .storage import JsonFileStorage, TransactionRepository
from .store import TransactionStore

__all__ = [
    # Store and persistence
    "TransactionStore",
    "TransactionRepository",
    "JsonFileStorage",
    # Models
    "Transaction",
    "TransactionType",
    "INCOME_CATEGORIES",
    "EXPENSE_CATEGORIES",
    "categories_for",
    "encode_transaction",
    "decode_transaction",
    # Filters
    "DateRange",
    "DateWindow",
    "get_date_range",
    "filter_by_date_range",
    "date_range_label",
    "ALL_CATEGORIES",
    "filter_by_category",
    "category_options",
    # Aggregation
    "CategoryTotal",
    "FinancialSummary",
    "total_income",
    "total_expenses",
    "balance",
    "summarize",
    "category_breakdown",
    "expense_breakdown_for_month",
    "MonthlyTotals",
    "monthly_trend",
    # Errors
    "ExpenseTrackerError",
    "ValidationError",
    "PersistenceLoadError",
    "PersistenceSaveError",
    "StoreStateError",
]
