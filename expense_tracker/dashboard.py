"""Streamlit app for the expense tracker.

This module only presents values: it reads the current filter selections,
asks the filtering, aggregation and trend modules for numbers, and renders
them. The :class:`TransactionStore` lives in ``st.session_state`` and is
loaded once per browser session.

To run the dashboard from the command line::

    streamlit run expense_tracker/dashboard.py

or use ``python run_dashboard.py`` from the project root.
"""

from __future__ import annotations

import os
import sys
from datetime import datetime
from typing import List, Optional, Sequence

import streamlit as st

# Conditional imports to support execution both as part of a package and
# directly as a script via ``streamlit run expense_tracker/dashboard.py``.
if __package__:
    from . import aggregation as agg
    from . import visualization as viz
    from .category_filter import ALL_CATEGORIES, category_options, filter_by_category
    from .config import ensure_data_directories
    from .date_filters import DateRange, date_range_label, filter_by_date_range
    from .errors import ValidationError
    from .formatting import escape_dollar_for_markdown, format_currency, format_transaction_date
    from .logging_setup import configure_logging
    from .models import EXPENSE_CATEGORIES, INCOME_CATEGORIES, Transaction, TransactionType
    from .monthly_trend import has_activity, monthly_trend, trend_to_frame
    from .storage import JsonFileStorage
    from .store import TransactionStore
else:
    CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
    PARENT_DIR = os.path.dirname(CURRENT_DIR)
    if PARENT_DIR not in sys.path:
        sys.path.insert(0, PARENT_DIR)
    from expense_tracker import aggregation as agg  # type: ignore
    from expense_tracker import visualization as viz  # type: ignore
    from expense_tracker.category_filter import (  # type: ignore
        ALL_CATEGORIES,
        category_options,
        filter_by_category,
    )
    from expense_tracker.config import ensure_data_directories  # type: ignore
    from expense_tracker.date_filters import (  # type: ignore
        DateRange,
        date_range_label,
        filter_by_date_range,
    )
    from expense_tracker.errors import ValidationError  # type: ignore
    from expense_tracker.formatting import (  # type: ignore
        escape_dollar_for_markdown,
        format_currency,
        format_transaction_date,
    )
    from expense_tracker.logging_setup import configure_logging  # type: ignore
    from expense_tracker.models import (  # type: ignore
        EXPENSE_CATEGORIES,
        INCOME_CATEGORIES,
        Transaction,
        TransactionType,
    )
    from expense_tracker.monthly_trend import (  # type: ignore
        has_activity,
        monthly_trend,
        trend_to_frame,
    )
    from expense_tracker.storage import JsonFileStorage  # type: ignore
    from expense_tracker.store import TransactionStore  # type: ignore


def get_store() -> TransactionStore:
    """Return the session's store, loading it on first use."""
    if "transaction_store" not in st.session_state:
        ensure_data_directories()
        store = TransactionStore(JsonFileStorage())
        store.load()
        st.session_state.transaction_store = store
    return st.session_state.transaction_store


def render_date_range_filter() -> DateRange:
    return st.radio(
        "Period",
        options=list(DateRange),
        format_func=date_range_label,
        horizontal=True,
        key="date_range",
        label_visibility="collapsed",
    )


def render_summary_cards(summary: agg.FinancialSummary) -> None:
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Total Income", format_currency(summary.income))
    with col2:
        st.metric("Total Expenses", format_currency(summary.expenses))
    with col3:
        st.metric(
            "Balance",
            format_currency(summary.balance),
            delta="Surplus" if summary.balance >= 0 else "Deficit",
            delta_color="normal" if summary.balance >= 0 else "inverse",
        )


def render_monthly_summary(transactions: Sequence[Transaction], now: datetime) -> None:
    """Charts over the full history, ignoring the list filters."""
    trend = monthly_trend(transactions, now)
    breakdown = agg.expense_breakdown_for_month(transactions, now)

    col1, col2 = st.columns(2)
    with col1:
        st.subheader("Monthly Overview")
        if has_activity(trend):
            st.plotly_chart(viz.create_monthly_overview_chart(trend_to_frame(trend)), use_container_width=True)
        else:
            st.info("No transaction data yet")
    with col2:
        st.subheader("Expense Breakdown")
        if breakdown:
            st.plotly_chart(
                viz.create_category_pie_chart(viz.breakdown_to_series(breakdown)),
                use_container_width=True,
            )
        else:
            st.info("No expenses this month")


def _submit_transaction(store: TransactionStore) -> None:
    # Runs as a callback, before the page re-renders, so totals include the new entry
    state = st.session_state
    try:
        store.add(state.form_type, state.form_amount, state.form_category or "", state.form_description)
    except ValidationError as exc:
        state.form_error = str(exc)
        return
    state.form_error = None
    state.form_amount = 0.0
    state.form_category = None
    state.form_description = ""


def _reset_category() -> None:
    st.session_state.form_category = None


def render_transaction_form(store: TransactionStore) -> None:
    st.subheader("Add Transaction")
    kind = st.radio(
        "Type",
        options=[TransactionType.EXPENSE, TransactionType.INCOME],
        format_func=lambda k: k.value.title(),
        horizontal=True,
        key="form_type",
        on_change=_reset_category,
    )
    options = INCOME_CATEGORIES if kind is TransactionType.INCOME else EXPENSE_CATEGORIES

    with st.form("add_transaction"):
        st.number_input("Amount ($)", min_value=0.0, step=0.01, format="%.2f", key="form_amount")
        st.selectbox(
            "Category", options=options, index=None, placeholder="Select category", key="form_category"
        )
        st.text_input("Description (optional)", max_chars=100, key="form_description")
        st.form_submit_button(
            "Add Transaction", use_container_width=True, on_click=_submit_transaction, args=(store,)
        )

    error = st.session_state.get("form_error")
    if error:
        st.error(error)


def _delete(store: TransactionStore, transaction_id: str) -> None:
    store.delete(transaction_id)


def render_transaction_list(
    store: TransactionStore,
    transactions: Sequence[Transaction],
    categories: List[str],
) -> None:
    st.subheader("Transactions")

    selected: Optional[str] = ALL_CATEGORIES
    if categories:
        choice = st.radio(
            "Category",
            options=["All", *categories],
            horizontal=True,
            key="category_filter",
            label_visibility="collapsed",
        )
        if choice != "All" and choice in categories:
            selected = choice

    visible = filter_by_category(transactions, selected)
    if not visible:
        st.info("No transactions yet")
        return

    for tx in visible:
        col1, col2, col3, col4 = st.columns([3, 3, 2, 1])
        with col1:
            st.markdown(f"**{tx.category}**")
            st.caption(format_transaction_date(tx.timestamp))
        with col2:
            st.write(tx.description or "—")
        with col3:
            sign = "+" if tx.is_income else "-"
            st.markdown(f"{sign}{escape_dollar_for_markdown(tx.amount)}")
        with col4:
            st.button("🗑️", key=f"delete_{tx.id}", help="Delete transaction", on_click=_delete, args=(store, tx.id))


def main() -> None:
    """Entry point for the Streamlit app."""
    configure_logging()
    st.set_page_config(page_title="Expense Tracker", page_icon="💰", layout="wide")
    st.title("Expense Tracker")
    st.caption("Track your income and expenses")

    store = get_store()
    now = datetime.now().astimezone()
    transactions = store.list()

    date_range = render_date_range_filter()
    filtered = filter_by_date_range(transactions, date_range, now)

    render_summary_cards(agg.summarize(filtered))
    render_monthly_summary(transactions, now)

    form_col, list_col = st.columns([1, 2])
    with form_col:
        render_transaction_form(store)
    with list_col:
        render_transaction_list(store, filtered, category_options(filtered))

    if store.last_save_error is not None:
        st.warning(f"Changes are kept for this session but could not be saved: {store.last_save_error}")


if __name__ == "__main__":
    main()
