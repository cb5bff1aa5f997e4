"""Plotly visualisation helpers for the expense tracker.

Functions here accept the values computed by :mod:`aggregation` and
:mod:`monthly_trend` and produce interactive Plotly figures for Streamlit's
``st.plotly_chart``. They hold no business logic: every number drawn was
computed elsewhere.
"""

from __future__ import annotations

from typing import Iterable

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .aggregation import CategoryTotal

INCOME_COLOR = "#16a34a"
EXPENSE_COLOR = "#dc2626"


def _empty_figure(message: str) -> go.Figure:
    fig = go.Figure()
    fig.update_layout(
        title=message,
        xaxis={"visible": False},
        yaxis={"visible": False},
    )
    return fig


def breakdown_to_series(breakdown: Iterable[CategoryTotal]) -> pd.Series:
    """Convert a category breakdown into a float Series indexed by category."""
    items = list(breakdown)
    return pd.Series(
        [float(item.total) for item in items],
        index=pd.Index([item.category for item in items], name="Category"),
        name="Value",
        dtype="float64",
    )


def create_monthly_overview_chart(trend_frame: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Grouped bar chart of income vs expenses per month.

    Parameters
    ----------
    trend_frame : pandas.DataFrame
        Output of :func:`monthly_trend.trend_to_frame`.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Bar chart with one Income and one Expenses bar per month.
    """
    if trend_frame.empty:
        return _empty_figure("No transaction data yet")
    long_df = trend_frame.melt(
        id_vars="Month",
        value_vars=["Income", "Expenses"],
        var_name="Type",
        value_name="Amount",
    )
    fig = px.bar(
        long_df,
        x="Month",
        y="Amount",
        color="Type",
        barmode="group",
        color_discrete_map={"Income": INCOME_COLOR, "Expenses": EXPENSE_COLOR},
    )
    fig.update_layout(
        title=title or "Income vs Expenses (last 6 months)",
        xaxis_title=None,
        yaxis_title=None,
        yaxis_tickprefix="$",
        legend_title_text=None,
    )
    # Keep calendar order even when labels repeat or sort differently
    fig.update_xaxes(categoryorder="array", categoryarray=list(trend_frame["Month"]))
    return fig


def create_category_pie_chart(series: pd.Series, title: str | None = None) -> go.Figure:
    """Generate a donut chart showing the breakdown of expenses by category.

    Parameters
    ----------
    series : pandas.Series
        Series indexed by category with summed values.
    title : str, optional
        Title for the chart.

    Returns
    -------
    plotly.graph_objects.Figure
        Pie chart.
    """
    if series.empty:
        return _empty_figure("No expenses this month")
    df = series.reset_index()
    df.columns = ["Category", "Value"]
    fig = px.pie(df, names="Category", values="Value", hole=0.4)
    fig.update_traces(textinfo="label+percent", sort=False)
    fig.update_layout(title=title or "This month's expenses by category", showlegend=False)
    return fig
