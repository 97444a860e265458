"""Plotly visualisation helpers for the dashboard.

These functions accept the plain lists produced by
:mod:`smart_finance.analytics` and return Plotly figures that Streamlit
renders via ``st.plotly_chart``.  They hold no logic beyond layout: colour
assignment follows list position.
"""

from __future__ import annotations

from typing import Any, Dict, List

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from . import config

CATEGORY_COLORS = ['#8B5CF6', '#EF4444', '#F59E0B', '#10B981', '#3B82F6']


def _empty_figure(title: str = "No data to display") -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title=title)
    return fig


def create_category_pie_chart(breakdown: List[Dict[str, Any]], title: str | None = None) -> go.Figure:
    """Pie chart of expense totals per category.

    Parameters
    ----------
    breakdown : list of dict
        ``{"category", "total"}`` entries as returned by
        :func:`smart_finance.analytics.category_breakdown`.
    title : str, optional
        Chart title.
    """
    if not breakdown:
        return _empty_figure("No expense data available")
    df = pd.DataFrame(breakdown)
    colors = [CATEGORY_COLORS[i % len(CATEGORY_COLORS)] for i in range(len(df))]
    fig = px.pie(df, names="category", values="total")
    fig.update_traces(marker={"colors": colors}, sort=False)
    fig.update_layout(title=title or "Expense Categories")
    return fig


def create_cash_flow_chart(series: List[Dict[str, Any]], title: str | None = None) -> go.Figure:
    """Monthly income/expense bars with the running balance as a line.

    Parameters
    ----------
    series : list of dict
        Rows from :func:`smart_finance.analytics.monthly_series`.
    title : str, optional
        Chart title.
    """
    if not series:
        return _empty_figure()
    df = pd.DataFrame(series)
    fig = go.Figure()
    fig.add_trace(go.Bar(x=df["label"], y=df["income"], name="Income", marker_color="#10B981"))
    fig.add_trace(go.Bar(x=df["label"], y=df["expenses"], name="Expenses", marker_color="#EF4444"))
    fig.add_trace(
        go.Scatter(x=df["label"], y=df["running_balance"], name="Balance", mode="lines+markers", line={"color": "#8B5CF6"})
    )
    fig.update_layout(
        title=title or "Cash Flow Analysis",
        barmode="group",
        xaxis_title="Month",
        yaxis_title=f"Amount ({config.CURRENCY_SYMBOL})",
    )
    return fig
