"""Streamlit app for the Smart Finance dashboard.

The app keeps a single :class:`~smart_finance.ledger.Ledger` in
``st.session_state`` for the browser session and recomputes the whole view
from it on every rerun.  All numbers shown come from
:func:`smart_finance.analytics.compute_view`; this module only wires widgets
to ledger operations and renders the results.

To run the dashboard from the command line::

    streamlit run smart_finance/dashboard.py
"""

from __future__ import annotations

import os
import sys
from datetime import date
from typing import Any, MutableMapping

import pandas as pd
import streamlit as st

if __package__:
    from . import analytics, assistant, config, data_processing, export, pagination
    from . import visualization as viz
    from .formatting import escape_currency_for_markdown, format_currency
    from .ledger import Ledger
    from .logging_setup import configure_logging, get_logger
    from .models import ENTRY_TYPES, EXPENSE_CATEGORIES, FILTER_TYPES, INCOME_CATEGORIES, FilterSpec, filter_categories
else:
    # Allow ``streamlit run smart_finance/dashboard.py`` without installing.
    CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
    PARENT_DIR = os.path.dirname(CURRENT_DIR)
    if PARENT_DIR not in sys.path:
        sys.path.insert(0, PARENT_DIR)
    from smart_finance import analytics, assistant, config, data_processing, export, pagination  # type: ignore
    from smart_finance import visualization as viz  # type: ignore
    from smart_finance.formatting import escape_currency_for_markdown, format_currency  # type: ignore
    from smart_finance.ledger import Ledger  # type: ignore
    from smart_finance.logging_setup import configure_logging, get_logger  # type: ignore
    from smart_finance.models import (  # type: ignore
        ENTRY_TYPES, EXPENSE_CATEGORIES, FILTER_TYPES, INCOME_CATEGORIES, FilterSpec, filter_categories,
    )

logger = get_logger(__name__)

PERIOD_LABELS = {'7d': 'Last 7 days', '30d': 'Last 30 days', '90d': 'Last 90 days', '1y': 'Last year', 'all': 'All time'}


def init_session_state(state: MutableMapping[str, Any]) -> None:
    """Seed per-session state on first run."""
    state.setdefault('ledger', Ledger.with_examples())
    state.setdefault('period', config.DEFAULT_PERIOD if config.DEFAULT_PERIOD in PERIOD_LABELS else '30d')
    state.setdefault('filters', FilterSpec())
    state.setdefault('page', 1)
    state.setdefault('editing_id', None)
    state.setdefault('ai_response', '')


def _rerun() -> None:
    rerun = getattr(st, 'rerun', None) or getattr(st, 'experimental_rerun', None)
    if rerun:
        rerun()


# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------


def render_sidebar(state: MutableMapping[str, Any]) -> None:
    st.sidebar.header("Period")
    periods = list(PERIOD_LABELS)
    state['period'] = st.sidebar.radio(
        "Show transactions from",
        options=periods,
        index=periods.index(state['period']),
        format_func=PERIOD_LABELS.get,
    )

    st.sidebar.header("Filters")
    current: FilterSpec = state['filters']
    txn_type = st.sidebar.selectbox("Type", options=list(FILTER_TYPES), index=list(FILTER_TYPES).index(current.type))
    choices = filter_categories(txn_type)
    categories = st.sidebar.multiselect(
        "Categories", options=choices, default=[c for c in current.categories if c in choices]
    )
    col1, col2 = st.sidebar.columns(2)
    start = col1.text_input("From (YYYY-MM-DD)", value=current.date_start or '')
    end = col2.text_input("To (YYYY-MM-DD)", value=current.date_end or '')
    col3, col4 = st.sidebar.columns(2)
    low = col3.text_input("Min amount", value='' if current.amount_min is None else str(current.amount_min))
    high = col4.text_input("Max amount", value='' if current.amount_max is None else str(current.amount_max))

    state['filters'] = FilterSpec(
        date_start=start.strip() or None,
        date_end=end.strip() or None,
        categories=categories,
        amount_min=low,
        amount_max=high,
        type=txn_type,
    )


# ---------------------------------------------------------------------------
# Main sections
# ---------------------------------------------------------------------------


def render_upload(state: MutableMapping[str, Any]) -> None:
    st.subheader("Import Transactions")
    st.caption("CSV with columns for date, description and amount. Optional: category, type.")
    uploaded = st.file_uploader("Choose a CSV file", type=["csv"], accept_multiple_files=False)
    replace = st.checkbox("Replace current transactions", value=False)
    if uploaded is None or not st.button("Import"):
        return
    try:
        result = data_processing.import_file(uploaded, ledger=state['ledger'], replace=replace)
    except Exception as exc:  # pragma: no cover - UI display only
        logger.exception("Import of %s failed", getattr(uploaded, 'name', 'upload'))
        st.error(f"Failed to read file: {exc}")
        return
    if result.ok:
        state['page'] = 1
        st.success(f"Successfully loaded {len(result.records)} transactions from {uploaded.name}")
    else:
        st.error(result.message)


def render_assistant(state: MutableMapping[str, Any]) -> None:
    st.subheader("AI Financial Assistant")
    question = st.text_input(
        "Ask about your finances",
        placeholder="How much did I spend on food this month?",
    )
    if st.button("Ask") and question.strip():
        with st.spinner("Thinking..."):
            response = assistant.ask_question(question, state['ledger'].snapshot())
        state['ai_response'] = response['answer'] if response else ''
    if state.get('ai_response'):
        st.info(escape_currency_for_markdown(state['ai_response']))


def render_stats(view: analytics.DashboardView) -> None:
    totals = view.totals
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Current Balance", format_currency(totals['balance']))
    col2.metric("Total Income", format_currency(totals['income']))
    col3.metric("Total Expenses", format_currency(totals['expenses']))
    col4.metric("Estimated Savings", format_currency(totals['estimated_savings']))


def render_charts(view: analytics.DashboardView) -> None:
    left, right = st.columns([2, 1])
    with left:
        st.plotly_chart(viz.create_cash_flow_chart(view.monthly_series), use_container_width=True)
    with right:
        st.plotly_chart(viz.create_category_pie_chart(view.category_breakdown), use_container_width=True)


def render_entry_form(state: MutableMapping[str, Any]) -> None:
    ledger: Ledger = state['ledger']
    editing = ledger.get(state['editing_id']) if state.get('editing_id') else None
    st.subheader("Edit Transaction" if editing else "Add Transaction")

    txn_type = st.radio(
        "Type",
        options=list(ENTRY_TYPES),
        index=list(ENTRY_TYPES).index(editing.type) if editing and editing.type in ENTRY_TYPES else 1,
        horizontal=True,
        key="entry_type",
    )
    with st.form("entry_form", clear_on_submit=True):
        description = st.text_input("Description", value=editing.description if editing else '')
        amount = st.text_input("Amount", value=str(editing.amount) if editing else '')
        options = INCOME_CATEGORIES if txn_type == 'income' else EXPENSE_CATEGORIES
        default_index = options.index(editing.category) if editing and editing.category in options else 0
        category = st.selectbox("Category", options=options, index=default_index)
        entry_date = st.date_input("Date", value=date.fromisoformat(editing.date) if editing else date.today())
        submitted = st.form_submit_button("Save" if editing else "Add")

    if not submitted:
        return
    entry = {
        'description': description,
        'amount': amount,
        'category': category,
        'type': txn_type,
        'date': entry_date.isoformat(),
    }
    if editing:
        saved = ledger.update(editing.id, entry)
        state['editing_id'] = None
    else:
        saved = ledger.add(entry) is not None
    if saved:
        _rerun()
    else:
        st.warning("Please fill in a description, a positive amount and a category.")


def render_transactions(state: MutableMapping[str, Any], view: analytics.DashboardView) -> None:
    st.subheader("Recent Transactions")
    page = pagination.paginate(view.filtered, config.PAGE_SIZE, state['page'])
    state['page'] = page.current_page

    if not page.items:
        st.info("No transactions found. Try adjusting your filters or upload a CSV file!")
    else:
        table = pd.DataFrame([t.to_dict() for t in page.items]).set_index('id')
        table['amount'] = [
            format_currency(t.amount if t.type == 'income' else -t.amount, signed=True) for t in page.items
        ]
        st.dataframe(table, use_container_width=True)

        ids = [t.id for t in page.items]
        selected = st.selectbox(
            "Select a transaction",
            options=ids,
            format_func=lambda i: next(f"{t.date} {t.description}" for t in page.items if t.id == i),
        )
        col_edit, col_delete = st.columns(2)
        if col_edit.button("Edit"):
            state['editing_id'] = selected
            _rerun()
        if col_delete.button("Delete"):
            state['ledger'].delete(selected)
            _rerun()

    if page.total_pages > 1:
        _render_page_controls(state, page)

    st.download_button(
        "Export CSV",
        data=export.export_csv(view.filtered),
        file_name=export.export_filename(),
        mime="text/csv",
    )


def _render_page_controls(state: MutableMapping[str, Any], page: pagination.Page) -> None:
    cols = st.columns(len(page.display_window) + 2)
    if cols[0].button("‹", disabled=not page.has_previous, key="page_prev"):
        state['page'] = page.current_page - 1
        _rerun()
    for col, marker in zip(cols[1:-1], page.display_window):
        if marker == pagination.ELLIPSIS:
            col.markdown(pagination.ELLIPSIS)
        elif col.button(str(marker), key=f"page_{marker}", type="primary" if marker == page.current_page else "secondary"):
            state['page'] = marker
            _rerun()
    if cols[-1].button("›", disabled=not page.has_next, key="page_next"):
        state['page'] = page.current_page + 1
        _rerun()


def main() -> None:
    """Entry point for the Streamlit app."""
    configure_logging()
    st.set_page_config(page_title="Smart Finance", layout="wide", initial_sidebar_state="expanded")
    st.title("Smart Finance")
    st.markdown("AI-Powered Personal Finance Dashboard")

    state = st.session_state
    init_session_state(state)
    render_sidebar(state)
    render_upload(state)

    view = analytics.compute_view(state['ledger'].snapshot(), state['period'], state['filters'])

    render_assistant(state)
    render_stats(view)
    render_charts(view)
    render_transactions(state, view)
    render_entry_form(state)


if __name__ == "__main__":  # pragma: no cover
    main()
