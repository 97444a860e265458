"""Tests for the Streamlit app helpers that do not need a running server."""

from __future__ import annotations

import pytest

pytest.importorskip("streamlit")

from smart_finance import dashboard  # noqa: E402
from smart_finance.models import FilterSpec  # noqa: E402


def test_init_session_state_seeds_defaults() -> None:
    state = {}
    dashboard.init_session_state(state)

    assert len(state["ledger"]) == 15
    assert state["period"] in dashboard.PERIOD_LABELS
    assert state["filters"] == FilterSpec()
    assert state["page"] == 1
    assert state["editing_id"] is None


def test_init_session_state_keeps_existing_values() -> None:
    state = {"page": 3, "period": "all"}
    dashboard.init_session_state(state)
    assert state["page"] == 3
    assert state["period"] == "all"
