"""
Session state for the Streamlit dashboard.

The whole session lives in one frozen ``AppState`` stored under
``st.session_state[STATE_KEY]``.  Every update builds a new state object and
swaps it in; no field is ever edited in place.

Loading is cached with ``st.cache_resource``: the state is immutable, so one
loaded copy can be shared by every session until the TTL expires.  Only the
main feed is waited for.  The item / punch / hold feeds run in a background
pool (their futures are cached too) and ``refresh_datasets`` swaps each one in
once it has finished.  A failed main feed raises ``DataLoadError`` and is not
cached, so the next rerun retries.
"""

import logging

import streamlit as st

from ..data.loader import apply_finished_loads, load_main_state, start_secondary_loads
from ..models.data_models import AllSystems
from ..reports.excel_export import export_table_bytes

logger = logging.getLogger(__name__)

STATE_KEY = 'sapra_state'
DRILL_KEY = 'sapra_drilldown'
EXPORT_KEY = 'sapra_table_export'
TABLE_KEY = 'detail_table'

# Re-fetch the feeds at most once an hour
CACHE_TTL_SECONDS = 3600


@st.cache_resource(ttl=CACHE_TTL_SECONDS, show_spinner="Loading project data...")
def load_app_state():
    """Fetch the main feed once (shared across sessions)."""
    return load_main_state()


@st.cache_resource(ttl=CACHE_TTL_SECONDS, show_spinner=False)
def secondary_loads():
    """Dataset -> Future for the drill-down feeds, started once."""
    return start_secondary_loads()


def init_state():
    """Load the main feed into this session if not done yet; returns the state."""
    if st.session_state.get(STATE_KEY) is None:
        st.session_state[STATE_KEY] = load_app_state()
    return refresh_datasets()


def refresh_datasets():
    """Swap in drill-down datasets that finished loading since the last run."""
    state = get_state()
    if state is None or not state.pending:
        return state
    updated = apply_finished_loads(state, secondary_loads())
    if updated is not state:
        set_state(updated)
    return updated


def get_state():
    return st.session_state.get(STATE_KEY)


def set_state(state):
    st.session_state[STATE_KEY] = state


def get_selection():
    state = get_state()
    return state.selection if state is not None else AllSystems()


def set_selection(selection):
    """Replace the selection (and with it every derived view)."""
    state = get_state()
    if state is None:
        return
    logger.debug(f"Selection -> {selection}")
    set_state(state.with_selection(selection))
    # Drill-downs and table row picks belong to the old selection
    st.session_state.pop(DRILL_KEY, None)
    st.session_state.pop(TABLE_KEY, None)


def table_export(state):
    """Workbook bytes for the current table, rebuilt only when the view changes."""
    cached = st.session_state.get(EXPORT_KEY)
    if cached is not None and cached[0] is state.data and cached[1] == state.selection:
        return cached[2]
    payload = export_table_bytes(state.selection, state.data)
    st.session_state[EXPORT_KEY] = (state.data, state.selection, payload)
    return payload


def reload_state():
    """Drop the cached feeds and the session copy; next run loads fresh data."""
    load_app_state.clear()
    secondary_loads.clear()
    for key in (STATE_KEY, DRILL_KEY, EXPORT_KEY, TABLE_KEY):
        st.session_state.pop(key, None)
