"""
SAPRA Dashboard - Project Progress

Single-page Streamlit dashboard with:
- System / Subsystem navigation sidebar with search
- Summary cards (total, completed, pending, remaining, punch, hold point)
- Progress and issue donuts, per-discipline and per-system breakdowns
- Detail table with per-cell drill-down
- Excel export of the table and of every drill-down list
"""

import logging
import sys
from pathlib import Path

import pandas as pd
import streamlit as st

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from sapra_dashboard.analysis import (
    aggregate, child_stats, context_for_summary_tile, context_for_table_cell,
    discipline_stats, resolve, table_rows,
)
from sapra_dashboard.core.config import REPORT_TITLE
from sapra_dashboard.core.utils import percent_of
from sapra_dashboard.dashboard.navigation import view_title
from sapra_dashboard.dashboard.sidebar import render_sidebar
from sapra_dashboard.dashboard.state import (
    DRILL_KEY, TABLE_KEY, get_state, init_state, refresh_datasets, table_export,
)
from sapra_dashboard.data.loader import DataLoadError
from sapra_dashboard.models.data_models import SubsystemScope
from sapra_dashboard.reports.excel_export import (
    drilldown_export_filename, drilldown_export_records, export_drilldown_bytes,
    table_export_filename,
)
from sapra_dashboard.visualization.charts import (
    chart_donut, chart_stacked_progress, counters_overview_series, issues_series,
    overview_series,
)

logger = logging.getLogger(__name__)

XLSX_MIME = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

# ============================================================================
# PAGE CONFIG
# ============================================================================

st.set_page_config(
    page_title="SAPRA | Project Progress",
    page_icon="🏗️",
    layout="wide",
    initial_sidebar_state="expanded"
)

# (tile key, label, stats attribute, show percent of total)
SUMMARY_TILES = [
    ('total', "Total Items", 'total_items', False),
    ('completed', "Completed", 'done', True),
    ('pending', "Pending", 'pending', True),
    ('remaining', "Remaining", 'remaining', True),
    ('punch', "Punch", 'punch', False),
    ('hold', "Hold Point", 'hold', False),
]

# Table columns a click can drill into, with their button labels
TABLE_DRILL_COLUMNS = [
    ('total_items', "Total Items"),
    ('completed', "Completed"),
    ('pending', "Pending"),
    ('punch', "Punch"),
    ('hold_point', "Hold Point"),
    ('status_percent', "Remaining"),
]


def request_drilldown(context, dataset):
    st.session_state[DRILL_KEY] = (context, dataset)


# ============================================================================
# DRILL-DOWN MODAL
# ============================================================================

@st.dialog("Details", width="large")
def show_drilldown(result, loading=False):
    st.subheader(result.title)
    if loading:
        st.info(f"{result.dataset.value.capitalize()} records are still loading. Try again in a moment.")
        return
    st.caption(f"{len(result)} records")

    if not len(result):
        st.info("No matching records.")
        return

    records = drilldown_export_records(result)
    st.dataframe(pd.DataFrame(records), hide_index=True, use_container_width=True)
    st.download_button(
        "Export to Excel",
        data=export_drilldown_bytes(result),
        file_name=drilldown_export_filename(result.dataset),
        mime=XLSX_MIME,
        key='export_drilldown',
    )


def open_pending_drilldown(state):
    """Resolve and show the drill-down requested in the previous run, if any."""
    pending = st.session_state.pop(DRILL_KEY, None)
    if pending is None:
        return
    context, dataset = pending
    result = resolve(context, dataset, state.selection, state.hierarchy,
                     state.records_for(dataset))
    show_drilldown(result, loading=state.is_loading(dataset))


# ============================================================================
# SECTIONS
# ============================================================================

def render_header(state, rows):
    title_col, export_col = st.columns([4, 1])
    with title_col:
        st.title(view_title(state.selection, state.hierarchy))
        st.caption(f"{REPORT_TITLE} · {state.selection.label} · {len(rows)} rows")
    with export_col:
        payload = table_export(state)
        st.download_button(
            "Export table",
            data=payload or b"",
            file_name=table_export_filename(state.selection),
            mime=XLSX_MIME,
            disabled=payload is None,
            key='export_table',
            help=None if payload else "No data available to export",
        )


def render_summary_cards(stats):
    columns = st.columns(len(SUMMARY_TILES))
    for col, (tile, label, attr, with_percent) in zip(columns, SUMMARY_TILES):
        value = getattr(stats, attr)
        with col:
            delta = f"{percent_of(value, stats.total_items)}%" if with_percent else None
            st.metric(label, f"{value:,}", delta=delta, delta_color='off')
            context, dataset = context_for_summary_tile(tile)
            st.button("View", key=f"tile_{tile}", on_click=request_drilldown,
                      args=(context, dataset), use_container_width=True)


def render_charts(state, stats):
    tab_overview, tab_discipline, tab_system = st.tabs(["Overview", "By Discipline", "By System"])

    with tab_overview:
        left, right = st.columns(2)
        with left:
            st.plotly_chart(chart_donut(overview_series(stats), "Progress"),
                            use_container_width=True)
        with right:
            st.plotly_chart(chart_donut(issues_series(stats), "Issues"),
                            use_container_width=True)

    with tab_discipline:
        if isinstance(state.selection, SubsystemScope):
            entries = discipline_stats(state.selection, state.hierarchy)
            if entries:
                st.plotly_chart(chart_stacked_progress(entries, "Progress by discipline"),
                                use_container_width=True)
                donut_cols = st.columns(min(len(entries), 3))
                for i, (discipline, counters) in enumerate(entries):
                    with donut_cols[i % len(donut_cols)]:
                        st.plotly_chart(chart_donut(counters_overview_series(counters), discipline),
                                        use_container_width=True, key=f"donut_{discipline}")
            else:
                st.info("No disciplines recorded for this subsystem.")
        else:
            st.info("Select a subsystem to see its disciplines.")

    with tab_system:
        entries = [(label, child) for _, label, child in child_stats(state.selection, state.hierarchy)]
        if entries:
            st.plotly_chart(chart_stacked_progress(entries, "Progress breakdown"),
                            use_container_width=True)
        else:
            st.info("No data available.")


def render_table(rows):
    st.markdown("### Details")
    if not rows:
        st.info("No data available for this selection.")
        return

    frame = pd.DataFrame([row.to_export_record() for row in rows])
    event = st.dataframe(
        frame,
        hide_index=True,
        use_container_width=True,
        on_select='rerun',
        selection_mode='single-row',
        key=TABLE_KEY,
    )

    selected = event.selection.rows if event is not None else []
    if not selected or selected[0] >= len(rows):
        st.caption("Select a row to drill into its items.")
        return

    row = rows[selected[0]]
    st.caption(f"{row.subsystem} / {row.discipline}")
    columns = st.columns(len(TABLE_DRILL_COLUMNS))
    for col, (column, label) in zip(columns, TABLE_DRILL_COLUMNS):
        target = context_for_table_cell(row, column)
        if target is None:
            continue
        context, dataset = target
        with col:
            st.button(label, key=f"cell_{column}", on_click=request_drilldown,
                      args=(context, dataset), use_container_width=True)


@st.fragment(run_every=2)
def watch_pending_loads():
    """Poll the background feeds; rerun the page once one has landed."""
    state = get_state()
    if state is None or not state.pending:
        return
    names = ", ".join(sorted(dataset.value for dataset in state.pending))
    st.caption(f"Loading {names} in the background...")
    if refresh_datasets() is not state:
        st.rerun()


# ============================================================================
# MAIN
# ============================================================================

def main():
    try:
        state = init_state()
    except DataLoadError as e:
        logger.error(f"Dashboard could not load data: {e}")
        st.error(f"Error loading data: {e}")
        st.stop()

    render_sidebar(state)
    if state.pending:
        watch_pending_loads()

    stats = aggregate(state.selection, state.hierarchy)
    rows = table_rows(state.selection, state.hierarchy, state.data.raw_rows)

    render_header(state, rows)
    render_summary_cards(stats)
    st.markdown("---")
    render_charts(state, stats)
    st.markdown("---")
    render_table(rows)

    open_pending_drilldown(state)


if __name__ == "__main__":
    main()
