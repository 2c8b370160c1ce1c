"""
SAPRA Dashboard - Chart Library
===============================

Plotly figure builders for the dashboard.  The charts only consume series
that were already computed by the aggregation layer; nothing here reads the
feeds or the selection.

Series
------
``overview_series(stats)``  Completed / Pending / Remaining
``issues_series(stats)``    Punch / Hold Point

Slices with a zero value are dropped so empty categories don't show up as
0% wedges in the legend.

Figures
-------
``chart_donut(series, title)``  single donut with percent labels
``chart_stacked_progress(entries)``  horizontal stacked bar, one bar per
system / subsystem / discipline
"""

import plotly.graph_objects as go

from ..core.config import CHART_COLORS


def _apply_theme(fig: go.Figure) -> go.Figure:
    """Shared layout: transparent background, compact margins."""
    fig.update_layout(
        paper_bgcolor='rgba(0,0,0,0)',
        plot_bgcolor='rgba(0,0,0,0)',
        font=dict(family='Inter, sans-serif', size=12),
        margin=dict(l=20, r=20, t=50, b=20),
        legend=dict(orientation='h', yanchor='bottom', y=-0.2, font=dict(size=10)),
    )
    return fig


def overview_series(stats):
    """(label, value, colour) slices for the progress donut."""
    series = [
        ('Completed', stats.done, CHART_COLORS['done']),
        ('Pending', stats.pending, CHART_COLORS['pending']),
        ('Remaining', stats.remaining, CHART_COLORS['remaining']),
    ]
    return [s for s in series if s[1] > 0]


def issues_series(stats):
    series = [
        ('Punch', stats.punch, CHART_COLORS['punch']),
        ('Hold Point', stats.hold, CHART_COLORS['hold']),
    ]
    return [s for s in series if s[1] > 0]


def counters_overview_series(counters):
    """Progress slices for a single discipline's counters."""
    series = [
        ('Completed', counters.done, CHART_COLORS['done']),
        ('Pending', counters.pending, CHART_COLORS['pending']),
        ('Remaining', counters.remaining, CHART_COLORS['remaining']),
    ]
    return [s for s in series if s[1] > 0]


def chart_donut(series, title="", height=320) -> go.Figure:
    """Donut chart from (label, value, colour) slices.

    An empty series yields an annotated empty figure rather than an error.
    """
    fig = go.Figure()
    if series:
        labels, values, colors = zip(*series)
        fig.add_trace(go.Pie(
            labels=list(labels),
            values=list(values),
            marker=dict(colors=list(colors)),
            hole=0.55,
            textinfo='label+percent',
            hovertemplate='%{label}: %{value:,} (%{percent})<extra></extra>',
            sort=False,
        ))
    else:
        fig.add_annotation(text="No data", showarrow=False, font=dict(size=14, color='#94a3b8'))
        fig.update_xaxes(visible=False)
        fig.update_yaxes(visible=False)

    fig.update_layout(title=dict(text=title, x=0.0, font=dict(size=14)), height=height)
    return _apply_theme(fig)


def chart_stacked_progress(entries, title="", height=None) -> go.Figure:
    """Horizontal stacked bars of done / pending / remaining.

    Args:
        entries: ``(label, stats)`` pairs where ``stats`` has ``done``,
                 ``pending`` and ``remaining`` attributes.
    """
    labels = [label for label, _ in entries]
    fig = go.Figure()
    for name, attr, color in (
        ('Completed', 'done', CHART_COLORS['done']),
        ('Pending', 'pending', CHART_COLORS['pending']),
        ('Remaining', 'remaining', CHART_COLORS['remaining']),
    ):
        fig.add_trace(go.Bar(
            y=labels,
            x=[getattr(stats, attr) for _, stats in entries],
            name=name,
            orientation='h',
            marker_color=color,
            hovertemplate='%{y}<br>' + name + ': %{x:,}<extra></extra>',
        ))

    fig.update_layout(
        barmode='stack',
        title=dict(text=title, x=0.0, font=dict(size=14)),
        height=height or max(260, 40 * len(labels) + 120),
        yaxis=dict(autorange='reversed'),
    )
    return _apply_theme(fig)
