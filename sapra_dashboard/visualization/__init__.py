"""
Visualization module for the SAPRA Dashboard.

Plotly chart builders fed by precomputed series.
"""

from .charts import (
    overview_series,
    issues_series,
    counters_overview_series,
    chart_donut,
    chart_stacked_progress,
)

__all__ = [
    'overview_series',
    'issues_series',
    'counters_overview_series',
    'chart_donut',
    'chart_stacked_progress',
]
