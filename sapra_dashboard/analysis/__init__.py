"""
Analysis module for the SAPRA Dashboard.

Hierarchy builder, aggregator, view filter and drill-down resolver.  Every
public function here is pure: same inputs, same output.
"""

from .hierarchy import build_hierarchy, counters_from_row
from .aggregator import aggregate, child_stats, discipline_stats
from .view_filter import table_rows, rows_in_scope
from .drilldown import (
    resolve,
    location_filter,
    status_filter,
    context_for_table_cell,
    context_for_summary_tile,
    DATASET_VARIANTS,
)

__all__ = [
    'build_hierarchy',
    'counters_from_row',
    'aggregate',
    'child_stats',
    'discipline_stats',
    'table_rows',
    'rows_in_scope',
    'resolve',
    'location_filter',
    'status_filter',
    'context_for_table_cell',
    'context_for_summary_tile',
    'DATASET_VARIANTS',
]
