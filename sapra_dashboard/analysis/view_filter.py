"""
View Filter - detail-table rows for a selection scope.

The table is generated from the retained raw rows, not from the hierarchy,
so every feed row keeps its own line (the hierarchy merges rows per
subsystem/discipline).
"""

import logging
from typing import List

from ..core.config import NOT_AVAILABLE
from ..core.utils import clean_text, parse_count, percent_of
from ..models.data_models import SubsystemScope, SystemScope, TableRow
from .aggregator import aggregate, is_all

logger = logging.getLogger(__name__)


def rows_in_scope(scope, hierarchy, raw_rows) -> list:
    """Raw rows belonging to ``scope`` (trimmed, exact subsystem id match)."""
    if isinstance(scope, SystemScope):
        system = hierarchy.system(scope.system_id)
        if system is None:
            return []
        sub_ids = set(system.subsystem_ids)
        return [row for row in raw_rows if clean_text(row.subsystem_id) in sub_ids]
    if isinstance(scope, SubsystemScope):
        return [row for row in raw_rows if clean_text(row.subsystem_id) == scope.subsystem_id]
    return list(raw_rows)


def to_table_row(row) -> TableRow:
    total_items = parse_count(row.total_item)
    completed = parse_count(row.total_done)
    return TableRow(
        system=clean_text(row.system_id) or NOT_AVAILABLE,
        system_name=clean_text(row.system_name) or NOT_AVAILABLE,
        subsystem=clean_text(row.subsystem_id) or NOT_AVAILABLE,
        subsystem_name=clean_text(row.subsystem_name) or NOT_AVAILABLE,
        discipline=clean_text(row.discipline) or NOT_AVAILABLE,
        total_items=total_items,
        completed=completed,
        pending=parse_count(row.total_pending),
        punch=parse_count(row.total_punch),
        hold_point=parse_count(row.total_hold),
        status_percent=percent_of(completed, total_items),
    )


def table_rows(scope, hierarchy, raw_rows, for_export=False) -> List[TableRow]:
    """Detail-table rows for ``scope``.

    Args:
        scope: AllSystems, SystemScope or SubsystemScope.
        hierarchy: Lookup tables from the hierarchy builder.
        raw_rows: Retained main-feed rows.
        for_export: Skip the empty-scope suppression so exports always carry
                    every row of the selection.

    Returns:
        One TableRow per raw row in scope.  On screen, a system or subsystem
        whose aggregate total is zero yields no rows at all.
    """
    if not for_export and not is_all(scope):
        if aggregate(scope, hierarchy).total_items == 0:
            return []

    return [to_table_row(row) for row in rows_in_scope(scope, hierarchy, raw_rows)]
