"""
Drill-down Resolver.

Given where a click came from and which dataset it targets, filter the raw
item list down to exactly the rows the click implies, and derive the modal
title.

Pipeline
--------
::

    items --> location predicate --> status predicate (items dataset only) --> result
                  |                          |
        TableContext: subsystem AND     TOTAL : keep all
          discipline of the clicked     OTHER : status empty or not done/pending
          row (selection ignored)       else  : status == requested status
        SummaryContext: current
          selection (all / system /
          subsystem)

All comparisons go through ``normalize_key`` (trim + lower case).  Items whose
subsystem or discipline strings don't match the hierarchy's are simply not
returned; the feeds carry no foreign keys to repair them with.

Punch and hold-point records have no status field, so their pipeline is the
location predicate alone.  Which stages run is decided by the dataset
variant table ``DATASET_VARIANTS``.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from ..core.utils import normalize_key
from ..models.data_models import (
    Dataset, DrillDownResult, Status,
    SubsystemScope, SummaryContext, SystemScope, TableContext,
)

logger = logging.getLogger(__name__)

Predicate = Callable[[object], bool]

DONE_KEY = "done"
PENDING_KEY = "pending"


@dataclass(frozen=True)
class DatasetVariant:
    """How a dataset's records are filtered."""
    has_status: bool


DATASET_VARIANTS = {
    Dataset.ITEMS: DatasetVariant(has_status=True),
    Dataset.PUNCH: DatasetVariant(has_status=False),
    Dataset.HOLD: DatasetVariant(has_status=False),
}


def _keep_all(item) -> bool:
    return True


def _keep_none(item) -> bool:
    return False


def location_filter(context, scope, hierarchy) -> Tuple[Predicate, str]:
    """Predicate on an item's subsystem/discipline, plus the title it implies."""
    label = context.status.value

    if isinstance(context, TableContext):
        sub_key = normalize_key(context.row.subsystem)
        disc_key = normalize_key(context.row.discipline)

        def _in_row(item):
            return item.subsystem_key == sub_key and item.discipline_key == disc_key

        title = f"{label} items in {context.row.subsystem} / {context.row.discipline}"
        return _in_row, title

    if isinstance(scope, SystemScope):
        system = hierarchy.system(scope.system_id)
        title = f"{label} items in System: {scope.label}"
        if system is None:
            return _keep_none, title
        sub_keys = frozenset(normalize_key(sub_id) for sub_id in system.subsystem_ids)

        def _in_system(item):
            key = item.subsystem_key
            return bool(key) and key in sub_keys

        return _in_system, title

    if isinstance(scope, SubsystemScope):
        sub_key = normalize_key(scope.subsystem_id)

        def _in_subsystem(item):
            return item.subsystem_key == sub_key

        return _in_subsystem, f"{label} items in Subsystem: {scope.label}"

    return _keep_all, f"{label} items (All Systems)"


def status_filter(status) -> Optional[Predicate]:
    """Predicate on a DetailItem's status; None means no filtering."""
    if status is Status.TOTAL:
        return None

    if status is Status.OTHER:
        def _is_other(item):
            key = normalize_key(item.status)
            return not key or key not in (DONE_KEY, PENDING_KEY)
        return _is_other

    wanted = normalize_key(status.value)

    def _has_status(item):
        return normalize_key(item.status) == wanted

    return _has_status


def resolve(context, dataset, scope, hierarchy, items) -> DrillDownResult:
    """Filter ``items`` for a drill-down click.

    Args:
        context: SummaryContext or TableContext.
        dataset: Which list ``items`` is (Dataset.ITEMS / PUNCH / HOLD).
        scope: Current selection (only used for SummaryContext).
        hierarchy: Lookup tables, for system -> subsystem ids.
        items: The raw records of ``dataset``.

    Returns:
        DrillDownResult with the matching items (feed order) and a title.
    """
    variant = DATASET_VARIANTS[dataset]
    predicates = []

    where, title = location_filter(context, scope, hierarchy)
    predicates.append(where)

    if variant.has_status:
        by_status = status_filter(context.status)
        if by_status is not None:
            predicates.append(by_status)

    matched = tuple(item for item in items if all(p(item) for p in predicates))
    logger.debug(f"Drill-down '{title}' on {dataset.value}: {len(matched)}/{len(items)} items")
    return DrillDownResult(items=matched, title=title, dataset=dataset)


# ============================================================================
# CLICK -> CONTEXT MAPPING
# ============================================================================

# Table column -> (status, dataset).  The progress column opens the remaining bucket.
TABLE_COLUMN_TARGETS = {
    'total_items': (Status.TOTAL, Dataset.ITEMS),
    'completed': (Status.DONE, Dataset.ITEMS),
    'pending': (Status.PENDING, Dataset.ITEMS),
    'punch': (Status.PUNCH, Dataset.PUNCH),
    'hold_point': (Status.HOLD, Dataset.HOLD),
    'status_percent': (Status.OTHER, Dataset.ITEMS),
}

# Summary tile -> (status, dataset)
SUMMARY_TILE_TARGETS = {
    'total': (Status.TOTAL, Dataset.ITEMS),
    'completed': (Status.DONE, Dataset.ITEMS),
    'pending': (Status.PENDING, Dataset.ITEMS),
    'remaining': (Status.OTHER, Dataset.ITEMS),
    'punch': (Status.PUNCH, Dataset.PUNCH),
    'hold': (Status.HOLD, Dataset.HOLD),
}


def context_for_table_cell(row, column) -> Optional[Tuple[TableContext, Dataset]]:
    """Context for a click on ``column`` of ``row``; None for non-clickable columns."""
    target = TABLE_COLUMN_TARGETS.get(column)
    if target is None:
        return None
    status, dataset = target
    return TableContext(row=row, status=status), dataset


def context_for_summary_tile(tile) -> Tuple[SummaryContext, Dataset]:
    """Context for a summary tile click.

    Raises:
        KeyError: ``tile`` is not one of SUMMARY_TILE_TARGETS.
    """
    status, dataset = SUMMARY_TILE_TARGETS[tile]
    return SummaryContext(status=status), dataset
