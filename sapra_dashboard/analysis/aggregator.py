"""
Aggregator - roll-up statistics for a selection scope.

    aggregate(AllSystems())          sum over every system of aggregate(SystemScope)
    aggregate(SystemScope(id))       sum over the subsystems the system references
    aggregate(SubsystemScope(id))    sum over the subsystem's disciplines

Unknown ids give all-zero stats.  ``remaining`` is re-derived from the summed
totals (``max(0, total - done - pending)``), never summed per row.

Everything here is a pure function of (scope, hierarchy).
"""

import logging
from typing import List, Tuple

from ..models.data_models import (
    AggregatedStats, AllSystems, DisciplineCounters, SubsystemScope, SystemScope,
)

logger = logging.getLogger(__name__)


def _sum(stats_iter) -> AggregatedStats:
    total = AggregatedStats()
    for stats in stats_iter:
        total = total + stats
    return total


def _subsystem_totals(subsystem_id, hierarchy) -> AggregatedStats:
    subsystem = hierarchy.subsystem(subsystem_id)
    if subsystem is None:
        return AggregatedStats()
    return _sum(AggregatedStats.from_counters(c) for c in subsystem.disciplines.values())


def _system_totals(system_id, hierarchy) -> AggregatedStats:
    system = hierarchy.system(system_id)
    if system is None:
        return AggregatedStats()
    return _sum(_subsystem_totals(ref.id, hierarchy) for ref in system.subs)


def _all_totals(hierarchy) -> AggregatedStats:
    return _sum(_system_totals(system_id, hierarchy) for system_id in hierarchy.systems)


def aggregate(scope, hierarchy) -> AggregatedStats:
    """Aggregated stats for ``scope``; never raises for unknown ids."""
    if isinstance(scope, SystemScope):
        stats = _system_totals(scope.system_id, hierarchy)
    elif isinstance(scope, SubsystemScope):
        stats = _subsystem_totals(scope.subsystem_id, hierarchy)
    else:
        stats = _all_totals(hierarchy)
    return stats.with_remaining()


def child_stats(scope, hierarchy) -> List[Tuple[str, str, AggregatedStats]]:
    """Breakdown one level below ``scope`` for the "By System" charts.

    Returns ``(id, label, stats)`` tuples with ``label = "<id> - <name>"``:
    one per system for AllSystems, one per referenced subsystem for a
    SystemScope, and the subsystem itself for a SubsystemScope.  Entries with
    no items are left out.
    """
    entries = []
    if isinstance(scope, SystemScope):
        system = hierarchy.system(scope.system_id)
        if system is not None:
            for ref in system.subs:
                subsystem = hierarchy.subsystem(ref.id)
                name = subsystem.name if subsystem else "N/A"
                entries.append((ref.id, f"{ref.id} - {name}",
                                aggregate(SubsystemScope(ref.id, system.id, ref.name), hierarchy)))
    elif isinstance(scope, SubsystemScope):
        subsystem = hierarchy.subsystem(scope.subsystem_id)
        if subsystem is not None:
            entries.append((subsystem.id, subsystem.title, aggregate(scope, hierarchy)))
    else:
        for system in hierarchy.systems.values():
            entries.append((system.id, f"{system.id} - {system.name}",
                            aggregate(SystemScope(system.id, system.name), hierarchy)))

    return [entry for entry in entries if entry[2].total_items > 0]


def discipline_stats(scope, hierarchy) -> List[Tuple[str, DisciplineCounters]]:
    """Per-discipline counters of a SubsystemScope (empty for other scopes)."""
    if not isinstance(scope, SubsystemScope):
        return []
    subsystem = hierarchy.subsystem(scope.subsystem_id)
    if subsystem is None:
        return []
    return list(subsystem.disciplines.items())


def is_all(scope) -> bool:
    return isinstance(scope, AllSystems) or scope is None
