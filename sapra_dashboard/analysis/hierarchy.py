"""
Hierarchy Builder.

Turns the ordered main-feed rows into the two lookup tables every query
reads:

    systems     system id    -> System(id, name, subs=[(sub id, sub name), ...])
    subsystems  subsystem id -> Subsystem(id, name, system_id, {discipline: counters})

Rules
-----
* A row needs a system id, a subsystem id and a discipline; rows missing any
  of them are skipped without complaint.
* All strings are trimmed.  Missing names fall back to "Unknown System" /
  "Unknown Subsystem".
* A system's subsystem list keeps first-seen order and never holds the same
  id twice (exact, case-sensitive comparison).
* A subsystem is owned by the system it was first seen under.  If the feed
  later lists the same subsystem id under another system, the reference is
  still added to that other system's list but ownership does not move.
* A repeated (subsystem, discipline) pair replaces the earlier counters while
  keeping its original position.
"""

import logging
from types import MappingProxyType

from ..core.config import UNKNOWN_SYSTEM_NAME, UNKNOWN_SUBSYSTEM_NAME
from ..core.utils import clean_text, parse_count
from ..models.data_models import (
    DisciplineCounters, Hierarchy, ProcessedData, Subsystem, SubsystemRef, System,
)

logger = logging.getLogger(__name__)


def counters_from_row(row) -> DisciplineCounters:
    """Parse the five counters of a RawRow (unparseable -> 0)."""
    return DisciplineCounters(
        total=parse_count(row.total_item),
        done=parse_count(row.total_done),
        pending=parse_count(row.total_pending),
        punch=parse_count(row.total_punch),
        hold=parse_count(row.total_hold),
    )


def build_hierarchy(raw_rows) -> ProcessedData:
    """Build the Hierarchy from RawRows and retain the rows alongside it.

    Args:
        raw_rows: Iterable of RawRow in feed order.

    Returns:
        ProcessedData with read-only lookup tables and the full row tuple.
    """
    rows = tuple(raw_rows)

    system_info = {}     # id -> {'name': str, 'subs': [SubsystemRef]}
    subsystem_info = {}  # id -> {'name': str, 'system_id': str, 'disciplines': {}}
    skipped = 0
    conflicts = 0

    for row in rows:
        system_id = clean_text(row.system_id)
        sub_id = clean_text(row.subsystem_id)
        discipline = clean_text(row.discipline)
        if not system_id or not sub_id or not discipline:
            skipped += 1
            continue

        system_name = clean_text(row.system_name) or UNKNOWN_SYSTEM_NAME
        sub_name = clean_text(row.subsystem_name) or UNKNOWN_SUBSYSTEM_NAME

        system = system_info.setdefault(system_id, {'name': system_name, 'subs': []})
        if not any(ref.id == sub_id for ref in system['subs']):
            system['subs'].append(SubsystemRef(id=sub_id, name=sub_name))

        subsystem = subsystem_info.get(sub_id)
        if subsystem is None:
            subsystem = {'name': sub_name, 'system_id': system_id, 'disciplines': {}}
            subsystem_info[sub_id] = subsystem
        elif subsystem['system_id'] != system_id:
            conflicts += 1

        subsystem['disciplines'][discipline] = counters_from_row(row)

    if skipped:
        logger.debug(f"Skipped {skipped} rows without system/subsystem/discipline")
    if conflicts:
        logger.info(
            f"{conflicts} rows list a subsystem under a second system; "
            f"first-seen system kept as owner"
        )

    systems = {
        sid: System(id=sid, name=info['name'], subs=tuple(info['subs']))
        for sid, info in system_info.items()
    }
    subsystems = {
        sub_id: Subsystem(
            id=sub_id,
            name=info['name'],
            system_id=info['system_id'],
            disciplines=MappingProxyType(dict(info['disciplines'])),
        )
        for sub_id, info in subsystem_info.items()
    }

    hierarchy = Hierarchy(
        systems=MappingProxyType(systems),
        subsystems=MappingProxyType(subsystems),
    )
    return ProcessedData(hierarchy=hierarchy, raw_rows=rows)
