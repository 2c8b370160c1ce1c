"""
Data models for the SAPRA progress dashboard.

This module defines the **schema layer** of the dashboard: typed, frozen
dataclasses for every entity that flows from the CSV feeds through the
aggregation layer to the presentation layer.

Role in the dashboard
---------------------
The loader reads the feeds with pandas, but everything past the loader works
on these records rather than DataFrames.  The aggregation layer only ever
reads them, which is what lets every query be a pure function of
(selection, hierarchy, records).

Entity overview
---------------
::

    RawRow              one main-feed record, text fields kept unmodified
    DisciplineCounters  total/done/pending/punch/hold for one (subsystem, discipline)
    Subsystem           id, name, owning system, discipline -> counters
    System              id, name, ordered subsystem references
    Hierarchy           system id -> System, subsystem id -> Subsystem
    ProcessedData       Hierarchy + the retained RawRow sequence

    DetailItem / PunchItem / HoldPointItem
                        drill-down feeds, joined to the hierarchy by
                        case-insensitive subsystem/discipline strings only

    AllSystems | SystemScope | SubsystemScope
                        the selection (view scope) driving every query

    AggregatedStats     roll-up counters for a scope
    TableRow            one detail-table line for a scope

    SummaryContext | TableContext
                        where a drill-down click came from

    AppState            the whole session state, replaced on every update

Remaining-work convention
-------------------------
``remaining`` is always derived as ``max(0, total - done - pending)``.  Data
where ``done + pending`` exceeds ``total`` is a data-quality issue in the
source, not an error; it is clamped to zero.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Optional, Tuple, Union

from ..core.config import (
    ALL_SYSTEMS_LABEL, NOT_AVAILABLE,
    FEED_ITEMS, FEED_PUNCH, FEED_HOLD,
    COL_SYSTEM, COL_SYSTEM_NAME, COL_SUBSYSTEM, COL_SUBSYSTEM_NAME, COL_DISCIPLINE,
    COL_TOTAL_ITEM, COL_TOTAL_DONE, COL_TOTAL_PENDING, COL_TOTAL_PUNCH, COL_TOTAL_HOLD,
)
from ..core.utils import normalize_key


def clamp_remaining(total, done, pending):
    """Outstanding work, never negative"""
    return max(0, total - done - pending)


# ============================================================================
# HIERARCHY
# ============================================================================

@dataclass(frozen=True)
class DisciplineCounters:
    """Counters for a single (subsystem, discipline) pair."""
    total: int = 0
    done: int = 0
    pending: int = 0
    punch: int = 0
    hold: int = 0

    @property
    def remaining(self) -> int:
        return clamp_remaining(self.total, self.done, self.pending)


@dataclass(frozen=True)
class SubsystemRef:
    """A (subsystem id, subsystem name) reference held by a System."""
    id: str
    name: str


@dataclass(frozen=True)
class Subsystem:
    """A subsystem and its per-discipline counters.

    ``disciplines`` preserves first-seen order from the source feed.
    ``system_id`` is the system the subsystem was first seen under.
    """
    id: str
    name: str
    system_id: str
    disciplines: Mapping[str, DisciplineCounters] = field(default_factory=dict)

    @property
    def title(self) -> str:
        return f"{self.id} - {self.name}"


@dataclass(frozen=True)
class System:
    """A system and its ordered subsystem references (no duplicate ids)."""
    id: str
    name: str
    subs: Tuple[SubsystemRef, ...] = ()

    @property
    def subsystem_ids(self) -> Tuple[str, ...]:
        return tuple(ref.id for ref in self.subs)


@dataclass(frozen=True)
class Hierarchy:
    """Lookup tables built once per load.

    Both mappings are read-only views; build a new Hierarchy rather than
    editing one in place.
    """
    systems: Mapping[str, System] = field(default_factory=lambda: MappingProxyType({}))
    subsystems: Mapping[str, Subsystem] = field(default_factory=lambda: MappingProxyType({}))

    def system(self, system_id) -> Optional[System]:
        return self.systems.get(system_id) if system_id is not None else None

    def subsystem(self, subsystem_id) -> Optional[Subsystem]:
        return self.subsystems.get(subsystem_id) if subsystem_id is not None else None


# ============================================================================
# RAW FEED RECORDS
# ============================================================================

@dataclass(frozen=True)
class RawRow:
    """One main-feed record exactly as transported (text, possibly missing).

    Counters stay as text here; they are parsed where they are used so that
    the retained rows remain a faithful copy of the feed.
    """
    system_id: Optional[str] = None
    system_name: Optional[str] = None
    subsystem_id: Optional[str] = None
    subsystem_name: Optional[str] = None
    discipline: Optional[str] = None
    total_item: Optional[str] = None
    total_done: Optional[str] = None
    total_pending: Optional[str] = None
    total_punch: Optional[str] = None
    total_hold: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, object]) -> "RawRow":
        """Build from a header-keyed CSV record; absent or blank cells become None."""
        def _get(col):
            value = record.get(col)
            if value is None:
                return None
            text = str(value)
            return text if text != "" else None

        return cls(
            system_id=_get(COL_SYSTEM),
            system_name=_get(COL_SYSTEM_NAME),
            subsystem_id=_get(COL_SUBSYSTEM),
            subsystem_name=_get(COL_SUBSYSTEM_NAME),
            discipline=_get(COL_DISCIPLINE),
            total_item=_get(COL_TOTAL_ITEM),
            total_done=_get(COL_TOTAL_DONE),
            total_pending=_get(COL_TOTAL_PENDING),
            total_punch=_get(COL_TOTAL_PUNCH),
            total_hold=_get(COL_TOTAL_HOLD),
        )


@dataclass(frozen=True)
class ProcessedData:
    """Output of the hierarchy builder: lookup tables plus every raw row."""
    hierarchy: Hierarchy = field(default_factory=Hierarchy)
    raw_rows: Tuple[RawRow, ...] = ()


@dataclass(frozen=True)
class DetailItem:
    """One inspection item from the item-detail feed."""
    subsystem: str = ""
    discipline: str = ""
    tag_no: str = ""
    type_code: str = ""
    description: str = ""
    status: str = ""

    @property
    def subsystem_key(self) -> str:
        return normalize_key(self.subsystem)

    @property
    def discipline_key(self) -> str:
        return normalize_key(self.discipline)

    def to_export_record(self, index: int) -> Dict[str, object]:
        return {
            '#': index,
            'Subsystem': self.subsystem,
            'Discipline': self.discipline,
            'TagNo': self.tag_no,
            'TypeCode': self.type_code,
            'Description': self.description,
            'Status': self.status,
        }


@dataclass(frozen=True)
class PunchItem:
    """One open punch from the punch feed (no status field)."""
    subsystem: str = ""
    discipline: str = ""
    tag_no: str = ""
    type_code: str = ""
    punch_category: str = ""
    punch_description: str = ""

    @property
    def subsystem_key(self) -> str:
        return normalize_key(self.subsystem)

    @property
    def discipline_key(self) -> str:
        return normalize_key(self.discipline)

    def to_export_record(self, index: int) -> Dict[str, object]:
        return {
            '#': index,
            'Subsystem': self.subsystem,
            'Discipline': self.discipline,
            'TagNo': self.tag_no,
            'TypeCode': self.type_code or NOT_AVAILABLE,
            'PunchCategory': self.punch_category,
            'PunchDescription': self.punch_description,
        }


@dataclass(frozen=True)
class HoldPointItem:
    """One hold point from the hold-point feed (no status field)."""
    subsystem: str = ""
    discipline: str = ""
    tag_no: str = ""
    type_code: str = ""
    hp_priority: str = ""
    hp_description: str = ""
    hp_location: str = ""

    @property
    def subsystem_key(self) -> str:
        return normalize_key(self.subsystem)

    @property
    def discipline_key(self) -> str:
        return normalize_key(self.discipline)

    def to_export_record(self, index: int) -> Dict[str, object]:
        return {
            '#': index,
            'Subsystem': self.subsystem,
            'Discipline': self.discipline,
            'TagNo': self.tag_no,
            'TypeCode': self.type_code or NOT_AVAILABLE,
            'HPPriority': self.hp_priority or NOT_AVAILABLE,
            'HPDescription': self.hp_description or NOT_AVAILABLE,
            'HPLocation': self.hp_location or NOT_AVAILABLE,
        }


Item = Union[DetailItem, PunchItem, HoldPointItem]


# ============================================================================
# SELECTION (VIEW SCOPE)
# ============================================================================

@dataclass(frozen=True)
class AllSystems:
    """Every system in the hierarchy."""
    name: str = ALL_SYSTEMS_LABEL

    @property
    def label(self) -> str:
        return self.name


@dataclass(frozen=True)
class SystemScope:
    """A single system; ``name`` is the label shown in titles."""
    system_id: str
    name: str = ""

    @property
    def label(self) -> str:
        return self.name or self.system_id


@dataclass(frozen=True)
class SubsystemScope:
    """A single subsystem and the system it was selected under."""
    subsystem_id: str
    system_id: Optional[str] = None
    name: str = ""

    @property
    def label(self) -> str:
        return self.name or self.subsystem_id


Selection = Union[AllSystems, SystemScope, SubsystemScope]


# ============================================================================
# QUERY RESULTS
# ============================================================================

@dataclass(frozen=True)
class AggregatedStats:
    """Roll-up counters for a scope.

    Instances are values: summing produces a new object and ``remaining`` is
    re-derived by ``with_remaining`` once summing is finished.
    """
    total_items: int = 0
    done: int = 0
    pending: int = 0
    punch: int = 0
    hold: int = 0
    remaining: int = 0

    def __add__(self, other: "AggregatedStats") -> "AggregatedStats":
        if not isinstance(other, AggregatedStats):
            return NotImplemented
        return AggregatedStats(
            total_items=self.total_items + other.total_items,
            done=self.done + other.done,
            pending=self.pending + other.pending,
            punch=self.punch + other.punch,
            hold=self.hold + other.hold,
            remaining=self.remaining + other.remaining,
        )

    @classmethod
    def from_counters(cls, counters: DisciplineCounters) -> "AggregatedStats":
        return cls(
            total_items=counters.total,
            done=counters.done,
            pending=counters.pending,
            punch=counters.punch,
            hold=counters.hold,
        )

    def with_remaining(self) -> "AggregatedStats":
        return replace(self, remaining=clamp_remaining(self.total_items, self.done, self.pending))

    def to_dict(self) -> Dict[str, int]:
        return {
            'totalItems': self.total_items,
            'done': self.done,
            'pending': self.pending,
            'punch': self.punch,
            'hold': self.hold,
            'remaining': self.remaining,
        }


@dataclass(frozen=True)
class TableRow:
    """One line of the detail table."""
    system: str
    system_name: str
    subsystem: str
    subsystem_name: str
    discipline: str
    total_items: int = 0
    completed: int = 0
    pending: int = 0
    punch: int = 0
    hold_point: int = 0
    status_percent: int = 0

    def to_export_record(self) -> Dict[str, object]:
        """Self-describing columns in the order the table shows them."""
        return {
            'System': self.system,
            'SystemName': self.system_name,
            'SubSystem': self.subsystem,
            'SubSystemName': self.subsystem_name,
            'Discipline': self.discipline,
            'TotalItems': self.total_items,
            'Completed': self.completed,
            'Pending': self.pending,
            'Punch': self.punch,
            'HoldPoint': self.hold_point,
            'ProgressPercent': f"{self.status_percent}%",
        }


# ============================================================================
# DRILL-DOWN
# ============================================================================

class Status(Enum):
    """Which bucket a drill-down click asks for.  OTHER is the remaining bucket."""
    TOTAL = "TOTAL"
    DONE = "DONE"
    PENDING = "PENDING"
    PUNCH = "PUNCH"
    HOLD = "HOLD"
    OTHER = "OTHER"


class Dataset(Enum):
    """Which raw item list a drill-down reads."""
    ITEMS = FEED_ITEMS
    PUNCH = FEED_PUNCH
    HOLD = FEED_HOLD


@dataclass(frozen=True)
class SummaryContext:
    """Click on an aggregate tile: filter by the current selection."""
    status: Status


@dataclass(frozen=True)
class TableContext:
    """Click on a detail-table cell: filter by that row's subsystem/discipline."""
    row: TableRow
    status: Status


DrillContext = Union[SummaryContext, TableContext]


@dataclass(frozen=True)
class DrillDownResult:
    """Items and title for the drill-down modal."""
    items: Tuple[Item, ...] = ()
    title: str = ""
    dataset: Dataset = Dataset.ITEMS

    def __len__(self):
        return len(self.items)


# ============================================================================
# APPLICATION STATE
# ============================================================================

@dataclass(frozen=True)
class AppState:
    """Everything the dashboard holds for a session.

    Updates never mutate: ``with_selection`` / ``with_dataset`` return a new
    state and the caller swaps it in.  ``pending`` lists the drill-down
    datasets still loading in the background; a late load only replaces its
    own slot.
    """
    data: ProcessedData = field(default_factory=ProcessedData)
    items: Tuple[DetailItem, ...] = ()
    punch: Tuple[PunchItem, ...] = ()
    hold: Tuple[HoldPointItem, ...] = ()
    selection: Selection = field(default_factory=AllSystems)
    pending: FrozenSet[Dataset] = frozenset()

    @property
    def hierarchy(self) -> Hierarchy:
        return self.data.hierarchy

    def with_selection(self, selection: Selection) -> "AppState":
        return replace(self, selection=selection)

    def with_dataset(self, dataset: Dataset, records) -> "AppState":
        slot = {Dataset.ITEMS: 'items', Dataset.PUNCH: 'punch', Dataset.HOLD: 'hold'}[dataset]
        return replace(self, pending=self.pending - {dataset}, **{slot: tuple(records)})

    def is_loading(self, dataset: Dataset) -> bool:
        return dataset in self.pending

    def records_for(self, dataset: Dataset) -> Tuple[Item, ...]:
        if dataset is Dataset.ITEMS:
            return self.items
        if dataset is Dataset.PUNCH:
            return self.punch
        return self.hold
