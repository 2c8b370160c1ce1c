"""
Models module for the SAPRA Dashboard.

Contains the typed records, selection scopes and application state.
"""

from .data_models import (
    DisciplineCounters,
    SubsystemRef,
    Subsystem,
    System,
    Hierarchy,
    RawRow,
    ProcessedData,
    DetailItem,
    PunchItem,
    HoldPointItem,
    Item,
    AllSystems,
    SystemScope,
    SubsystemScope,
    Selection,
    AggregatedStats,
    TableRow,
    Status,
    Dataset,
    SummaryContext,
    TableContext,
    DrillContext,
    DrillDownResult,
    AppState,
    clamp_remaining,
)

__all__ = [
    # Hierarchy
    'DisciplineCounters',
    'SubsystemRef',
    'Subsystem',
    'System',
    'Hierarchy',
    'RawRow',
    'ProcessedData',
    # Drill-down feeds
    'DetailItem',
    'PunchItem',
    'HoldPointItem',
    'Item',
    # Selection
    'AllSystems',
    'SystemScope',
    'SubsystemScope',
    'Selection',
    # Results
    'AggregatedStats',
    'TableRow',
    'Status',
    'Dataset',
    'SummaryContext',
    'TableContext',
    'DrillContext',
    'DrillDownResult',
    'AppState',
    'clamp_remaining',
]
