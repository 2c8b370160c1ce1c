"""
SAPRA Dashboard - construction progress tracking for SAPRA project data.

This package turns the project's CSV feeds into:
- A System -> Subsystem -> Discipline hierarchy with progress counters
- Aggregated statistics for any selection (all systems, one system, one subsystem)
- Detail-table rows and item-level drill-down lists
- Excel exports of the table and of every drill-down
- An interactive Streamlit dashboard
"""

__version__ = "1.0.0"
__author__ = "SAPRA Dashboard Team"

# Core imports
from .core.config import *
from .core.utils import clean_text, normalize_key, parse_count, percent_of

# Models
from .models import (
    AllSystems,
    SystemScope,
    SubsystemScope,
    AggregatedStats,
    AppState,
    Dataset,
    Status,
)

# Data loading
from .data import DataLoadError, load_all, load_main_data

# Analysis
from .analysis import aggregate, build_hierarchy, table_rows, resolve

# Reports
from .reports import export_table, export_drilldown

__all__ = [
    # Version
    '__version__',

    # Utilities
    'clean_text',
    'normalize_key',
    'parse_count',
    'percent_of',

    # Models
    'AllSystems',
    'SystemScope',
    'SubsystemScope',
    'AggregatedStats',
    'AppState',
    'Dataset',
    'Status',

    # Data loading
    'DataLoadError',
    'load_all',
    'load_main_data',

    # Analysis
    'aggregate',
    'build_hierarchy',
    'table_rows',
    'resolve',

    # Reports
    'export_table',
    'export_drilldown',
]
