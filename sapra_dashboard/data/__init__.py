"""
Data module for the SAPRA Dashboard.

Contains the CSV feed loader.
"""

from .loader import (
    DataLoadError,
    fetch_csv,
    load_main_data,
    load_detailed_items,
    load_punch_items,
    load_hold_point_items,
    load_main_state,
    load_secondary,
    start_secondary_loads,
    apply_finished_loads,
    load_all,
)

__all__ = [
    'DataLoadError',
    'fetch_csv',
    'load_main_data',
    'load_detailed_items',
    'load_punch_items',
    'load_hold_point_items',
    'load_main_state',
    'load_secondary',
    'start_secondary_loads',
    'apply_finished_loads',
    'load_all',
]
