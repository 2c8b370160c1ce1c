"""
Core module for the SAPRA Dashboard.

Contains configuration and base utilities.
"""

from sapra_dashboard.core.config import *
from sapra_dashboard.core.utils import (
    clean_text,
    normalize_key,
    validate_columns,
    parse_count,
    percent_of,
    round_half_up,
    safe_token,
)

__all__ = [
    # Utils
    'clean_text',
    'normalize_key',
    'validate_columns',
    'parse_count',
    'percent_of',
    'round_half_up',
    'safe_token',
]
