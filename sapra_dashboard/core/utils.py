"""
Utility functions for text normalisation and counter parsing.
"""

import re
import math
import logging
import pandas as pd

logger = logging.getLogger(__name__)

# Leading integer, same reading as a lenient "parseInt": "12", " 7 ", "3.9" -> 3, "5 items" -> 5
_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


def clean_text(value):
    """Trim a raw cell value to a string; missing cells become ''"""
    if value is None:
        return ""
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        # pd.isna on list-likes returns an array; those are not cell values
        pass
    return str(value).replace('\xa0', ' ').strip()


def normalize_key(value):
    """Normalise a join key (subsystem id, discipline, status) for comparison.

    Every case-insensitive match between the feeds goes through this one
    function, both when records are loaded and when a drill-down is resolved.
    """
    return clean_text(value).lower()


def validate_columns(df, required_cols, feed=""):
    """Return the required columns missing from ``df`` (logged as a warning)"""
    missing = [c for c in required_cols if c not in df.columns]
    if missing:
        logger.warning(f"[{feed or 'feed'}] Missing columns: {missing}. Affected fields default to empty.")
    return missing


def parse_count(value):
    """Parse a counter transported as text; anything unparseable is 0.

    >>> parse_count("12")
    12
    >>> parse_count("n/a")
    0
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return 0 if pd.isna(value) else int(value)
    text = clean_text(value)
    if not text:
        return 0
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def percent_of(part, total):
    """Whole-number share of ``part`` in ``total``; 0 when total is 0.

    Halves round up (``round_half_up``): 12.5% shows as 13%.
    """
    if not total:
        return 0
    return round_half_up(100 * part / total)


def round_half_up(value):
    """Round to the nearest int with .5 going towards +infinity"""
    return math.floor(value + 0.5)


def safe_token(value):
    """Replace every non-alphanumeric character with '_' (file name segments)"""
    return re.sub(r'[^a-zA-Z0-9]', '_', str(value))
