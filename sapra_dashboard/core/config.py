"""
Central Configuration Module for the SAPRA Dashboard.

=== PURPOSE ===
Single source of truth for feed locations, column mappings, display defaults,
chart colours and report naming.  Every other module imports from here rather
than hard-coding strings, so a change in the upstream CSV schema only needs an
edit in this file.

=== DATA FLOW ===
  1. The loader reads the four feed URLs (main summary, item details, punch
     items, hold-point items) via ``get_feed_urls()``.  Each URL can be
     overridden with an environment variable, and a plain filesystem path is
     accepted as well as an http(s) URL.
  2. COL_* constants name the header of every column the loader reads.
  3. CHART_COLORS drives the Plotly donuts in the visualization package.
  4. REPORT_* and *_SHEET_NAME constants feed the Excel export.

Contains all constants, column mappings and defaults.
"""

import os
import logging

logger = logging.getLogger(__name__)

# ==========================================
# FEED LOCATIONS
# ==========================================
# Default public feeds.  Override with SAPRA_DATA_URL, SAPRA_ITEMS_URL,
# SAPRA_PUNCH_URL and SAPRA_HOLD_URL (useful for local CSV snapshots).
DEFAULT_CSV_URL = "https://raw.githubusercontent.com/akarimvand/SAPRA2/main/DATA.CSV"
DEFAULT_ITEMS_CSV_URL = "https://raw.githubusercontent.com/akarimvand/SAPRA2/main/ITEMS.CSV"
DEFAULT_PUNCH_CSV_URL = "https://raw.githubusercontent.com/akarimvand/SAPRA2/main/PUNCH.CSV"
DEFAULT_HOLD_POINT_CSV_URL = "https://raw.githubusercontent.com/akarimvand/SAPRA2/main/HOLD_POINT.CSV"

CSV_URL = os.environ.get("SAPRA_DATA_URL", DEFAULT_CSV_URL)
ITEMS_CSV_URL = os.environ.get("SAPRA_ITEMS_URL", DEFAULT_ITEMS_CSV_URL)
PUNCH_CSV_URL = os.environ.get("SAPRA_PUNCH_URL", DEFAULT_PUNCH_CSV_URL)
HOLD_POINT_CSV_URL = os.environ.get("SAPRA_HOLD_URL", DEFAULT_HOLD_POINT_CSV_URL)

# Feed names used in logs, errors and AppState slots
FEED_MAIN = "main"
FEED_ITEMS = "items"
FEED_PUNCH = "punch"
FEED_HOLD = "hold"


def _env_float(name, default):
    """Read a float from the environment, falling back on bad values."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"[Config] Ignoring non-numeric {name}={raw!r}, using {default}")
        return default


# Seconds before an HTTP fetch is abandoned
REQUEST_TIMEOUT = _env_float("SAPRA_REQUEST_TIMEOUT", 30.0)

# One worker per feed; the four downloads are independent
LOAD_MAX_WORKERS = 4


def get_feed_urls():
    """Return the feed name -> location mapping, honouring env overrides.

    Read at call time (not import time) so tests and the CLI can point the
    loader at other sources by setting environment variables.
    """
    return {
        FEED_MAIN: os.environ.get("SAPRA_DATA_URL", CSV_URL),
        FEED_ITEMS: os.environ.get("SAPRA_ITEMS_URL", ITEMS_CSV_URL),
        FEED_PUNCH: os.environ.get("SAPRA_PUNCH_URL", PUNCH_CSV_URL),
        FEED_HOLD: os.environ.get("SAPRA_HOLD_URL", HOLD_POINT_CSV_URL),
    }


# ==========================================
# COLUMN MAPPINGS
# ==========================================
# Main summary feed: one row per (system, subsystem, discipline)
COL_SYSTEM = "SD_System"
COL_SYSTEM_NAME = "SD_System_Name"
COL_SUBSYSTEM = "SD_Sub_System"
COL_SUBSYSTEM_NAME = "SD_Subsystem_Name"
COL_DISCIPLINE = "discipline"
COL_TOTAL_ITEM = "TOTAL ITEM"
COL_TOTAL_DONE = "TOTAL DONE"
COL_TOTAL_PENDING = "TOTAL PENDING"
COL_TOTAL_PUNCH = "TOTAL NOT CLEAR PUNCH"
COL_TOTAL_HOLD = "TOTAL HOLD POINT"

# Item detail feed
COL_ITEM_SUBSYSTEM = "SD_Sub_System"
COL_ITEM_DISCIPLINE = "Discipline_Name"
COL_ITEM_TAG = "ITEM_Tag_NO"
COL_ITEM_TYPE = "ITEM_Type_Code"
COL_ITEM_DESCRIPTION = "ITEM_Description"
COL_ITEM_STATUS = "ITEM_Status"

# Punch and hold-point feeds spell the subsystem header in upper case
COL_PUNCH_SUBSYSTEM = "SD_SUB_SYSTEM"
COL_PUNCH_CATEGORY = "PL_Punch_Category"
COL_PUNCH_DESCRIPTION = "PL_Punch_Description"

COL_HOLD_SUBSYSTEM = "SD_SUB_SYSTEM"
COL_HP_PRIORITY = "HP_Priority"
COL_HP_DESCRIPTION = "HP_Description"
COL_HP_LOCATION = "HP_Location"

# ==========================================
# DISPLAY DEFAULTS
# ==========================================
UNKNOWN_SYSTEM_NAME = "Unknown System"
UNKNOWN_SUBSYSTEM_NAME = "Unknown Subsystem"
NOT_AVAILABLE = "N/A"
ALL_SYSTEMS_LABEL = "All Systems"

# ==========================================
# CHART PALETTE
# ==========================================
CHART_COLORS = {
    'done': '#4caf50',       # Green
    'pending': '#ffc107',    # Amber
    'remaining': '#2196f3',  # Blue
    'punch': '#f44336',      # Red
    'hold': '#9c27b0',       # Purple
}

# ==========================================
# REPORT SETTINGS
# ==========================================
REPORT_TITLE = "SAPRA Progress Report"
REPORT_PREFIX = "SAPRA"
MAIN_SHEET_NAME = "SAPRA Report"
ITEM_SHEET_NAME = "Item_Details"
PUNCH_SHEET_NAME = "Punch_Details"
HOLD_SHEET_NAME = "Hold_Point_Details"

# Header styling shared by every exported sheet
HEADER_FILL_COLOR = "004C97"
HEADER_FONT_COLOR = "FFFFFF"
