"""
Excel export for the SAPRA Dashboard.

Writes flat record lists to a single-sheet ``.xlsx`` workbook with a styled
header row.  Two exports exist:

* the detail table for the current selection (``export_table``), always
  generated in export mode so the file is complete for the selection, and
* the item list currently shown in the drill-down modal
  (``export_drilldown``).

Both return ``None`` without writing anything when there are no rows; the
caller tells the user there was nothing to export.  The ``*_bytes`` variants
return the workbook in memory for Streamlit download buttons.
"""

import io
import logging
from datetime import date
from pathlib import Path

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.utils.dataframe import dataframe_to_rows

from ..core.config import (
    REPORT_PREFIX, MAIN_SHEET_NAME, ITEM_SHEET_NAME, PUNCH_SHEET_NAME, HOLD_SHEET_NAME,
    HEADER_FILL_COLOR, HEADER_FONT_COLOR,
)
from ..core.utils import safe_token
from ..models.data_models import Dataset, SubsystemScope, SystemScope
from ..analysis.view_filter import table_rows

logger = logging.getLogger(__name__)

DATASET_SHEET_NAMES = {
    Dataset.ITEMS: ITEM_SHEET_NAME,
    Dataset.PUNCH: PUNCH_SHEET_NAME,
    Dataset.HOLD: HOLD_SHEET_NAME,
}


class ExcelReportWriter:
    """Single-sheet workbook writer with a styled header row."""

    def __init__(self, sheet_name):
        self.wb = Workbook()
        self.ws = self.wb.active
        # Excel caps sheet titles at 31 characters
        self.ws.title = sheet_name[:31]

        self.header_font = Font(bold=True, size=11, color=HEADER_FONT_COLOR)
        self.header_fill = PatternFill(start_color=HEADER_FILL_COLOR, end_color=HEADER_FILL_COLOR,
                                       fill_type="solid")

    def _style_header_row(self, row=1):
        for col in range(1, self.ws.max_column + 1):
            cell = self.ws.cell(row=row, column=col)
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.alignment = Alignment(horizontal='center', wrap_text=True)

    def _fit_columns(self):
        for idx, column_cells in enumerate(self.ws.columns, start=1):
            longest = max(len(str(c.value)) if c.value is not None else 0 for c in column_cells)
            self.ws.column_dimensions[get_column_letter(idx)].width = min(max(10, longest + 2), 60)

    def write_records(self, records):
        """Write header + one row per record (keys of the first record are the columns)."""
        df = pd.DataFrame.from_records(list(records))
        for row in dataframe_to_rows(df, index=False, header=True):
            self.ws.append(row)
        self._style_header_row()
        self.ws.freeze_panes = "A2"
        self._fit_columns()
        return self

    def save(self, path):
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.wb.save(path)
        return path

    def to_bytes(self):
        buffer = io.BytesIO()
        self.wb.save(buffer)
        return buffer.getvalue()


# ============================================================================
# FILE NAMES
# ============================================================================

def _today(today):
    return (today or date.today()).isoformat()


def scope_token(scope) -> str:
    if isinstance(scope, SystemScope):
        return f"System_{safe_token(scope.system_id)}"
    if isinstance(scope, SubsystemScope):
        return f"SubSystem_{safe_token(scope.subsystem_id)}"
    return "AllSystems"


def table_export_filename(scope, today=None) -> str:
    return f"{REPORT_PREFIX}_Report_{scope_token(scope)}_{_today(today)}.xlsx"


def drilldown_export_filename(dataset, today=None) -> str:
    return f"{REPORT_PREFIX}_{DATASET_SHEET_NAMES[dataset]}_{_today(today)}.xlsx"


# ============================================================================
# RECORD BUILDERS
# ============================================================================

def table_export_records(scope, data) -> list:
    """Export-mode table rows for ``scope`` as flat records."""
    rows = table_rows(scope, data.hierarchy, data.raw_rows, for_export=True)
    return [row.to_export_record() for row in rows]


def drilldown_export_records(result) -> list:
    return [item.to_export_record(index) for index, item in enumerate(result.items, start=1)]


# ============================================================================
# EXPORTS
# ============================================================================

def export_table(scope, data, output_dir=".", today=None, filename=None):
    """Write the selection's detail table to ``output_dir``.

    ``filename`` replaces the dated default name when given.

    Returns:
        Path of the written workbook, or None when the selection has no rows.
    """
    records = table_export_records(scope, data)
    if not records:
        logger.info(f"No data available to export for {scope_token(scope)}; nothing written")
        return None
    path = ExcelReportWriter(MAIN_SHEET_NAME).write_records(records).save(
        Path(output_dir) / (filename or table_export_filename(scope, today))
    )
    logger.info(f"Exported {len(records)} rows to {path}")
    return path


def export_table_bytes(scope, data):
    records = table_export_records(scope, data)
    if not records:
        logger.info(f"No data available to export for {scope_token(scope)}")
        return None
    return ExcelReportWriter(MAIN_SHEET_NAME).write_records(records).to_bytes()


def export_drilldown(result, output_dir=".", today=None):
    """Write the drill-down items to ``output_dir``; None when there are none."""
    records = drilldown_export_records(result)
    if not records:
        logger.info("No drill-down items to export; nothing written")
        return None
    sheet = DATASET_SHEET_NAMES[result.dataset]
    path = ExcelReportWriter(sheet).write_records(records).save(
        Path(output_dir) / drilldown_export_filename(result.dataset, today)
    )
    logger.info(f"Exported {len(records)} {result.dataset.value} records to {path}")
    return path


def export_drilldown_bytes(result):
    records = drilldown_export_records(result)
    if not records:
        return None
    return ExcelReportWriter(DATASET_SHEET_NAMES[result.dataset]).write_records(records).to_bytes()
