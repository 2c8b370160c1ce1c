"""
Reports module for the SAPRA Dashboard.

Contains the Excel export of the detail table and drill-down lists.
"""

from .excel_export import (
    ExcelReportWriter,
    export_table,
    export_table_bytes,
    export_drilldown,
    export_drilldown_bytes,
    table_export_filename,
    drilldown_export_filename,
)

__all__ = [
    'ExcelReportWriter',
    'export_table',
    'export_table_bytes',
    'export_drilldown',
    'export_drilldown_bytes',
    'table_export_filename',
    'drilldown_export_filename',
]
