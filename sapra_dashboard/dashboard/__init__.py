"""
SAPRA Dashboard - Streamlit Web Interface.

Interactive progress dashboard with:
- Searchable System / Subsystem navigation tree
- Summary cards with per-status drill-down
- Progress and issue charts
- Detail table with cell drill-down and Excel export
"""

from .app import run_dashboard, get_dashboard_path
from .navigation import TreeNode, build_tree, view_title

__all__ = ['run_dashboard', 'get_dashboard_path', 'TreeNode', 'build_tree', 'view_title']
