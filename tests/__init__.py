"""
SAPRA Dashboard Test Suite

This package contains unit tests and fixtures for the SAPRA Dashboard.

Run tests with:
    pytest tests/
    pytest tests/test_aggregator.py -v
    pytest tests/test_drilldown.py::TestSummaryDrilldown -v
"""

__version__ = "1.0.0"
