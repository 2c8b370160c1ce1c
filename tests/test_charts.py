"""
Unit tests for sapra_dashboard.visualization.charts
"""

import sys
import unittest
from pathlib import Path

import plotly.graph_objects as go

sys.path.insert(0, str(Path(__file__).parent.parent))

from sapra_dashboard.core.config import CHART_COLORS
from sapra_dashboard.models import AggregatedStats, DisciplineCounters
from sapra_dashboard.visualization.charts import (
    chart_donut, chart_stacked_progress, counters_overview_series, issues_series, overview_series,
)


class TestSeries(unittest.TestCase):

    def test_overview_series(self):
        series = overview_series(AggregatedStats(10, 6, 2, 1, 0, 2))
        self.assertEqual(series, [
            ('Completed', 6, CHART_COLORS['done']),
            ('Pending', 2, CHART_COLORS['pending']),
            ('Remaining', 2, CHART_COLORS['remaining']),
        ])

    def test_zero_slices_dropped(self):
        self.assertEqual([s[0] for s in issues_series(AggregatedStats(10, 6, 2, 1, 0, 2))], ['Punch'])
        self.assertEqual(overview_series(AggregatedStats()), [])

    def test_counters_series(self):
        series = counters_overview_series(DisciplineCounters(4, 4, 0))
        self.assertEqual([s[0] for s in series], ['Completed'])


class TestFigures(unittest.TestCase):

    def test_donut(self):
        fig = chart_donut(overview_series(AggregatedStats(10, 6, 2, 1, 0, 2)), "Progress")
        self.assertIsInstance(fig, go.Figure)
        self.assertEqual(len(fig.data), 1)
        self.assertEqual(list(fig.data[0].values), [6, 2, 2])
        self.assertEqual(fig.layout.title.text, "Progress")

    def test_empty_donut_has_annotation(self):
        fig = chart_donut([], "Issues")
        self.assertEqual(len(fig.data), 0)
        self.assertEqual(fig.layout.annotations[0].text, "No data")

    def test_stacked_progress(self):
        entries = [
            ('SS1 - Main Switchgear', AggregatedStats(14, 10, 2, 1, 1, 2)),
            ('SS2 - Transformers', AggregatedStats(8, 1, 3, 2, 0, 4)),
        ]
        fig = chart_stacked_progress(entries, "Progress breakdown")
        self.assertEqual([trace.name for trace in fig.data], ['Completed', 'Pending', 'Remaining'])
        self.assertEqual(list(fig.data[2].x), [2, 4])
        self.assertEqual(fig.layout.barmode, 'stack')

    def test_stacked_progress_accepts_discipline_counters(self):
        fig = chart_stacked_progress([('Elec', DisciplineCounters(10, 6, 2))])
        self.assertEqual(list(fig.data[2].x), [2])


if __name__ == '__main__':
    unittest.main()
