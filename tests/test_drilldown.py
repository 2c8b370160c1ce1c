"""
Unit tests for sapra_dashboard.analysis.drilldown

Summary-tile clicks filter by the current selection; table-cell clicks
filter by the clicked row's subsystem and discipline only.
"""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sapra_dashboard.analysis.drilldown import (
    context_for_summary_tile, context_for_table_cell, resolve, status_filter,
)
from sapra_dashboard.models import (
    AllSystems, Dataset, DetailItem, Status, SubsystemScope, SummaryContext, SystemScope,
    TableContext, TableRow,
)
from tests.fixtures.sample_data import (
    create_sample_data, create_sample_hold_points, create_sample_items, create_sample_punch,
)


def table_row(subsystem, discipline):
    return TableRow(system="S1", system_name="Power", subsystem=subsystem,
                    subsystem_name="", discipline=discipline)


def tags(result):
    return [item.tag_no for item in result.items]


class TestSummaryDrilldown(unittest.TestCase):
    """Test suite for drill-downs from the summary tiles."""

    def setUp(self):
        self.hierarchy = create_sample_data().hierarchy
        self.items = create_sample_items()

    def resolve_items(self, status, scope):
        return resolve(SummaryContext(status), Dataset.ITEMS, scope, self.hierarchy, self.items)

    def test_empty_status_counts_as_other(self):
        items = [DetailItem(subsystem="ss1", discipline="elec", status="")]
        result = resolve(SummaryContext(Status.OTHER), Dataset.ITEMS, AllSystems(),
                         self.hierarchy, items)
        self.assertEqual(result.items, tuple(items))

    def test_other_is_everything_not_done_or_pending(self):
        result = self.resolve_items(Status.OTHER, AllSystems())
        self.assertEqual(tags(result), ['T-003', 'T-005'])

    def test_total_under_all_keeps_every_item(self):
        result = self.resolve_items(Status.TOTAL, AllSystems())
        self.assertEqual(len(result), len(self.items))
        self.assertEqual(result.title, "TOTAL items (All Systems)")

    def test_system_scope_uses_its_subsystems(self):
        result = self.resolve_items(Status.TOTAL, SystemScope("S1", "Power"))
        self.assertEqual(tags(result), ['T-001', 'T-002', 'T-003', 'T-004', 'T-005'])

    def test_status_match_is_case_insensitive(self):
        result = self.resolve_items(Status.DONE, SystemScope("S1", "Power"))
        self.assertEqual(tags(result), ['T-001', 'T-004'])
        self.assertEqual(result.title, "DONE items in System: Power")

    def test_subsystem_scope(self):
        result = self.resolve_items(Status.PENDING, SubsystemScope("SS1", "S1", "Main Switchgear"))
        self.assertEqual(tags(result), ['T-002'])
        self.assertEqual(result.title, "PENDING items in Subsystem: Main Switchgear")

    def test_unknown_scope_is_empty(self):
        self.assertEqual(len(self.resolve_items(Status.TOTAL, SystemScope("NOPE"))), 0)
        self.assertEqual(len(self.resolve_items(Status.TOTAL, SubsystemScope("NOPE"))), 0)

    def test_punch_has_no_status_filter(self):
        result = resolve(SummaryContext(Status.PUNCH), Dataset.PUNCH, SystemScope("S1"),
                         self.hierarchy, create_sample_punch())
        self.assertEqual(tags(result), ['P-001'])
        self.assertIs(result.dataset, Dataset.PUNCH)

    def test_hold_points_match_subsystem_case_insensitively(self):
        result = resolve(SummaryContext(Status.HOLD), Dataset.HOLD, SubsystemScope("SS3"),
                         self.hierarchy, create_sample_hold_points())
        self.assertEqual(tags(result), ['H-002'])

    def test_datasets_are_independent(self):
        # SS3 has no item with status PENDING, but its punch list still resolves
        self.assertEqual(len(self.resolve_items(Status.PENDING, SubsystemScope("SS3"))), 0)
        punch = resolve(SummaryContext(Status.PUNCH), Dataset.PUNCH, SubsystemScope("SS3"),
                        self.hierarchy, create_sample_punch())
        self.assertEqual(tags(punch), ['P-002'])

    def test_empty_dataset(self):
        result = resolve(SummaryContext(Status.HOLD), Dataset.HOLD, AllSystems(), self.hierarchy, ())
        self.assertEqual(result.items, ())


class TestTableDrilldown(unittest.TestCase):
    """Test suite for drill-downs from detail-table cells."""

    def setUp(self):
        self.hierarchy = create_sample_data().hierarchy
        self.items = create_sample_items()

    def test_row_match_on_subsystem_and_discipline(self):
        context = TableContext(table_row("SS1", "Elec"), Status.TOTAL)
        result = resolve(context, Dataset.ITEMS, AllSystems(), self.hierarchy, self.items)
        self.assertEqual(tags(result), ['T-001', 'T-002', 'T-003'])
        self.assertEqual(result.title, "TOTAL items in SS1 / Elec")

    def test_selection_is_ignored(self):
        context = TableContext(table_row("SS1", "Elec"), Status.DONE)
        for scope in (AllSystems(), SystemScope("S2"), SubsystemScope("SS3")):
            with self.subTest(scope=scope):
                result = resolve(context, Dataset.ITEMS, scope, self.hierarchy, self.items)
                self.assertEqual(tags(result), ['T-001'])

    def test_row_match_on_other_keys(self):
        items = [
            DetailItem(subsystem="SS-01", discipline="Piping", tag_no="A"),
            DetailItem(subsystem="ss-01", discipline="PIPING", tag_no="B"),
            DetailItem(subsystem="SS-01", discipline="Elec", tag_no="C"),
            DetailItem(subsystem="SS-02", discipline="Piping", tag_no="D"),
        ]
        context = TableContext(table_row("SS-01", "Piping"), Status.TOTAL)
        result = resolve(context, Dataset.ITEMS, SystemScope("S2"), self.hierarchy, items)
        self.assertEqual(tags(result), ['A', 'B'])

    def test_punch_cell(self):
        context = TableContext(table_row("SS3", "Piping"), Status.PUNCH)
        result = resolve(context, Dataset.PUNCH, AllSystems(), self.hierarchy, create_sample_punch())
        self.assertEqual(tags(result), ['P-002'])


class TestStatusFilter(unittest.TestCase):

    def test_total_has_no_predicate(self):
        self.assertIsNone(status_filter(Status.TOTAL))

    def test_other_predicate(self):
        keep = status_filter(Status.OTHER)
        for status, expected in [("", True), ("  ", True), ("On Hold", True),
                                 ("DONE", False), (" pending ", False)]:
            with self.subTest(status=status):
                self.assertEqual(keep(DetailItem(status=status)), expected)


class TestClickMapping(unittest.TestCase):
    """Test suite for click -> (context, dataset) mapping."""

    def test_table_cells(self):
        row = table_row("SS1", "Elec")
        expected = {
            'total_items': (Status.TOTAL, Dataset.ITEMS),
            'completed': (Status.DONE, Dataset.ITEMS),
            'pending': (Status.PENDING, Dataset.ITEMS),
            'punch': (Status.PUNCH, Dataset.PUNCH),
            'hold_point': (Status.HOLD, Dataset.HOLD),
            'status_percent': (Status.OTHER, Dataset.ITEMS),
        }
        for column, (status, dataset) in expected.items():
            with self.subTest(column=column):
                context, target = context_for_table_cell(row, column)
                self.assertEqual(context, TableContext(row, status))
                self.assertIs(target, dataset)

    def test_non_clickable_column(self):
        self.assertIsNone(context_for_table_cell(table_row("SS1", "Elec"), 'system_name'))

    def test_summary_tiles(self):
        context, dataset = context_for_summary_tile('remaining')
        self.assertEqual(context, SummaryContext(Status.OTHER))
        self.assertIs(dataset, Dataset.ITEMS)
        context, dataset = context_for_summary_tile('hold')
        self.assertEqual((context.status, dataset), (Status.HOLD, Dataset.HOLD))

    def test_unknown_tile(self):
        with self.assertRaises(KeyError):
            context_for_summary_tile('bogus')


if __name__ == '__main__':
    unittest.main()
