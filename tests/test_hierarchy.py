"""
Unit tests for sapra_dashboard.analysis.hierarchy
"""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sapra_dashboard.analysis.hierarchy import build_hierarchy, counters_from_row
from sapra_dashboard.core.utils import parse_count, percent_of
from sapra_dashboard.models import DisciplineCounters, RawRow, clamp_remaining
from tests.fixtures.sample_data import create_sample_rows, raw_row


class TestParsing(unittest.TestCase):
    """Counter parsing never fails a row."""

    def test_parse_count(self):
        cases = {
            "12": 12, " 7 ": 7, "3.9": 3, "5 items": 5, "-2": -2,
            "n/a": 0, "": 0, None: 0, "\xa04": 4,
        }
        for value, expected in cases.items():
            with self.subTest(value=value):
                self.assertEqual(parse_count(value), expected)

    def test_parse_count_numbers(self):
        self.assertEqual(parse_count(4), 4)
        self.assertEqual(parse_count(4.7), 4)
        self.assertEqual(parse_count(float('nan')), 0)

    def test_percent_of(self):
        self.assertEqual(percent_of(6, 10), 60)
        self.assertEqual(percent_of(1, 8), 13)   # 12.5 rounds up
        self.assertEqual(percent_of(1, 3), 33)
        self.assertEqual(percent_of(5, 0), 0)

    def test_counters_from_row(self):
        row = raw_row(total="10", done="x", pending=None, punch="2", hold="1")
        self.assertEqual(counters_from_row(row), DisciplineCounters(10, 0, 0, 2, 1))


class TestRemaining(unittest.TestCase):

    def test_remaining_is_clamped(self):
        cases = [(10, 6, 2, 2), (10, 8, 5, 0), (0, 0, 0, 0), (3, 0, 0, 3), (0, 2, 0, 0)]
        for total, done, pending, expected in cases:
            with self.subTest(total=total, done=done, pending=pending):
                self.assertEqual(clamp_remaining(total, done, pending), expected)
                self.assertEqual(DisciplineCounters(total, done, pending).remaining, expected)


class TestBuildHierarchy(unittest.TestCase):
    """Test suite for hierarchy construction rules."""

    def setUp(self):
        self.data = build_hierarchy(create_sample_rows())
        self.hierarchy = self.data.hierarchy

    def test_systems_in_feed_order(self):
        self.assertEqual(list(self.hierarchy.systems), ['S1', 'S2'])
        self.assertEqual(self.hierarchy.system('S1').name, 'Power')

    def test_subsystem_references_in_first_seen_order(self):
        self.assertEqual(self.hierarchy.system('S1').subsystem_ids, ('SS1', 'SS2'))
        self.assertEqual(self.hierarchy.system('S1').subs[1].name, 'Transformers')

    def test_disciplines_parsed(self):
        ss1 = self.hierarchy.subsystem('SS1')
        self.assertEqual(list(ss1.disciplines), ['Elec', 'Inst'])
        self.assertEqual(ss1.disciplines['Elec'], DisciplineCounters(10, 6, 2, 1, 0))
        self.assertEqual(ss1.system_id, 'S1')
        self.assertEqual(ss1.title, 'SS1 - Main Switchgear')

    def test_raw_rows_retained(self):
        self.assertEqual(len(self.data.raw_rows), 5)

    def test_rows_missing_keys_are_skipped(self):
        rows = [
            raw_row(system=None),
            raw_row(subsystem="  "),
            raw_row(discipline=""),
            raw_row(subsystem="SS7"),
        ]
        data = build_hierarchy(rows)
        self.assertEqual(list(data.hierarchy.subsystems), ['SS7'])
        self.assertEqual(len(data.raw_rows), 4)

    def test_fields_are_trimmed_and_names_defaulted(self):
        row = RawRow(system_id=" S9 ", subsystem_id=" SS9\xa0", discipline=" Elec ", total_item="2")
        hierarchy = build_hierarchy([row]).hierarchy
        self.assertEqual(hierarchy.system('S9').name, 'Unknown System')
        self.assertEqual(hierarchy.subsystem('SS9').name, 'Unknown Subsystem')
        self.assertIn('Elec', hierarchy.subsystem('SS9').disciplines)

    def test_duplicate_discipline_replaces_counters(self):
        rows = [
            raw_row(discipline="Elec", total="10"),
            raw_row(discipline="Inst", total="4"),
            raw_row(discipline="Elec", total="12"),
        ]
        disciplines = build_hierarchy(rows).hierarchy.subsystem('SS1').disciplines
        self.assertEqual(list(disciplines), ['Elec', 'Inst'])
        self.assertEqual(disciplines['Elec'].total, 12)

    def test_subsystem_reference_not_duplicated(self):
        rows = [raw_row(discipline="Elec"), raw_row(discipline="Inst")]
        self.assertEqual(build_hierarchy(rows).hierarchy.system('S1').subsystem_ids, ('SS1',))

    def test_subsystem_id_is_case_sensitive(self):
        rows = [raw_row(subsystem="SS1"), raw_row(subsystem="ss1")]
        self.assertEqual(build_hierarchy(rows).hierarchy.system('S1').subsystem_ids, ('SS1', 'ss1'))

    def test_first_seen_system_owns_shared_subsystem(self):
        rows = [
            raw_row(system="S1", subsystem="SS1", discipline="Elec"),
            raw_row(system="S2", system_name="Water", subsystem="SS1", discipline="Mech"),
        ]
        hierarchy = build_hierarchy(rows).hierarchy
        self.assertEqual(hierarchy.subsystem('SS1').system_id, 'S1')
        # Both systems still reference it
        self.assertEqual(hierarchy.system('S2').subsystem_ids, ('SS1',))
        self.assertEqual(list(hierarchy.subsystem('SS1').disciplines), ['Elec', 'Mech'])

    def test_lookup_tables_are_read_only(self):
        with self.assertRaises(TypeError):
            self.hierarchy.systems['S3'] = None
        with self.assertRaises(TypeError):
            self.hierarchy.subsystem('SS1').disciplines['Elec'] = None

    def test_unknown_ids(self):
        self.assertIsNone(self.hierarchy.system('NOPE'))
        self.assertIsNone(self.hierarchy.subsystem('NOPE'))

    def test_empty_feed(self):
        data = build_hierarchy([])
        self.assertEqual(len(data.hierarchy.systems), 0)
        self.assertEqual(data.raw_rows, ())


if __name__ == '__main__':
    unittest.main()
