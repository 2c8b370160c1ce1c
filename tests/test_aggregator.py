"""
Unit tests for sapra_dashboard.analysis.aggregator

Includes the roll-up consistency properties and the end-to-end scenarios for
single-row feeds.
"""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sapra_dashboard.analysis.aggregator import aggregate, child_stats, discipline_stats
from sapra_dashboard.analysis.hierarchy import build_hierarchy
from sapra_dashboard.models import AggregatedStats, AllSystems, SubsystemScope, SystemScope
from tests.fixtures.sample_data import create_sample_data, raw_row

SUMMED_FIELDS = ('total_items', 'done', 'pending', 'punch', 'hold')


def summed(stats):
    return tuple(getattr(stats, name) for name in SUMMED_FIELDS)


class TestSingleRowScenario(unittest.TestCase):
    """One row: S1 / SS1 / Elec with 10 items, 6 done, 2 pending, 1 punch."""

    def setUp(self):
        rows = [raw_row(system="S1", subsystem="SS1", discipline="Elec",
                        total="10", done="6", pending="2", punch="1", hold="0")]
        self.hierarchy = build_hierarchy(rows).hierarchy
        self.expected = {
            'totalItems': 10, 'done': 6, 'pending': 2, 'punch': 1, 'hold': 0, 'remaining': 2,
        }

    def test_subsystem(self):
        stats = aggregate(SubsystemScope("SS1"), self.hierarchy)
        self.assertEqual(stats.to_dict(), self.expected)

    def test_system_equals_its_single_subsystem(self):
        stats = aggregate(SystemScope("S1"), self.hierarchy)
        self.assertEqual(stats.to_dict(), self.expected)

    def test_all_systems(self):
        self.assertEqual(aggregate(AllSystems(), self.hierarchy).to_dict(), self.expected)

    def test_unknown_subsystem_is_all_zero(self):
        self.assertEqual(aggregate(SubsystemScope("UNKNOWN"), self.hierarchy), AggregatedStats())

    def test_unknown_system_is_all_zero(self):
        self.assertEqual(aggregate(SystemScope("UNKNOWN"), self.hierarchy), AggregatedStats())


class TestAggregate(unittest.TestCase):
    """Test suite for multi-system aggregation."""

    def setUp(self):
        self.hierarchy = create_sample_data().hierarchy

    def test_system_totals(self):
        stats = aggregate(SystemScope("S1"), self.hierarchy)
        self.assertEqual(stats, AggregatedStats(22, 11, 5, 3, 1, 6))

    def test_all_totals(self):
        stats = aggregate(AllSystems(), self.hierarchy)
        self.assertEqual(stats, AggregatedStats(42, 16, 10, 6, 3, 16))

    def test_all_rolls_up_systems(self):
        systems = [aggregate(SystemScope(sid), self.hierarchy) for sid in self.hierarchy.systems]
        total = AggregatedStats()
        for stats in systems:
            total = total + stats
        self.assertEqual(summed(aggregate(AllSystems(), self.hierarchy)), summed(total))

    def test_system_rolls_up_subsystems(self):
        for system in self.hierarchy.systems.values():
            with self.subTest(system=system.id):
                total = AggregatedStats()
                for sub_id in system.subsystem_ids:
                    total = total + aggregate(SubsystemScope(sub_id), self.hierarchy)
                self.assertEqual(summed(aggregate(SystemScope(system.id), self.hierarchy)),
                                 summed(total))

    def test_remaining_invariant_for_every_scope(self):
        scopes = [AllSystems()]
        scopes += [SystemScope(sid) for sid in self.hierarchy.systems]
        scopes += [SubsystemScope(sid) for sid in self.hierarchy.subsystems]
        for scope in scopes:
            with self.subTest(scope=scope):
                stats = aggregate(scope, self.hierarchy)
                self.assertEqual(stats.remaining,
                                 max(0, stats.total_items - stats.done - stats.pending))

    def test_remaining_is_clamped_after_summing(self):
        rows = [
            raw_row(subsystem="SS1", total="10", done="12", pending="0"),
            raw_row(subsystem="SS2", total="10", done="0", pending="0"),
        ]
        hierarchy = build_hierarchy(rows).hierarchy
        self.assertEqual(aggregate(SubsystemScope("SS1"), hierarchy).remaining, 0)
        # 20 - 12 - 0, not 0 + 10
        self.assertEqual(aggregate(SystemScope("S1"), hierarchy).remaining, 8)

    def test_deterministic(self):
        first = aggregate(SystemScope("S2"), self.hierarchy)
        second = aggregate(SystemScope("S2"), self.hierarchy)
        self.assertEqual(first, second)

    def test_shared_subsystem_counts_under_each_referencing_system(self):
        rows = [
            raw_row(system="S1", subsystem="SS1", total="10", done="0", pending="0"),
            raw_row(system="S2", subsystem="SS1", discipline="Mech", total="5", done="0", pending="0"),
        ]
        hierarchy = build_hierarchy(rows).hierarchy
        self.assertEqual(aggregate(SystemScope("S1"), hierarchy).total_items, 15)
        self.assertEqual(aggregate(SystemScope("S2"), hierarchy).total_items, 15)
        self.assertEqual(aggregate(AllSystems(), hierarchy).total_items, 30)


class TestBreakdowns(unittest.TestCase):
    """Test suite for the chart breakdown helpers."""

    def setUp(self):
        self.hierarchy = create_sample_data().hierarchy

    def test_child_stats_for_all_lists_systems(self):
        entries = child_stats(AllSystems(), self.hierarchy)
        self.assertEqual([label for _, label, _ in entries], ['S1 - Power', 'S2 - Water'])

    def test_child_stats_for_system_lists_subsystems(self):
        entries = child_stats(SystemScope("S1"), self.hierarchy)
        self.assertEqual([sid for sid, _, _ in entries], ['SS1', 'SS2'])
        self.assertEqual(entries[1][1], 'SS2 - Transformers')
        self.assertEqual(entries[1][2].total_items, 8)

    def test_child_stats_drops_empty_entries(self):
        rows = [raw_row(subsystem="SS1"), raw_row(subsystem="SS2", total="0", done="0", pending="0")]
        hierarchy = build_hierarchy(rows).hierarchy
        self.assertEqual([sid for sid, _, _ in child_stats(SystemScope("S1"), hierarchy)], ['SS1'])

    def test_child_stats_unknown_scope(self):
        self.assertEqual(child_stats(SystemScope("NOPE"), self.hierarchy), [])

    def test_discipline_stats(self):
        entries = discipline_stats(SubsystemScope("SS3"), self.hierarchy)
        self.assertEqual([name for name, _ in entries], ['Piping', 'Civil'])
        self.assertEqual(discipline_stats(SystemScope("S2"), self.hierarchy), [])
        self.assertEqual(discipline_stats(SubsystemScope("NOPE"), self.hierarchy), [])


if __name__ == '__main__':
    unittest.main()
