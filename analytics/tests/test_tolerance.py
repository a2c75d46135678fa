from datetime import date, datetime, timedelta

from django.test import SimpleTestCase

from analytics.tolerance import (
    TolerancePolicy,
    active_break,
    is_active_break,
    tolerance_chart,
    tolerance_insights,
)
from .factories import AS_OF, checkin


class ToleranceInsightTests(SimpleTestCase):

    def test_sparse_history_reports_no_change(self):
        """Three check-ins have no older group to compare against."""
        records = [checkin(0, 0.5, 6), checkin(7, 0.3, 8), checkin(14, 0.2, 9)]
        insights = tolerance_insights(records, AS_OF)
        self.assertEqual(insights.tolerance_increase_percent, 0)
        self.assertEqual(insights.effectiveness_change_percent, 0)
        self.assertFalse(insights.needs_break)
        self.assertEqual(insights.sample_size, 3)

    def test_no_records(self):
        insights = tolerance_insights([], AS_OF)
        self.assertEqual(insights.recent_avg_baseline, 0)
        self.assertFalse(insights.needs_break)
        self.assertIsNone(insights.active_break)

    def test_rising_baseline_suggests_a_break(self):
        recent = [checkin(day, 0.6, 7) for day in range(5)]
        older = [checkin(day, 0.3, 7) for day in range(10, 15)]
        insights = tolerance_insights(older + recent, AS_OF)
        self.assertAlmostEqual(insights.tolerance_increase_percent, 100)
        self.assertEqual(insights.effectiveness_change_percent, 0)
        self.assertTrue(insights.needs_break)

    def test_falling_effectiveness_suggests_a_break(self):
        recent = [checkin(day, 0.3, 5) for day in range(5)]
        older = [checkin(day, 0.3, 8) for day in range(10, 15)]
        insights = tolerance_insights(recent + older, AS_OF)
        self.assertAlmostEqual(insights.effectiveness_change_percent, -37.5)
        self.assertTrue(insights.needs_break)

    def test_only_ten_newest_records_count(self):
        recent = [checkin(day, 0.4, 7) for day in range(5)]
        older = [checkin(day, 0.4, 7) for day in range(10, 15)]
        ancient = [checkin(day, 0.1, 10) for day in range(100, 110)]
        insights = tolerance_insights(ancient + older + recent, AS_OF)
        self.assertEqual(insights.tolerance_increase_percent, 0)
        self.assertEqual(insights.sample_size, 20)

    def test_policy_thresholds_are_injectable(self):
        recent = [checkin(day, 0.36, 7) for day in range(3)]
        older = [checkin(day, 0.3, 7) for day in range(10, 13)]
        strict = TolerancePolicy(window=3, increase_threshold=10.0)
        self.assertFalse(tolerance_insights(recent + older, AS_OF).needs_break)
        self.assertTrue(tolerance_insights(recent + older, AS_OF, policy=strict).needs_break)


class ActiveBreakTests(SimpleTestCase):

    def test_open_ended_break_is_active(self):
        record = checkin(2, 0.3, 7, tolerance_break_start=date(2025, 3, 13))
        self.assertTrue(is_active_break(record, AS_OF))

    def test_break_ending_later_is_active(self):
        record = checkin(2, 0.3, 7, tolerance_break_start=date(2025, 3, 13),
                         tolerance_break_end=date(2025, 3, 20))
        self.assertTrue(is_active_break(record, AS_OF))

    def test_break_ending_today_or_earlier_is_over(self):
        ended_today = checkin(5, 0.3, 7, tolerance_break_start=date(2025, 3, 10),
                              tolerance_break_end=date(2025, 3, 15))
        self.assertFalse(is_active_break(ended_today, AS_OF))
        self.assertFalse(is_active_break(checkin(0, 0.3, 7), AS_OF))

    def test_datetime_break_end_compares_against_as_of(self):
        record = checkin(0, 0.3, 7, tolerance_break_start=date(2025, 3, 10),
                         tolerance_break_end=datetime(2025, 3, 15, 21, 0))
        self.assertTrue(is_active_break(record, AS_OF))
        self.assertFalse(is_active_break(record, AS_OF + timedelta(hours=2)))

    def test_newest_active_break_is_surfaced(self):
        older = checkin(20, 0.3, 7, id='older', tolerance_break_start=date(2025, 2, 20))
        newer = checkin(3, 0.3, 7, id='newer', tolerance_break_start=date(2025, 3, 12))
        self.assertEqual(active_break([older, newer], AS_OF).id, 'newer')
        self.assertEqual(tolerance_insights([older, newer], AS_OF).active_break.id, 'newer')


class ToleranceChartTests(SimpleTestCase):

    def test_newest_twenty_oldest_first(self):
        records = [checkin(day, 0.1 + day / 100, 7) for day in range(25)]
        chart = tolerance_chart(records)
        self.assertEqual(len(chart), 20)
        self.assertEqual(chart[0].date, date(2025, 2, 24))
        self.assertEqual(chart[-1].date, date(2025, 3, 15))
        self.assertAlmostEqual(chart[-1].baseline, 0.1)
