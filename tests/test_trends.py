from datetime import date, timedelta

import pytest

from focusflow.core.trends import (
    consistency_trend,
    frequency_trend,
    last_days_trend,
    monthly_trend,
    performance_trend,
    trend_summary,
    weekly_trend,
    yearly_trend,
)
from focusflow.models.enums import Confidence, ConsistencyLevel, TrendDirection


class TestSeries:
    """Fixed-length, zero-filled count series"""

    def test_weekly_trend_empty(self, bucketer, now, week_of):
        series = weekly_trend([], now, bucketer)
        assert [entry.day for entry in series] == week_of
        assert all(entry.count == 0 for entry in series)

    def test_weekly_trend_mon_tue_wed(self, bucketer, now, mon_tue_wed):
        counts = [entry.count for entry in weekly_trend(mon_tue_wed, now, bucketer)]
        assert counts == [0, 1, 1, 1, 0, 0, 0]

    def test_weekly_trend_future_days_stay_zero(self, bucketer, now, mon_tue_wed, sessions_on):
        sessions = mon_tue_wed + sessions_on(date(2025, 6, 13))
        counts = [entry.count for entry in weekly_trend(sessions, now, bucketer)]
        assert counts == [0, 1, 1, 1, 0, 0, 0]

    def test_last_days_trend_sums_last_seven_days(self, bucketer, now, sessions_on):
        sessions = (sessions_on(date(2025, 6, 4)) + sessions_on(date(2025, 6, 5))
                    + sessions_on(date(2025, 6, 11), count=2))
        series = last_days_trend(sessions, now, bucketer)
        assert len(series) == 7
        assert series[0].day == date(2025, 6, 5)
        assert series[-1].day == date(2025, 6, 11)
        assert sum(entry.count for entry in series) == 3

    def test_calendar_week_and_trailing_week_differ(self, bucketer, now, sessions_on):
        # Saturday 2025-06-07 is in the trailing seven days but last calendar week
        sessions = sessions_on(date(2025, 6, 7)) + sessions_on(date(2025, 6, 10))
        assert sum(entry.count for entry in weekly_trend(sessions, now, bucketer)) == 1
        assert sum(entry.count for entry in last_days_trend(sessions, now, bucketer)) == 2

    def test_last_days_trend_non_positive_window(self, bucketer, now):
        assert last_days_trend([], now, bucketer, days=0) == []

    def test_monthly_trend_shape(self, bucketer, now):
        series = monthly_trend([], now, bucketer)
        assert len(series) == 30
        assert series[0].day == date(2025, 6, 11) - timedelta(days=29)
        assert series[-1].day == date(2025, 6, 11)

    def test_yearly_trend(self, bucketer, now, sessions_on):
        sessions = (sessions_on(date(2025, 5, 20), count=2) + sessions_on(date(2024, 7, 1))
                    + sessions_on(date(2024, 6, 30)))
        series = yearly_trend(sessions, now, bucketer)
        assert len(series) == 12
        assert series[0].month == date(2024, 7, 1)
        assert series[-1].month == date(2025, 6, 1)
        assert series[0].count == 1
        assert series[-2].count == 2
        assert sum(entry.count for entry in series) == 3

    def test_yearly_trend_empty(self, bucketer, now):
        assert [entry.count for entry in yearly_trend([], now, bucketer)] == [0] * 12

    def test_trend_summary(self, bucketer, now, mon_tue_wed):
        summary = trend_summary(mon_tue_wed, now, bucketer)
        assert summary.weekly_total == 3
        assert summary.week_comparison.this_week == 3


class TestFrequencyTrend:

    def test_empty_is_stable(self, bucketer, now):
        trend = frequency_trend([], now, bucketer)
        assert trend.direction == TrendDirection.STABLE
        assert trend.change == 0.0
        assert trend.confidence == Confidence.LOW

    def test_improving(self, bucketer, now, sessions_on):
        # recent window 2025-05-28..06-11, previous 05-13..05-27
        sessions = sessions_on(date(2025, 6, 2), count=6) + sessions_on(date(2025, 5, 20), count=3)
        trend = frequency_trend(sessions, now, bucketer)
        assert (trend.recent_period, trend.previous_period) == (6, 3)
        assert trend.direction == TrendDirection.IMPROVING

    def test_declining(self, bucketer, now, sessions_on):
        sessions = sessions_on(date(2025, 6, 2), count=2) + sessions_on(date(2025, 5, 20), count=6)
        assert frequency_trend(sessions, now, bucketer).direction == TrendDirection.DECLINING

    def test_confidence_grows_with_sample(self, bucketer, now, sessions_on):
        sessions = sessions_on(date(2025, 6, 2), count=6) + sessions_on(date(2025, 5, 20), count=6)
        trend = frequency_trend(sessions, now, bucketer)
        assert trend.direction == TrendDirection.STABLE
        assert trend.confidence == Confidence.MEDIUM


class TestConsistencyTrend:

    def test_empty(self, bucketer, now):
        trend = consistency_trend([], now, bucketer)
        assert trend.consistency_score == 0.0
        assert trend.level == ConsistencyLevel.INCONSISTENT

    def test_every_day_is_very_consistent(self, bucketer, now, sessions_on):
        sessions = []
        for offset in range(30):
            sessions += sessions_on(date(2025, 6, 11) - timedelta(days=offset))
        trend = consistency_trend(sessions, now, bucketer)
        assert trend.consistency_score == pytest.approx(1.0)
        assert trend.level == ConsistencyLevel.VERY_CONSISTENT

    def test_single_burst_is_inconsistent(self, bucketer, now, sessions_on):
        trend = consistency_trend(sessions_on(date(2025, 6, 1), count=8), now, bucketer)
        assert trend.consistency_score == 0.0
        assert trend.level == ConsistencyLevel.INCONSISTENT


class TestPerformanceTrend:

    def test_empty_is_stable(self, bucketer, now):
        trend = performance_trend([], now, bucketer)
        assert trend.trend == TrendDirection.STABLE
        assert trend.average_completion_rate == 0.0

    def test_better_completion_is_improving(self, bucketer, now, local, make_session):
        recent = [make_session(local(2025, 6, 2, 9 + i)) for i in range(4)]
        previous = [make_session(local(2025, 5, 1, 9 + i), completed=(i % 2 == 0)) for i in range(4)]
        trend = performance_trend(recent + previous, now, bucketer)
        assert trend.average_completion_rate == 1.0
        assert trend.trend == TrendDirection.IMPROVING
