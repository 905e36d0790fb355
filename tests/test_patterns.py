from datetime import date

import pytest

from focusflow.core.patterns import (
    best_focus_time,
    completion_rate,
    focus_frequency_by_day,
    focus_frequency_by_time,
    focus_likelihood_today,
    most_consistent_day,
    most_frequent,
    optimal_focus_time,
    session_statistics,
    time_completion_correlation,
    time_of_day,
    weeks_of_data,
)
from focusflow.models.enums import Confidence, DayOfWeek, SessionCategory, TimeOfDay


class TestTimeOfDay:

    @pytest.mark.parametrize("hour, bucket", [
        (0, TimeOfDay.NIGHT),
        (4, TimeOfDay.NIGHT),
        (5, TimeOfDay.MORNING),
        (11, TimeOfDay.MORNING),
        (12, TimeOfDay.AFTERNOON),
        (16, TimeOfDay.AFTERNOON),
        (17, TimeOfDay.EVENING),
        (21, TimeOfDay.EVENING),
        (22, TimeOfDay.NIGHT),
    ])
    def test_buckets(self, hour, bucket):
        assert time_of_day(hour) == bucket

    def test_ties_resolve_to_enumeration_order(self):
        counts = {TimeOfDay.EVENING: 2, TimeOfDay.MORNING: 2}
        assert most_frequent(counts, list(TimeOfDay)) == TimeOfDay.MORNING
        assert most_frequent({}, list(TimeOfDay)) is None


class TestFrequencies:

    def test_empty(self, bucketer, now):
        assert focus_frequency_by_time([], now, bucketer) == {}
        assert focus_frequency_by_day([], now, bucketer) == {}
        assert best_focus_time([], now, bucketer) is None
        assert most_consistent_day([], now, bucketer) is None

    def test_best_time_counts_focus_sessions(self, bucketer, now, local, make_session):
        sessions = [
            make_session(local(2025, 6, 10, 18)),
            make_session(local(2025, 6, 9, 19), completed=False),
            make_session(local(2025, 6, 9, 8)),
            make_session(local(2025, 6, 9, 9), category=SessionCategory.SHORT_BREAK),
            make_session(local(2025, 6, 9, 10), category=SessionCategory.LONG_BREAK),
        ]
        assert focus_frequency_by_time(sessions, now, bucketer) == {
            TimeOfDay.MORNING: 1, TimeOfDay.EVENING: 2,
        }
        assert best_focus_time(sessions, now, bucketer) == TimeOfDay.EVENING

    def test_day_tie_prefers_sunday_first_order(self, bucketer, now, sessions_on):
        sessions = sessions_on(date(2025, 6, 7)) + sessions_on(date(2025, 6, 8))
        assert most_consistent_day(sessions, now, bucketer) == DayOfWeek.SUNDAY

    def test_most_consistent_day(self, bucketer, now, sessions_on):
        sessions = (sessions_on(date(2025, 6, 10)) + sessions_on(date(2025, 6, 3))
                    + sessions_on(date(2025, 6, 9)))
        assert focus_frequency_by_day(sessions, now, bucketer) == {
            DayOfWeek.MONDAY: 1, DayOfWeek.TUESDAY: 2,
        }
        assert most_consistent_day(sessions, now, bucketer) == DayOfWeek.TUESDAY


class TestStatistics:

    def test_completion_rate(self, bucketer, now, mon_tue_wed, local, make_session):
        sessions = mon_tue_wed + [
            make_session(local(2025, 6, 10, 14), completed=False),
            make_session(local(2025, 6, 10, 15), category=SessionCategory.SHORT_BREAK, completed=False),
        ]
        assert completion_rate(sessions, now, bucketer) == pytest.approx(75.0)
        assert completion_rate([], now, bucketer) == 0.0

    def test_session_statistics(self, bucketer, now, sessions_on):
        sessions = sessions_on(date(2025, 6, 9), count=3) + sessions_on(date(2025, 6, 10))
        stats = session_statistics(sessions, now, bucketer)
        assert stats.total_sessions == 4
        assert stats.total_focus_time == 6000
        assert stats.average_duration == 1500
        assert stats.average_daily_focus_time == 3000
        assert stats.total_cycles == 1
        assert stats.completion_rate == 100.0

    def test_session_statistics_empty(self, bucketer, now):
        stats = session_statistics([], now, bucketer)
        assert stats.total_sessions == 0
        assert stats.total_cycles == 0
        assert stats.average_duration == 0.0


class TestPredictions:

    def test_optimal_focus_time(self, bucketer, now, local, make_session):
        sessions = [
            make_session(local(2025, 6, 9, 9)),
            make_session(local(2025, 6, 10, 9, 30)),
            make_session(local(2025, 6, 10, 14)),
        ]
        optimal = optimal_focus_time(sessions, now, bucketer)
        assert optimal.hour == 9
        assert optimal.time_of_day == TimeOfDay.MORNING
        assert optimal.session_count == 2
        assert optimal.confidence == Confidence.MEDIUM
        assert optimal.time_description == "9 AM"

    def test_optimal_focus_time_empty(self, bucketer, now):
        assert optimal_focus_time([], now, bucketer) is None

    def test_weeks_of_data(self, bucketer, now, sessions_on):
        sessions = sessions_on(date(2025, 6, 1)) + sessions_on(date(2025, 6, 11))
        assert weeks_of_data(sessions, now, bucketer) == 2
        assert weeks_of_data([], now, bucketer) == 0

    def test_focus_likelihood_without_history(self, bucketer, now):
        likelihood = focus_likelihood_today([], now, bucketer)
        assert likelihood.probability == 0.5
        assert likelihood.confidence == Confidence.LOW
        assert likelihood.factors == ["No historical data"]

    def test_focus_likelihood_regular_weekday(self, bucketer, now, sessions_on):
        # a Wednesday session in each of the last four weeks
        sessions = []
        for day in (21, 28):
            sessions += sessions_on(date(2025, 5, day))
        for day in (4, 11):
            sessions += sessions_on(date(2025, 6, day))
        likelihood = focus_likelihood_today(sessions, now, bucketer, streak=1, sessions_this_week=1)
        assert likelihood.confidence == Confidence.HIGH
        assert likelihood.probability == pytest.approx(0.7 + 0.3 / 7)
        assert "You typically focus on Wednesday" in likelihood.factors

    def test_correlation_needs_five_sessions(self, bucketer, now, mon_tue_wed):
        assert time_completion_correlation(mon_tue_wed, now, bucketer) is None

    def test_correlation(self, bucketer, now, local, make_session):
        sessions = [
            make_session(local(2025, 6, 9, 9), completed=False),
            make_session(local(2025, 6, 9, 10)),
            make_session(local(2025, 6, 9, 18)),
            make_session(local(2025, 6, 10, 19)),
            make_session(local(2025, 6, 10, 13), completed=False),
        ]
        analysis = time_completion_correlation(sessions, now, bucketer)
        assert analysis.morning_completion_rate == 0.5
        assert analysis.afternoon_completion_rate == 0.0
        assert analysis.evening_completion_rate == 1.0
        assert analysis.best_time == TimeOfDay.EVENING
