#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
FocusFlow Analytics - Analytics Engine
Pull-based facade over the session store: every call re-derives from the
store's current sessions, nothing is cached

Version: 1.0.0
"""

import logging
from datetime import date, datetime
from typing import List, Optional, Union

from focusflow.core import comparisons, insights, patterns, streaks, trends
from focusflow.core.bucketer import CalendarBucketer
from focusflow.core.goals import GoalManager
from focusflow.models.analytics import (
    ConsistencyTrend,
    CorrelationAnalysis,
    DailyCount,
    DayFrequency,
    FocusLikelihood,
    FrequencyTrend,
    GoalPrediction,
    GoalProgress,
    Insight,
    MonthComparison,
    MonthlyCount,
    MonthlySummary,
    OptimalTimePrediction,
    PerformanceTrend,
    PeriodComparison,
    Recommendation,
    SessionStatistics,
    TimeFrequency,
    TrendSummary,
    WeekComparison,
    WeeklySummary,
)
from focusflow.models.enums import DayOfWeek, GoalPeriod, TimeOfDay
from focusflow.models.session import SessionRecord

logger = logging.getLogger(__name__)


class AnalyticsEngine:
    """
    Reads `store.sessions` on every query; `now` is always passed in.

    Any object exposing a `sessions` sequence works as the store, which keeps
    the engine usable over a plain list wrapper in tests.
    """

    def __init__(self, store, bucketer: Optional[CalendarBucketer] = None,
                 goals: Optional[GoalManager] = None):
        self.store = store
        self.bucketer = bucketer or CalendarBucketer()
        self.goals = goals or GoalManager(self.bucketer)

    def _sessions(self) -> List[SessionRecord]:
        return list(self.store.sessions or [])

    # ===== STREAKS =====

    def current_streak(self, now: datetime) -> int:
        return streaks.current_streak(self._sessions(), now, self.bucketer)

    def longest_streak(self, now: datetime) -> int:
        return streaks.longest_streak(self._sessions(), now, self.bucketer)

    def streak_days(self, now: datetime) -> List[date]:
        return streaks.streak_days(self._sessions(), now, self.bucketer)

    # ===== TRENDS =====

    def weekly_trend(self, now: datetime) -> List[DailyCount]:
        return trends.weekly_trend(self._sessions(), now, self.bucketer)

    def last_days_trend(self, now: datetime, days: int = 7) -> List[DailyCount]:
        return trends.last_days_trend(self._sessions(), now, self.bucketer, days)

    def monthly_trend(self, now: datetime) -> List[DailyCount]:
        return trends.monthly_trend(self._sessions(), now, self.bucketer)

    def yearly_trend(self, now: datetime) -> List[MonthlyCount]:
        return trends.yearly_trend(self._sessions(), now, self.bucketer)

    def trend_summary(self, now: datetime) -> TrendSummary:
        return trends.trend_summary(self._sessions(), now, self.bucketer)

    def frequency_trend(self, now: datetime) -> FrequencyTrend:
        return trends.frequency_trend(self._sessions(), now, self.bucketer)

    def consistency_trend(self, now: datetime) -> ConsistencyTrend:
        return trends.consistency_trend(self._sessions(), now, self.bucketer)

    def performance_trend(self, now: datetime) -> PerformanceTrend:
        return trends.performance_trend(self._sessions(), now, self.bucketer)

    # ===== COMPARISONS =====

    def compare_this_week_vs_last_week(self, now: datetime) -> WeekComparison:
        return comparisons.compare_this_week_vs_last_week(self._sessions(), now, self.bucketer)

    def compare_this_month_vs_last_month(self, now: datetime) -> MonthComparison:
        return comparisons.compare_this_month_vs_last_month(self._sessions(), now, self.bucketer)

    def compare_trailing_days(self, now: datetime,
                              days: int = comparisons.TRAILING_WINDOW_DAYS) -> PeriodComparison:
        return comparisons.compare_trailing_days(self._sessions(), now, self.bucketer, days)

    # ===== PATTERNS =====

    def focus_frequency_by_time(self, now: datetime) -> TimeFrequency:
        return patterns.focus_frequency_by_time(self._sessions(), now, self.bucketer)

    def focus_frequency_by_day(self, now: datetime) -> DayFrequency:
        return patterns.focus_frequency_by_day(self._sessions(), now, self.bucketer)

    def best_focus_time(self, now: datetime) -> Optional[TimeOfDay]:
        return patterns.best_focus_time(self._sessions(), now, self.bucketer)

    def most_consistent_day(self, now: datetime) -> Optional[DayOfWeek]:
        return patterns.most_consistent_day(self._sessions(), now, self.bucketer)

    def completion_rate(self, now: datetime) -> float:
        return patterns.completion_rate(self._sessions(), now, self.bucketer)

    def session_statistics(self, now: datetime) -> SessionStatistics:
        return patterns.session_statistics(self._sessions(), now, self.bucketer)

    def optimal_focus_time(self, now: datetime) -> Optional[OptimalTimePrediction]:
        return patterns.optimal_focus_time(self._sessions(), now, self.bucketer)

    def focus_likelihood_today(self, now: datetime) -> FocusLikelihood:
        sessions = self._sessions()
        streak = streaks.current_streak(sessions, now, self.bucketer)
        this_week = comparisons.compare_this_week_vs_last_week(sessions, now, self.bucketer).this_week
        return patterns.focus_likelihood_today(sessions, now, self.bucketer, streak, this_week)

    def time_completion_correlation(self, now: datetime) -> Optional[CorrelationAnalysis]:
        return patterns.time_completion_correlation(self._sessions(), now, self.bucketer)

    # ===== INSIGHTS =====

    def insights(self, now: datetime) -> List[Insight]:
        sessions = self._sessions()
        streak = streaks.current_streak(sessions, now, self.bucketer)
        summary = trends.trend_summary(sessions, now, self.bucketer)
        return insights.generate_insights(sessions, streak, summary, now, self.bucketer)

    def recommendations(self, now: datetime) -> List[Recommendation]:
        sessions = self._sessions()
        streak = streaks.current_streak(sessions, now, self.bucketer)
        return insights.generate_recommendations(sessions, streak, now, self.bucketer)

    def productivity_tips(self, now: datetime) -> List[str]:
        sessions = self._sessions()
        streak = streaks.current_streak(sessions, now, self.bucketer)
        return insights.productivity_tips(sessions, streak, now, self.bucketer)

    # ===== GOALS =====

    def set_goal(self, period: Union[GoalPeriod, str], target: int) -> bool:
        return self.goals.set_goal(period, target)

    def goal_progress(self, period: Union[GoalPeriod, str], now: datetime) -> GoalProgress:
        return self.goals.goal_progress(period, self._sessions(), now)

    def predict(self, period: Union[GoalPeriod, str], now: datetime) -> GoalPrediction:
        return self.goals.predict(period, self._sessions(), now)

    def adaptive_suggestion(self, period: Union[GoalPeriod, str], now: datetime) -> int:
        return self.goals.adaptive_suggestion(period, self._sessions(), now)

    # ===== SUMMARIES =====

    def weekly_summary(self, now: datetime) -> WeeklySummary:
        sessions = self._sessions()
        week = comparisons.compare_this_week_vs_last_week(sessions, now, self.bucketer)
        streak = streaks.current_streak(sessions, now, self.bucketer)
        likelihood = patterns.focus_likelihood_today(sessions, now, self.bucketer, streak, week.this_week)
        logger.debug(f"Weekly summary: {week.this_week} this week, {week.last_week} last week")

        return WeeklySummary(
            sessions_this_week=week.this_week,
            sessions_last_week=week.last_week,
            change=week.change,
            consistency_score=trends.consistency_trend(sessions, now, self.bucketer).consistency_score,
            focus_likelihood_today=likelihood.probability,
            recommendations=insights.generate_recommendations(sessions, streak, now, self.bucketer),
        )

    def monthly_summary(self, now: datetime) -> MonthlySummary:
        sessions = self._sessions()
        month = comparisons.compare_this_month_vs_last_month(sessions, now, self.bucketer)

        return MonthlySummary(
            sessions_this_month=month.this_month,
            sessions_last_month=month.last_month,
            change=month.change,
            average_completion_rate=patterns.completion_rate(sessions, now, self.bucketer),
            consistency_score=trends.consistency_trend(sessions, now, self.bucketer).consistency_score,
            trend=trends.performance_trend(sessions, now, self.bucketer).trend,
        )
