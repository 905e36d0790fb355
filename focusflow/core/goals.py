#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
FocusFlow Analytics - Goal Manager
Weekly / monthly targets, progress, adaptive suggestions and pace prediction

Version: 1.0.0
"""

import logging
import math
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Tuple, Union

from focusflow.core.bucketer import CalendarBucketer, count_between, eligible_days
from focusflow.models.analytics import GoalPrediction, GoalProgress
from focusflow.models.enums import Confidence, GoalPeriod
from focusflow.models.session import Goal, SessionRecord

logger = logging.getLogger(__name__)

DEFAULT_MAX_WEEKLY_GOAL = 14
DEFAULT_MAX_MONTHLY_GOAL = 60

ADAPTIVE_WEEKS = 4
HIGH_VARIATION_CV = 0.5
MIN_HISTORY_PERIODS = 2


def round_half_up(value: float) -> int:
    return max(0, int(math.floor(value + 0.5)))


def _coefficient_of_variation(values: List[int]) -> float:
    mean = sum(values) / len(values)
    if mean == 0:
        return math.inf
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return math.sqrt(variance) / mean


class GoalManager:
    """
    Holds user targets only; every query derives from (sessions, now).

    A target of 0 means no goal: progress is still counted, but percentage,
    remaining and recommended pace are 0 and predict() returns the no-goal
    sentinel.
    """

    def __init__(self, bucketer: CalendarBucketer, weekly_target: int = 0, monthly_target: int = 0,
                 max_weekly: int = DEFAULT_MAX_WEEKLY_GOAL,
                 max_monthly: int = DEFAULT_MAX_MONTHLY_GOAL):
        self.bucketer = bucketer
        self.limits: Dict[GoalPeriod, int] = {
            GoalPeriod.WEEKLY: max_weekly,
            GoalPeriod.MONTHLY: max_monthly,
        }
        self.goals: Dict[GoalPeriod, Goal] = {period: Goal(period) for period in GoalPeriod}

        if weekly_target:
            self.set_goal(GoalPeriod.WEEKLY, weekly_target)
        if monthly_target:
            self.set_goal(GoalPeriod.MONTHLY, monthly_target)

    # ===== TARGETS =====

    def set_goal(self, period: Union[GoalPeriod, str], target: int) -> bool:
        """Store a target within 0..limit; anything else is logged and ignored"""
        try:
            period = GoalPeriod(period)
        except ValueError:
            logger.warning(f"⚠️ Unknown goal period: {period!r}")
            return False

        limit = self.limits[period]
        if isinstance(target, bool) or not isinstance(target, int) or not 0 <= target <= limit:
            logger.warning(f"⚠️ Ignoring invalid {period.value} goal {target!r} (allowed 0..{limit})")
            return False

        self.goals[period] = Goal(period, target)
        logger.info(f"✅ {period.display_name} goal set to {target}")
        return True

    def target(self, period: Union[GoalPeriod, str]) -> int:
        return self.goals[GoalPeriod(period)].target

    def has_goal(self, period: Union[GoalPeriod, str]) -> bool:
        return self.goals[GoalPeriod(period)].is_set

    def load_goals(self, goals: Iterable[Goal]) -> None:
        for goal in goals:
            self.set_goal(goal.period, goal.target)

    def to_list(self) -> List[Goal]:
        return [self.goals[period] for period in GoalPeriod]

    # ===== CALENDAR =====

    def period_bounds(self, period: Union[GoalPeriod, str], now: datetime) -> Tuple[date, date]:
        """First and last local day of the period containing now"""
        period = GoalPeriod(period)
        today = self.bucketer.local_date(now)
        if period == GoalPeriod.WEEKLY:
            first = self.bucketer.week_start_date(today)
            return first, first + timedelta(days=6)
        first = self.bucketer.month_start(today)
        return first, first + timedelta(days=self.bucketer.days_in_month(first) - 1)

    def period_days(self, period: Union[GoalPeriod, str], now: datetime) -> int:
        first, last = self.period_bounds(period, now)
        return (last - first).days + 1

    def elapsed_days(self, period: Union[GoalPeriod, str], now: datetime) -> int:
        """Days of the period so far, today included"""
        first, _ = self.period_bounds(period, now)
        return (self.bucketer.local_date(now) - first).days + 1

    def days_remaining(self, period: Union[GoalPeriod, str], now: datetime) -> int:
        """Days left in the period, today included"""
        _, last = self.period_bounds(period, now)
        return (last - self.bucketer.local_date(now)).days + 1

    # ===== PROGRESS =====

    def progress(self, period: Union[GoalPeriod, str], sessions: Iterable[SessionRecord],
                 now: datetime) -> int:
        """Qualifying sessions in the current period up to now"""
        first, _ = self.period_bounds(period, now)
        return count_between(sessions, now, self.bucketer, first, self.bucketer.local_date(now))

    def progress_percentage(self, period: Union[GoalPeriod, str], sessions: Iterable[SessionRecord],
                            now: datetime) -> float:
        """Fraction of the target reached, capped at 1.0; 0.0 without a goal"""
        target = self.target(period)
        if target <= 0:
            return 0.0
        return min(self.progress(period, sessions, now) / target, 1.0)

    def remaining(self, period: Union[GoalPeriod, str], sessions: Iterable[SessionRecord],
                  now: datetime) -> int:
        target = self.target(period)
        if target <= 0:
            return 0
        return max(target - self.progress(period, sessions, now), 0)

    def is_achieved(self, period: Union[GoalPeriod, str], sessions: Iterable[SessionRecord],
                    now: datetime) -> bool:
        target = self.target(period)
        return target > 0 and self.progress(period, sessions, now) >= target

    def recommended_daily(self, period: Union[GoalPeriod, str], sessions: Iterable[SessionRecord],
                          now: datetime) -> float:
        """Sessions per remaining day (today included) needed to reach the target"""
        remaining = self.remaining(period, sessions, now)
        if remaining == 0:
            return 0.0
        return remaining / self.days_remaining(period, now)

    # ===== HISTORY =====

    def period_history(self, period: Union[GoalPeriod, str], sessions: Iterable[SessionRecord],
                       now: datetime) -> List[int]:
        """
        Qualifying counts of previous complete periods, oldest first.

        Weekly history is the up-to-4 weeks before the current one; monthly
        history is every month before the current one. Periods before the
        first qualifying session are not counted as observed.
        """
        period = GoalPeriod(period)
        days = eligible_days(sessions, now, self.bucketer)
        if not days:
            return []

        first_day = min(days)
        current_start, _ = self.period_bounds(period, now)

        starts: List[date] = []
        if period == GoalPeriod.WEEKLY:
            first_week = self.bucketer.week_start_date(first_day)
            for weeks_back in range(ADAPTIVE_WEEKS, 0, -1):
                start = current_start - timedelta(weeks=weeks_back)
                if start >= first_week:
                    starts.append(start)
        else:
            month = self.bucketer.month_start(first_day)
            while month < current_start:
                starts.append(month)
                month = self.bucketer.add_months(month, 1)

        counts = []
        for start in starts:
            if period == GoalPeriod.WEEKLY:
                end = start + timedelta(days=6)
            else:
                end = start + timedelta(days=self.bucketer.days_in_month(start) - 1)
            counts.append(sum(1 for day in days if start <= day <= end))
        return counts

    def adaptive_suggestion(self, period: Union[GoalPeriod, str], sessions: Iterable[SessionRecord],
                            now: datetime) -> int:
        """
        Trailing average of complete periods, rounded half up.

        Without a single complete period of history the current period's
        count is suggested (0 for an empty log).
        """
        sessions = list(sessions)
        history = self.period_history(period, sessions, now)
        if not history:
            logger.debug(f"No complete {GoalPeriod(period).value} history, suggesting current progress")
            return self.progress(period, sessions, now)
        return round_half_up(sum(history) / len(history))

    # ===== PREDICTION =====

    def _elapsed_confidence(self, elapsed: int, period_days: int) -> Confidence:
        fraction = elapsed / period_days
        if fraction < 1 / 3:
            return Confidence.LOW
        if fraction < 2 / 3:
            return Confidence.MEDIUM
        return Confidence.HIGH

    def predict(self, period: Union[GoalPeriod, str], sessions: Iterable[SessionRecord],
                now: datetime) -> GoalPrediction:
        """
        Linear-pace projection of the current period.

        Confidence grows with the elapsed share of the period (< 1/3 low,
        < 2/3 medium, otherwise high) and drops one tier when the trailing
        history is short (< 2 periods) or erratic (coefficient of variation
        above 0.5).
        """
        target = self.target(period)
        if target <= 0:
            return GoalPrediction.no_goal()

        sessions = list(sessions)
        progress = self.progress(period, sessions, now)
        period_days = self.period_days(period, now)
        elapsed = self.elapsed_days(period, now)
        projected = progress / elapsed * period_days

        if progress >= target:
            return GoalPrediction(probability=1.0, achievable=True, confidence=Confidence.HIGH,
                                  projected_total=projected)

        confidence = self._elapsed_confidence(elapsed, period_days)
        history = self.period_history(period, sessions, now)
        if len(history) < MIN_HISTORY_PERIODS or _coefficient_of_variation(history) > HIGH_VARIATION_CV:
            confidence = confidence.downgrade()

        return GoalPrediction(
            probability=min(projected / target, 1.0),
            achievable=projected >= target,
            confidence=confidence,
            projected_total=projected,
        )

    def goal_progress(self, period: Union[GoalPeriod, str], sessions: Iterable[SessionRecord],
                      now: datetime) -> GoalProgress:
        period = GoalPeriod(period)
        sessions = list(sessions)
        return GoalProgress(
            period=period,
            target=self.target(period),
            progress=self.progress(period, sessions, now),
            percentage=self.progress_percentage(period, sessions, now),
            remaining=self.remaining(period, sessions, now),
            days_remaining=self.days_remaining(period, now),
            recommended_daily=self.recommended_daily(period, sessions, now),
            achieved=self.is_achieved(period, sessions, now),
            prediction=self.predict(period, sessions, now),
        )
