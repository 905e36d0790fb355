#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
FocusFlow Analytics - Trend Aggregator
Fixed-length, zero-filled count series and trend-direction analysis

Version: 1.0.0
"""

import logging
import math
from collections import Counter
from datetime import datetime, timedelta
from typing import Iterable, List

from focusflow.core.bucketer import CalendarBucketer, eligible_days, iter_eligible
from focusflow.core.comparisons import compare_this_week_vs_last_week, compare_trailing_days
from focusflow.models.analytics import (
    ConsistencyTrend,
    DailyCount,
    FrequencyTrend,
    MonthlyCount,
    PerformanceTrend,
    TrendSummary,
)
from focusflow.models.enums import Confidence, ConsistencyLevel, TrendDirection
from focusflow.models.session import SessionRecord

logger = logging.getLogger(__name__)

MONTHLY_TREND_DAYS = 30
YEARLY_TREND_MONTHS = 12
TREND_CHANGE_THRESHOLD = 10.0

# ===== SERIES =====

def _daily_series(sessions: Iterable[SessionRecord], now: datetime,
                  bucketer: CalendarBucketer, days: List) -> List[DailyCount]:
    counts = Counter(eligible_days(sessions, now, bucketer))
    return [DailyCount(day=day, count=counts.get(day, 0)) for day in days]


def weekly_trend(sessions: Iterable[SessionRecord], now: datetime,
                 bucketer: CalendarBucketer) -> List[DailyCount]:
    """
    Seven entries for the calendar week containing now, first weekday first.

    Days after today are present with a zero count, so early in the week the
    total covers fewer than seven elapsed days. Use last_days_trend() for
    the trailing seven calendar days ending today.
    """
    return _daily_series(sessions, now, bucketer, bucketer.week_days(now))


def last_days_trend(sessions: Iterable[SessionRecord], now: datetime,
                    bucketer: CalendarBucketer, days: int = 7) -> List[DailyCount]:
    """Trailing `days` calendar days ending today, oldest first"""
    if days <= 0:
        return []
    today = bucketer.local_date(now)
    return _daily_series(sessions, now, bucketer, bucketer.day_range(today, days))


def monthly_trend(sessions: Iterable[SessionRecord], now: datetime,
                  bucketer: CalendarBucketer) -> List[DailyCount]:
    return last_days_trend(sessions, now, bucketer, days=MONTHLY_TREND_DAYS)


def yearly_trend(sessions: Iterable[SessionRecord], now: datetime,
                 bucketer: CalendarBucketer) -> List[MonthlyCount]:
    """Twelve months ending with the current month, oldest first"""
    this_month = bucketer.month_start(bucketer.local_date(now))
    months = [bucketer.add_months(this_month, offset)
              for offset in range(-(YEARLY_TREND_MONTHS - 1), 1)]
    counts = Counter(bucketer.month_start(day) for day in eligible_days(sessions, now, bucketer))
    return [MonthlyCount(month=month, count=counts.get(month, 0)) for month in months]


def trend_summary(sessions: Iterable[SessionRecord], now: datetime,
                  bucketer: CalendarBucketer) -> TrendSummary:
    sessions = list(sessions)
    return TrendSummary(
        weekly=weekly_trend(sessions, now, bucketer),
        week_comparison=compare_this_week_vs_last_week(sessions, now, bucketer),
    )

# ===== TREND ANALYSIS =====

def _sample_confidence(total: int) -> Confidence:
    if total >= 20:
        return Confidence.HIGH
    if total >= 10:
        return Confidence.MEDIUM
    return Confidence.LOW


def frequency_trend(sessions: Iterable[SessionRecord], now: datetime,
                    bucketer: CalendarBucketer) -> FrequencyTrend:
    """Trailing 15 days vs the 15 before them"""
    comparison = compare_trailing_days(sessions, now, bucketer)
    change = comparison.change_percent

    if change > TREND_CHANGE_THRESHOLD:
        direction = TrendDirection.IMPROVING
    elif change < -TREND_CHANGE_THRESHOLD:
        direction = TrendDirection.DECLINING
    else:
        direction = TrendDirection.STABLE

    return FrequencyTrend(
        recent_period=comparison.recent,
        previous_period=comparison.previous,
        change=change,
        direction=direction,
        confidence=_sample_confidence(comparison.recent + comparison.previous),
    )


def consistency_trend(sessions: Iterable[SessionRecord], now: datetime,
                      bucketer: CalendarBucketer) -> ConsistencyTrend:
    """Spread of daily counts over the trailing 30 days; lower spread scores higher"""
    counts = [entry.count for entry in monthly_trend(sessions, now, bucketer)]
    average = sum(counts) / len(counts)

    if average == 0:
        logger.debug("No qualifying sessions in the trailing 30 days, consistency is 0")
        return ConsistencyTrend(
            consistency_score=0.0,
            level=ConsistencyLevel.INCONSISTENT,
            average_sessions_per_day=0.0,
            standard_deviation=0.0,
        )

    variance = sum((count - average) ** 2 for count in counts) / len(counts)
    deviation = math.sqrt(variance)
    score = max(0.0, min(1.0, 1.0 - deviation / max(1.0, average)))

    if score >= 0.8:
        level = ConsistencyLevel.VERY_CONSISTENT
    elif score >= 0.6:
        level = ConsistencyLevel.CONSISTENT
    elif score >= 0.4:
        level = ConsistencyLevel.MODERATE
    else:
        level = ConsistencyLevel.INCONSISTENT

    return ConsistencyTrend(
        consistency_score=score,
        level=level,
        average_sessions_per_day=average,
        standard_deviation=deviation,
    )


def _completion_stats(window: List[SessionRecord]):
    rate = sum(1 for s in window if s.completed) / len(window)
    variance = sum(((1.0 if s.completed else 0.0) - rate) ** 2 for s in window) / len(window)
    avg_time = sum(s.duration for s in window) / len(window)
    return avg_time, rate, 1.0 - min(1.0, math.sqrt(variance))


def performance_trend(sessions: Iterable[SessionRecord], now: datetime,
                      bucketer: CalendarBucketer) -> PerformanceTrend:
    """Trailing 30 days vs the 30 before them across duration, completion and steadiness"""
    today = bucketer.local_date(now)
    recent_start = today - timedelta(days=MONTHLY_TREND_DAYS - 1)
    previous_start = recent_start - timedelta(days=MONTHLY_TREND_DAYS)

    recent, previous = [], []
    for session, day in iter_eligible(sessions, now, bucketer, qualifying_only=False, focus_only=True):
        if recent_start <= day <= today:
            recent.append(session)
        elif previous_start <= day < recent_start:
            previous.append(session)

    if not recent or not previous:
        return PerformanceTrend(
            average_completion_time=0.0,
            average_completion_rate=0.0,
            consistency_score=0.0,
            trend=TrendDirection.STABLE,
        )

    recent_time, recent_rate, recent_consistency = _completion_stats(recent)
    previous_time, previous_rate, previous_consistency = _completion_stats(previous)

    signals = [
        abs(recent_time - previous_time) < 60,
        recent_rate > previous_rate,
        recent_consistency > previous_consistency,
    ]
    improvements = sum(signals)
    if improvements >= 2:
        trend = TrendDirection.IMPROVING
    elif improvements == 0:
        trend = TrendDirection.DECLINING
    else:
        trend = TrendDirection.STABLE

    return PerformanceTrend(
        average_completion_time=recent_time,
        average_completion_rate=recent_rate,
        consistency_score=recent_consistency,
        trend=trend,
    )
