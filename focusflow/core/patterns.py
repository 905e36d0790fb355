#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
FocusFlow Analytics - Pattern Analysis
Time-of-day / weekday habits, session statistics and focus likelihood

Version: 1.0.0
"""

import logging
from collections import Counter
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, TypeVar

from focusflow.core.bucketer import CalendarBucketer, iter_eligible
from focusflow.models.analytics import (
    CorrelationAnalysis,
    DayFrequency,
    FocusLikelihood,
    OptimalTimePrediction,
    SessionStatistics,
    TimeFrequency,
)
from focusflow.models.enums import Confidence, DayOfWeek, TimeOfDay
from focusflow.models.session import SessionRecord

logger = logging.getLogger(__name__)

SESSIONS_PER_CYCLE = 4
MIN_SESSIONS_FOR_CORRELATION = 5

T = TypeVar("T")


def time_of_day(hour: int) -> TimeOfDay:
    return TimeOfDay.from_hour(hour)


def most_frequent(counts: Dict[T, int], order: Sequence[T]) -> Optional[T]:
    """Highest count wins; ties resolve to the earliest key in `order`"""
    best, best_count = None, 0
    for key in order:
        count = counts.get(key, 0)
        if count > best_count:
            best, best_count = key, count
    return best


def _focus_sessions(sessions, now, bucketer) -> List[SessionRecord]:
    return [s for s, _ in iter_eligible(sessions, now, bucketer, qualifying_only=False, focus_only=True)]

# ===== FREQUENCIES =====

def focus_frequency_by_time(sessions: Iterable[SessionRecord], now: datetime,
                            bucketer: CalendarBucketer) -> TimeFrequency:
    counts = Counter(time_of_day(bucketer.hour(s.date)) for s in _focus_sessions(sessions, now, bucketer))
    return {bucket: counts[bucket] for bucket in TimeOfDay if counts[bucket]}


def focus_frequency_by_day(sessions: Iterable[SessionRecord], now: datetime,
                           bucketer: CalendarBucketer) -> DayFrequency:
    counts = Counter(bucketer.weekday(s.date) for s in _focus_sessions(sessions, now, bucketer))
    return {day: counts[day] for day in DayOfWeek if counts[day]}


def best_focus_time(sessions: Iterable[SessionRecord], now: datetime,
                    bucketer: CalendarBucketer) -> Optional[TimeOfDay]:
    """Most frequent time-of-day bucket, None without focus sessions"""
    return most_frequent(focus_frequency_by_time(sessions, now, bucketer), list(TimeOfDay))


def most_consistent_day(sessions: Iterable[SessionRecord], now: datetime,
                        bucketer: CalendarBucketer) -> Optional[DayOfWeek]:
    """Most frequent weekday (Sunday first on ties), None without focus sessions"""
    return most_frequent(focus_frequency_by_day(sessions, now, bucketer), list(DayOfWeek))

# ===== STATISTICS =====

def completion_rate(sessions: Iterable[SessionRecord], now: datetime,
                    bucketer: CalendarBucketer) -> float:
    """Percentage of focus sessions that ran to completion"""
    focus = _focus_sessions(sessions, now, bucketer)
    if not focus:
        return 0.0
    return sum(1 for s in focus if s.completed) / len(focus) * 100


def session_statistics(sessions: Iterable[SessionRecord], now: datetime,
                       bucketer: CalendarBucketer) -> SessionStatistics:
    sessions = list(sessions)
    entries = list(iter_eligible(sessions, now, bucketer))
    if not entries:
        logger.debug("No qualifying sessions for statistics")
        return SessionStatistics(completion_rate=completion_rate(sessions, now, bucketer))

    total_time = sum(s.duration for s, _ in entries)
    unique_days = len({day for _, day in entries})
    return SessionStatistics(
        total_sessions=len(entries),
        total_focus_time=total_time,
        average_duration=total_time / len(entries),
        average_daily_focus_time=total_time / unique_days,
        completion_rate=completion_rate(sessions, now, bucketer),
        total_cycles=len(entries) // SESSIONS_PER_CYCLE,
    )

# ===== PREDICTIONS =====

def optimal_focus_time(sessions: Iterable[SessionRecord], now: datetime,
                       bucketer: CalendarBucketer) -> Optional[OptimalTimePrediction]:
    focus = _focus_sessions(sessions, now, bucketer)
    if not focus:
        return None

    hour_counts: Counter = Counter()
    hour_completed: Counter = Counter()
    for session in focus:
        hour = bucketer.hour(session.date)
        hour_counts[hour] += 1
        if session.completed:
            hour_completed[hour] += 1

    best_hour = most_frequent(hour_counts, range(24))
    count = hour_counts[best_hour]
    return OptimalTimePrediction(
        hour=best_hour,
        time_of_day=time_of_day(best_hour),
        session_count=count,
        average_completion_rate=hour_completed[best_hour] / count,
        confidence=Confidence.HIGH if count >= 3 else Confidence.MEDIUM,
    )


def weeks_of_data(sessions: Iterable[SessionRecord], now: datetime,
                  bucketer: CalendarBucketer) -> int:
    """Calendar weeks spanned by focus history, counting partial weeks"""
    days = [day for _, day in iter_eligible(sessions, now, bucketer, qualifying_only=False, focus_only=True)]
    if not days:
        return 0
    first = bucketer.week_start_date(min(days))
    last = bucketer.week_start_date(max(days))
    return (last - first).days // 7 + 1


def focus_likelihood_today(sessions: Iterable[SessionRecord], now: datetime,
                           bucketer: CalendarBucketer, streak: int = 0,
                           sessions_this_week: int = 0) -> FocusLikelihood:
    """
    How likely a focus session is today, from the share of past weeks with a
    session on today's weekday (70 %) and the current streak (30 %).
    """
    sessions = list(sessions)
    total_weeks = weeks_of_data(sessions, now, bucketer)
    if total_weeks == 0:
        return FocusLikelihood(probability=0.5, confidence=Confidence.LOW, factors=["No historical data"])

    weekday = bucketer.weekday(now)
    on_weekday = sum(1 for s in _focus_sessions(sessions, now, bucketer) if bucketer.weekday(s.date) == weekday)
    probability = min(1.0, on_weekday / total_weeks)
    streak_factor = min(1.0, max(0, streak) / 7)
    adjusted = probability * 0.7 + streak_factor * 0.3

    if total_weeks >= 4:
        confidence = Confidence.HIGH
    elif total_weeks >= 2:
        confidence = Confidence.MEDIUM
    else:
        confidence = Confidence.LOW

    factors = []
    if streak > 0:
        factors.append(f"Active {streak}-day streak")
    if probability > 0.7:
        factors.append(f"You typically focus on {weekday.display_name}")
    if sessions_this_week > 0:
        factors.append(f"Already {sessions_this_week} focus session(s) this week")

    return FocusLikelihood(
        probability=adjusted,
        confidence=confidence,
        factors=factors or ["No patterns detected"],
    )


def time_completion_correlation(sessions: Iterable[SessionRecord], now: datetime,
                                bucketer: CalendarBucketer) -> Optional[CorrelationAnalysis]:
    """Completion rate per daytime bucket; None below five focus sessions"""
    focus = _focus_sessions(sessions, now, bucketer)
    if len(focus) < MIN_SESSIONS_FOR_CORRELATION:
        return None

    buckets: Dict[TimeOfDay, List[SessionRecord]] = {
        TimeOfDay.MORNING: [], TimeOfDay.AFTERNOON: [], TimeOfDay.EVENING: [],
    }
    for session in focus:
        bucket = time_of_day(bucketer.hour(session.date))
        if bucket in buckets:
            buckets[bucket].append(session)

    rates = {
        bucket: (sum(1 for s in items if s.completed) / len(items) if items else 0.0)
        for bucket, items in buckets.items()
    }
    best = TimeOfDay.MORNING
    for bucket in (TimeOfDay.AFTERNOON, TimeOfDay.EVENING):
        if rates[bucket] > rates[best]:
            best = bucket

    return CorrelationAnalysis(
        morning_completion_rate=rates[TimeOfDay.MORNING],
        afternoon_completion_rate=rates[TimeOfDay.AFTERNOON],
        evening_completion_rate=rates[TimeOfDay.EVENING],
        best_time=best,
    )
