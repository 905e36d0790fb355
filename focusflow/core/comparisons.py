#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
FocusFlow Analytics - Period Comparator
Period-over-period deltas with an explicit zero-baseline policy

Version: 1.0.0
"""

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, List, Tuple

from focusflow.core.bucketer import CalendarBucketer, iter_eligible
from focusflow.models.analytics import MonthComparison, PeriodComparison, WeekComparison
from focusflow.models.session import SessionRecord

logger = logging.getLogger(__name__)

# Reported change when the previous period is empty and the recent one is not
ZERO_BASELINE_CHANGE_PERCENT = 100.0

TRAILING_WINDOW_DAYS = 15


def _as_count(value) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"⚠️ Non-numeric period count {value!r}, using 0")
        return 0


def compare(recent, previous) -> PeriodComparison:
    """
    Compare two period counts.

    compare(0, 0)  -> 0.0 %, not improving
    compare(5, 0)  -> 100.0 %, improving, from_zero_baseline
    compare(6, 4)  -> 50.0 %, improving
    """
    recent = _as_count(recent)
    previous = _as_count(previous)

    if previous == 0:
        if recent == 0:
            return PeriodComparison(recent=0, previous=0, change_percent=0.0, is_improving=False)
        return PeriodComparison(
            recent=recent,
            previous=0,
            change_percent=ZERO_BASELINE_CHANGE_PERCENT,
            is_improving=True,
            from_zero_baseline=True,
        )

    change = (recent - previous) / previous * 100
    return PeriodComparison(
        recent=recent,
        previous=previous,
        change_percent=change,
        is_improving=recent >= previous,
    )

# ===== WINDOW HELPERS =====

def _focus_entries(sessions: Iterable[SessionRecord], now: datetime,
                   bucketer: CalendarBucketer) -> List[Tuple[SessionRecord, date]]:
    return list(iter_eligible(sessions, now, bucketer, qualifying_only=False, focus_only=True))


def _in_window(entries: List[Tuple[SessionRecord, date]], first: date, last: date) -> List[SessionRecord]:
    return [session for session, day in entries if first <= day <= last]


def _qualifying_count(window: List[SessionRecord]) -> int:
    return sum(1 for s in window if s.is_qualifying)


def _completion_rate(window: List[SessionRecord]) -> float:
    if not window:
        return 0.0
    return sum(1 for s in window if s.completed) / len(window)


def _average_duration(window: List[SessionRecord]) -> float:
    completed = [s.duration for s in window if s.is_qualifying]
    if not completed:
        return 0.0
    return sum(completed) / len(completed)

# ===== STANDING COMPARISONS =====

def compare_this_week_vs_last_week(sessions: Iterable[SessionRecord], now: datetime,
                                   bucketer: CalendarBucketer) -> WeekComparison:
    today = bucketer.local_date(now)
    week_start = bucketer.week_start_date(today)
    entries = _focus_entries(sessions, now, bucketer)

    this_week = _in_window(entries, week_start, today)
    last_week = _in_window(entries, week_start - timedelta(days=7), week_start - timedelta(days=1))

    comparison = compare(_qualifying_count(this_week), _qualifying_count(last_week))
    return WeekComparison(
        this_week=comparison.recent,
        last_week=comparison.previous,
        comparison=comparison,
        this_week_completion_rate=_completion_rate(this_week),
        last_week_completion_rate=_completion_rate(last_week),
    )


def compare_this_month_vs_last_month(sessions: Iterable[SessionRecord], now: datetime,
                                     bucketer: CalendarBucketer) -> MonthComparison:
    today = bucketer.local_date(now)
    month_start = bucketer.month_start(today)
    entries = _focus_entries(sessions, now, bucketer)

    this_month = _in_window(entries, month_start, today)
    last_month = _in_window(entries, bucketer.add_months(month_start, -1),
                            month_start - timedelta(days=1))

    comparison = compare(_qualifying_count(this_month), _qualifying_count(last_month))
    return MonthComparison(
        this_month=comparison.recent,
        last_month=comparison.previous,
        comparison=comparison,
        this_month_avg_duration=_average_duration(this_month),
        last_month_avg_duration=_average_duration(last_month),
    )


def compare_trailing_days(sessions: Iterable[SessionRecord], now: datetime,
                          bucketer: CalendarBucketer,
                          days: int = TRAILING_WINDOW_DAYS) -> PeriodComparison:
    """Last `days` calendar days (today inclusive) vs the `days` before them"""
    if days <= 0:
        return compare(0, 0)

    today = bucketer.local_date(now)
    recent_start = today - timedelta(days=days - 1)
    previous_start = recent_start - timedelta(days=days)
    entries = _focus_entries(sessions, now, bucketer)

    recent = _in_window(entries, recent_start, today)
    previous = _in_window(entries, previous_start, recent_start - timedelta(days=1))
    return compare(_qualifying_count(recent), _qualifying_count(previous))
