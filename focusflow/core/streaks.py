# core/streaks.py

from datetime import date, datetime, timedelta
from typing import Iterable, List, Set

from focusflow.core.bucketer import CalendarBucketer, eligible_days
from focusflow.models.session import SessionRecord


def _qualifying_days(sessions: Iterable[SessionRecord], now: datetime,
                     bucketer: CalendarBucketer) -> Set[date]:
    return set(eligible_days(sessions, now, bucketer))


def streak_days(sessions: Iterable[SessionRecord], now: datetime,
                bucketer: CalendarBucketer) -> List[date]:
    """
    Dates of the current streak, oldest first.

    The walk starts at today when today already has a qualifying session,
    otherwise at yesterday: an unfinished today does not break the streak.
    """
    days = _qualifying_days(sessions, now, bucketer)
    if not days:
        return []

    today = bucketer.local_date(now)
    current = today if today in days else today - timedelta(days=1)

    streak = []
    while current in days:
        streak.append(current)
        current -= timedelta(days=1)

    return list(reversed(streak))


def current_streak(sessions: Iterable[SessionRecord], now: datetime,
                   bucketer: CalendarBucketer) -> int:
    """Consecutive qualifying days ending today or yesterday"""
    return len(streak_days(sessions, now, bucketer))


def longest_streak(sessions: Iterable[SessionRecord], now: datetime,
                   bucketer: CalendarBucketer) -> int:
    """Longest run of consecutive qualifying days anywhere in history"""
    days = sorted(_qualifying_days(sessions, now, bucketer))
    if not days:
        return 0

    longest = current = 1
    for previous, day in zip(days, days[1:]):
        if day == previous + timedelta(days=1):
            current += 1
            longest = max(longest, current)
        else:
            current = 1

    return longest
