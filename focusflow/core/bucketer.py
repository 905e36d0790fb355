#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
FocusFlow Analytics - Calendar Bucketer
Local day / week / month boundaries shared by every analytics component

Version: 1.0.0
"""

import calendar
import logging
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from focusflow.models.enums import DayOfWeek
from focusflow.models.session import MAX_SESSION_DURATION_SECONDS, SessionRecord
from focusflow.utils.datetime_utils import get_timezone

logger = logging.getLogger(__name__)


class CalendarBucketer:
    """
    Single source of truth for calendar arithmetic.

    Aware instants are converted into the local zone; naive instants are read
    as local wall-clock time. Day differences are calendar-day differences,
    never elapsed seconds / 86400, so DST transitions do not shift buckets.
    """

    def __init__(self, timezone: Union[str, tzinfo, None] = "UTC",
                 first_weekday: Union[DayOfWeek, int, str] = DayOfWeek.SUNDAY):
        self.tz = get_timezone(timezone)
        self.first_weekday = DayOfWeek.parse(first_weekday)

    def __repr__(self) -> str:
        return f"CalendarBucketer(timezone={self.timezone_name!r}, first_weekday={self.first_weekday.name})"

    @property
    def timezone_name(self) -> str:
        return getattr(self.tz, "zone", None) or str(self.tz)

    # ===== INSTANTS =====

    def localize(self, instant: datetime) -> datetime:
        if instant.tzinfo is None:
            return self._attach(instant)
        return instant.astimezone(self.tz)

    def _attach(self, naive: datetime) -> datetime:
        if hasattr(self.tz, "localize"):
            return self.tz.localize(naive)
        return naive.replace(tzinfo=self.tz)

    def local_date(self, instant: datetime) -> date:
        return self.localize(instant).date()

    def midnight(self, day: date) -> datetime:
        """Aware local start of the given calendar day"""
        return self._attach(datetime.combine(day, time.min))

    def start_of_day(self, instant: datetime) -> datetime:
        return self.midnight(self.local_date(instant))

    def start_of_week(self, instant: datetime) -> datetime:
        return self.midnight(self.week_start_date(instant))

    def start_of_month(self, instant: datetime) -> datetime:
        return self.midnight(self.local_date(instant).replace(day=1))

    def start_of_year(self, instant: datetime) -> datetime:
        return self.midnight(self.local_date(instant).replace(month=1, day=1))

    def hour(self, instant: datetime) -> int:
        return self.localize(instant).hour

    def weekday(self, instant: datetime) -> DayOfWeek:
        return DayOfWeek.from_python_weekday(self.local_date(instant).weekday())

    def is_future(self, instant: datetime, now: datetime) -> bool:
        return self.localize(instant) > self.localize(now)

    def same_day(self, a: datetime, b: datetime) -> bool:
        return self.local_date(a) == self.local_date(b)

    def same_month(self, a: datetime, b: datetime) -> bool:
        da, db = self.local_date(a), self.local_date(b)
        return (da.year, da.month) == (db.year, db.month)

    def days_between(self, a: datetime, b: datetime) -> int:
        """Calendar days from a to b (negative when b is earlier)"""
        return (self.local_date(b) - self.local_date(a)).days

    # ===== CALENDAR DATES =====

    def week_start_date(self, instant: Union[datetime, date]) -> date:
        day = self.local_date(instant) if isinstance(instant, datetime) else instant
        offset = (day.weekday() - self.first_weekday.python_weekday) % 7
        return day - timedelta(days=offset)

    def week_days(self, instant: datetime) -> List[date]:
        start = self.week_start_date(instant)
        return [start + timedelta(days=i) for i in range(7)]

    @staticmethod
    def add_days(day: date, days: int) -> date:
        return day + timedelta(days=days)

    @staticmethod
    def month_start(day: date) -> date:
        return day.replace(day=1)

    @staticmethod
    def add_months(day: date, months: int) -> date:
        """First day of the month `months` away from day's month"""
        index = day.year * 12 + (day.month - 1) + months
        return date(index // 12, index % 12 + 1, 1)

    @staticmethod
    def days_in_month(day: date) -> int:
        return calendar.monthrange(day.year, day.month)[1]

    @staticmethod
    def day_range(end_day: date, days: int) -> List[date]:
        """`days` consecutive dates ending with end_day, oldest first"""
        return [end_day - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def iter_eligible(sessions: Iterable[SessionRecord], now: datetime, bucketer: CalendarBucketer,
                  qualifying_only: bool = True, focus_only: bool = False,
                  max_duration: float = MAX_SESSION_DURATION_SECONDS
                  ) -> Iterator[Tuple[SessionRecord, date]]:
    """
    Yield (session, local day) for sessions that may contribute to aggregates.

    Future-dated sessions (clock skew) and records with unusable duration or
    date are skipped rather than raised.
    """
    if not sessions:
        return
    local_now = bucketer.localize(now)
    for session in sessions:
        try:
            if not session.is_countable(max_duration):
                logger.debug(f"Skipping uncountable session {getattr(session, 'id', '?')}")
                continue
            if qualifying_only and not session.is_qualifying:
                continue
            if focus_only and not session.category.is_primary:
                continue
            local = bucketer.localize(session.date)
            if local > local_now:
                logger.debug(f"Ignoring future-dated session {session.id}")
                continue
        except (AttributeError, TypeError, ValueError, OverflowError) as e:
            logger.warning(f"⚠️ Skipping malformed session record: {e}")
            continue
        yield session, local.date()


def eligible_days(sessions: Iterable[SessionRecord], now: datetime,
                  bucketer: CalendarBucketer, qualifying_only: bool = True) -> List[date]:
    return [day for _, day in iter_eligible(sessions, now, bucketer, qualifying_only=qualifying_only)]


def count_between(sessions: Iterable[SessionRecord], now: datetime, bucketer: CalendarBucketer,
                  first_day: date, last_day: Optional[date] = None,
                  qualifying_only: bool = True) -> int:
    """Count eligible sessions whose local day lies in [first_day, last_day]"""
    last_day = last_day or bucketer.local_date(now)
    return sum(1 for day in eligible_days(sessions, now, bucketer, qualifying_only)
               if first_day <= day <= last_day)
