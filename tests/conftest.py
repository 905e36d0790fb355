"""
Pytest configuration and shared fixtures for the FocusFlow analytics tests.

Every test runs against a fixed calendar: America/New_York, weeks starting
on Sunday, and "now" pinned to Wednesday 2025-06-11 20:00 local time.
"""

from datetime import date, datetime, timedelta

import pytest

from focusflow.core.bucketer import CalendarBucketer
from focusflow.models.enums import DayOfWeek, SessionCategory
from focusflow.models.session import SessionRecord

TIMEZONE = "America/New_York"


@pytest.fixture
def bucketer():
    """New York calendar, weeks start on Sunday."""
    return CalendarBucketer(TIMEZONE, DayOfWeek.SUNDAY)


@pytest.fixture
def local(bucketer):
    """Build an aware local datetime: local(2025, 6, 11, 9)."""
    def _local(year, month, day, hour=9, minute=0, second=0):
        return bucketer.tz.localize(datetime(year, month, day, hour, minute, second))
    return _local


@pytest.fixture
def now(local):
    """Wednesday evening of the week Sun 2025-06-08 .. Sat 2025-06-14."""
    return local(2025, 6, 11, 20)


@pytest.fixture
def make_session():
    """Factory for session records; duration defaults to a 25 minute focus block."""
    def _make(when, duration=1500, category=SessionCategory.FOCUS, completed=True, notes=None):
        return SessionRecord(date=when, duration=duration, category=category,
                             completed=completed, notes=notes)
    return _make


@pytest.fixture
def sessions_on(local, make_session):
    """Create `count` qualifying sessions on a local date, one per hour from 9:00."""
    def _sessions_on(day: date, count=1, start_hour=9, **kwargs):
        return [
            make_session(local(day.year, day.month, day.day, start_hour + i), **kwargs)
            for i in range(count)
        ]
    return _sessions_on


@pytest.fixture
def mon_tue_wed(sessions_on):
    """One qualifying session on each of Mon 9, Tue 10 and Wed 11 June 2025."""
    return (
        sessions_on(date(2025, 6, 9))
        + sessions_on(date(2025, 6, 10))
        + sessions_on(date(2025, 6, 11))
    )


@pytest.fixture
def week_of():
    """The seven dates of the fixed week, Sunday first."""
    start = date(2025, 6, 8)
    return [start + timedelta(days=i) for i in range(7)]


def pytest_configure(config):
    """Configure pytest with custom settings."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
