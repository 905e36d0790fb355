from datetime import date, datetime

import pytest

from focusflow.models.analytics import DailyCount, FocusLikelihood, GoalPrediction
from focusflow.models.enums import Confidence, DayOfWeek, GoalPeriod, SessionCategory, TimeOfDay
from focusflow.models.session import Goal, SessionRecord, ValidationError


class TestSessionRecord:

    def test_create_validates(self, local):
        with pytest.raises(ValidationError):
            SessionRecord.create(local(2025, 6, 10), float("nan"))
        with pytest.raises(ValidationError):
            SessionRecord.create(local(2025, 6, 10), True)
        with pytest.raises(ValidationError):
            SessionRecord.create(local(2025, 6, 10), 1500, completed="yes")
        with pytest.raises(ValidationError):
            SessionRecord.create(local(2025, 6, 10), 1500, notes="x" * 1001)

    def test_create_accepts_boundaries(self, local):
        assert SessionRecord.create(local(2025, 6, 10), 3600).duration == 3600.0
        assert SessionRecord.create(local(2025, 6, 10), 0.5).duration == 0.5

    def test_qualifying(self, local):
        assert SessionRecord(date=local(2025, 6, 10), duration=1500).is_qualifying
        assert not SessionRecord(date=local(2025, 6, 10), duration=1500, completed=False).is_qualifying
        assert not SessionRecord(date=local(2025, 6, 10), duration=300,
                                 category=SessionCategory.LONG_BREAK).is_qualifying

    def test_uncountable_records(self, local):
        assert not SessionRecord(date=local(2025, 6, 10), duration=0).is_countable()
        assert not SessionRecord(date=local(2025, 6, 10), duration=3601).is_countable()
        assert not SessionRecord(date=local(2025, 6, 10), duration=float("inf")).is_countable()
        assert not SessionRecord(date="2025-06-10", duration=1500).is_countable()

    def test_formatting(self, local):
        record = SessionRecord(date=local(2025, 6, 10), duration=1505.9)
        assert record.duration_minutes == 25
        assert record.formatted_duration == "25:05"

    def test_dict_round_trip(self, local):
        record = SessionRecord.create(local(2025, 6, 10, 9, 30), 1500, notes="plan")
        data = record.to_dict()
        assert data["date"] == "2025-06-10T09:30:00-04:00"
        assert data["duration"] == 1500
        assert SessionRecord.from_dict(data) == record

    def test_from_dict_defaults(self):
        record = SessionRecord.from_dict({"date": "2025-06-10T09:00:00Z", "duration": 1500})
        assert record.category == SessionCategory.FOCUS
        assert record.completed is True
        assert record.date.utcoffset().total_seconds() == 0
        assert record.id

    def test_copies(self, local):
        record = SessionRecord(date=local(2025, 6, 10), duration=1500)
        assert record.with_notes("  done ").notes == "done"
        assert record.with_completed(False).completed is False
        assert record.completed is True


class TestGoal:

    def test_validation(self):
        assert Goal("weekly", 3).period == GoalPeriod.WEEKLY
        assert not Goal(GoalPeriod.MONTHLY).is_set
        with pytest.raises(ValidationError):
            Goal(GoalPeriod.WEEKLY, -1)
        with pytest.raises(ValueError):
            Goal("daily", 1)

    def test_dict_round_trip(self):
        goal = Goal(GoalPeriod.MONTHLY, 20)
        assert Goal.from_dict(goal.to_dict()) == goal


class TestEnums:

    @pytest.mark.parametrize("weekday, expected", [
        (0, DayOfWeek.MONDAY),
        (5, DayOfWeek.SATURDAY),
        (6, DayOfWeek.SUNDAY),
    ])
    def test_from_python_weekday(self, weekday, expected):
        assert DayOfWeek.from_python_weekday(weekday) == expected
        assert expected.python_weekday == weekday

    def test_parse_day(self):
        assert DayOfWeek.parse(" monday ") == DayOfWeek.MONDAY
        assert DayOfWeek.parse(7) == DayOfWeek.SATURDAY
        with pytest.raises(KeyError):
            DayOfWeek.parse("someday")

    @pytest.mark.parametrize("hour, bucket", [
        (4, TimeOfDay.NIGHT),
        (5, TimeOfDay.MORNING),
        (12, TimeOfDay.AFTERNOON),
        (17, TimeOfDay.EVENING),
        (22, TimeOfDay.NIGHT),
    ])
    def test_time_of_day_boundaries(self, hour, bucket):
        assert TimeOfDay.from_hour(hour) == bucket

    def test_confidence_downgrade_stops_at_low(self):
        assert Confidence.HIGH.downgrade() == Confidence.MEDIUM
        assert Confidence.LOW.downgrade() == Confidence.LOW


class TestValueObjects:

    def test_to_dict_uses_plain_values(self):
        assert DailyCount(date(2025, 6, 10), 2).to_dict() == {"day": "2025-06-10", "count": 2}
        likelihood = FocusLikelihood(0.65, Confidence.MEDIUM, ["Active 2-day streak"])
        assert likelihood.to_dict()["confidence"] == "medium"
        assert likelihood.description == "Likely"
        assert likelihood.percentage == 65

    def test_no_goal_prediction(self):
        prediction = GoalPrediction.no_goal()
        assert prediction.has_goal is False
        assert prediction.percentage == 0

    def test_naive_datetime_round_trip(self):
        record = SessionRecord(date=datetime(2025, 6, 10, 9, 0), duration=1500)
        assert SessionRecord.from_dict(record.to_dict()).date == datetime(2025, 6, 10, 9, 0)
