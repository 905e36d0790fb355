# models/enums.py

from enum import Enum


class SessionCategory(Enum):
    """Session phase types"""
    FOCUS = "focus"
    SHORT_BREAK = "shortBreak"
    LONG_BREAK = "longBreak"

    @property
    def display_name(self) -> str:
        return {
            SessionCategory.FOCUS: "Focus",
            SessionCategory.SHORT_BREAK: "Short Break",
            SessionCategory.LONG_BREAK: "Long Break",
        }[self]

    @property
    def is_primary(self) -> bool:
        """Only focus intervals count toward streaks and goals"""
        return self is SessionCategory.FOCUS


class GoalPeriod(Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class Confidence(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _CONFIDENCE_ORDER.index(self)

    def downgrade(self) -> "Confidence":
        return _CONFIDENCE_ORDER[max(0, self.rank - 1)]


_CONFIDENCE_ORDER = [Confidence.LOW, Confidence.MEDIUM, Confidence.HIGH]


class TimeOfDay(Enum):
    """Local-hour buckets; declaration order is the tie-break order"""
    MORNING = "morning"      # [5, 12)
    AFTERNOON = "afternoon"  # [12, 17)
    EVENING = "evening"      # [17, 22)
    NIGHT = "night"          # [22, 5)

    @classmethod
    def from_hour(cls, hour: int) -> "TimeOfDay":
        if 5 <= hour < 12:
            return cls.MORNING
        if 12 <= hour < 17:
            return cls.AFTERNOON
        if 17 <= hour < 22:
            return cls.EVENING
        return cls.NIGHT

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class DayOfWeek(Enum):
    """Local weekday numbered 1 (Sunday) to 7 (Saturday)"""
    SUNDAY = 1
    MONDAY = 2
    TUESDAY = 3
    WEDNESDAY = 4
    THURSDAY = 5
    FRIDAY = 6
    SATURDAY = 7

    @classmethod
    def from_python_weekday(cls, weekday: int) -> "DayOfWeek":
        """Convert date.weekday() (Monday=0) to the 1..7 Sunday-first numbering"""
        return cls((weekday + 1) % 7 + 1)

    @classmethod
    def parse(cls, value) -> "DayOfWeek":
        if isinstance(value, DayOfWeek):
            return value
        if isinstance(value, int):
            return cls(value)
        return cls[str(value).strip().upper()]

    @property
    def python_weekday(self) -> int:
        return (self.value + 5) % 7

    @property
    def display_name(self) -> str:
        return self.name.capitalize()


class InsightType(Enum):
    STREAK = "streak"
    PATTERN = "pattern"
    PROGRESS = "progress"
    ACHIEVEMENT = "achievement"


class RecommendationType(Enum):
    OPTIMAL_TIME = "optimal_time"
    FREQUENCY = "frequency"
    CONSISTENCY = "consistency"
    COMPLETION = "completion"


class TrendDirection(Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class ConsistencyLevel(Enum):
    VERY_CONSISTENT = "very_consistent"
    CONSISTENT = "consistent"
    MODERATE = "moderate"
    INCONSISTENT = "inconsistent"
