# models/analytics.py

from dataclasses import dataclass, field, fields
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from focusflow.models.enums import (
    Confidence,
    ConsistencyLevel,
    DayOfWeek,
    GoalPeriod,
    InsightType,
    RecommendationType,
    TimeOfDay,
    TrendDirection,
)


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, list):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {(_plain(k) if isinstance(k, Enum) else k): _plain(v) for k, v in value.items()}
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


class _Serializable:
    def to_dict(self) -> Dict[str, Any]:
        return {f.name: _plain(getattr(self, f.name)) for f in fields(self)}

# ===== SERIES =====

@dataclass(frozen=True)
class DailyCount(_Serializable):
    day: date
    count: int = 0


@dataclass(frozen=True)
class MonthlyCount(_Serializable):
    month: date  # first day of the month
    count: int = 0

# ===== COMPARISONS =====

@dataclass(frozen=True)
class PeriodComparison(_Serializable):
    """
    recent vs previous count.

    A zero previous baseline with recent > 0 is reported as a fixed 100.0 %
    change with from_zero_baseline=True; change_percent is always finite.
    """
    recent: int
    previous: int
    change_percent: float
    is_improving: bool
    from_zero_baseline: bool = False


@dataclass(frozen=True)
class WeekComparison(_Serializable):
    this_week: int
    last_week: int
    comparison: PeriodComparison
    this_week_completion_rate: float = 0.0
    last_week_completion_rate: float = 0.0

    @property
    def change(self) -> float:
        return self.comparison.change_percent

    @property
    def completion_change(self) -> float:
        return self.this_week_completion_rate - self.last_week_completion_rate


@dataclass(frozen=True)
class MonthComparison(_Serializable):
    this_month: int
    last_month: int
    comparison: PeriodComparison
    this_month_avg_duration: float = 0.0
    last_month_avg_duration: float = 0.0

    @property
    def change(self) -> float:
        return self.comparison.change_percent

    @property
    def duration_change(self) -> float:
        return self.this_month_avg_duration - self.last_month_avg_duration

# ===== TRENDS =====

@dataclass(frozen=True)
class TrendSummary(_Serializable):
    """Trend inputs consumed by the insight rules"""
    weekly: List[DailyCount] = field(default_factory=list)
    week_comparison: Optional[WeekComparison] = None

    @property
    def weekly_total(self) -> int:
        return sum(entry.count for entry in self.weekly)


@dataclass(frozen=True)
class FrequencyTrend(_Serializable):
    recent_period: int
    previous_period: int
    change: float
    direction: TrendDirection
    confidence: Confidence


@dataclass(frozen=True)
class ConsistencyTrend(_Serializable):
    consistency_score: float
    level: ConsistencyLevel
    average_sessions_per_day: float
    standard_deviation: float


@dataclass(frozen=True)
class PerformanceTrend(_Serializable):
    average_completion_time: float
    average_completion_rate: float
    consistency_score: float
    trend: TrendDirection

# ===== PATTERNS =====

@dataclass(frozen=True)
class SessionStatistics(_Serializable):
    total_sessions: int = 0
    total_focus_time: float = 0.0  # seconds
    average_duration: float = 0.0
    average_daily_focus_time: float = 0.0
    completion_rate: float = 0.0  # percent
    total_cycles: int = 0


@dataclass(frozen=True)
class OptimalTimePrediction(_Serializable):
    hour: int
    time_of_day: TimeOfDay
    session_count: int
    average_completion_rate: float
    confidence: Confidence

    @property
    def time_description(self) -> str:
        suffix = "AM" if self.hour < 12 else "PM"
        display = self.hour % 12 or 12
        return f"{display} {suffix}"


@dataclass(frozen=True)
class FocusLikelihood(_Serializable):
    probability: float
    confidence: Confidence
    factors: List[str] = field(default_factory=list)

    @property
    def percentage(self) -> int:
        return int(self.probability * 100)

    @property
    def description(self) -> str:
        if self.probability >= 0.8:
            return "Very Likely"
        if self.probability >= 0.6:
            return "Likely"
        if self.probability >= 0.4:
            return "Possible"
        if self.probability >= 0.2:
            return "Unlikely"
        return "Very Unlikely"


@dataclass(frozen=True)
class CorrelationAnalysis(_Serializable):
    morning_completion_rate: float
    afternoon_completion_rate: float
    evening_completion_rate: float
    best_time: TimeOfDay

# ===== INSIGHTS =====

@dataclass(frozen=True)
class Insight(_Serializable):
    title: str
    message: str
    icon: str
    weight: int
    insight_type: InsightType = InsightType.PATTERN


@dataclass(frozen=True)
class Recommendation(_Serializable):
    title: str
    description: str
    priority: int
    recommendation_type: RecommendationType

# ===== GOALS =====

@dataclass(frozen=True)
class GoalPrediction(_Serializable):
    """
    Linear-pace projection of the current period.

    probability is projected / target clamped to [0, 1].
    """
    probability: float
    achievable: bool
    confidence: Confidence
    projected_total: float = 0.0
    has_goal: bool = True

    @property
    def percentage(self) -> int:
        return int(self.probability * 100)

    @classmethod
    def no_goal(cls) -> "GoalPrediction":
        return cls(probability=0.0, achievable=False, confidence=Confidence.LOW,
                   projected_total=0.0, has_goal=False)


@dataclass(frozen=True)
class GoalProgress(_Serializable):
    period: GoalPeriod
    target: int
    progress: int
    percentage: float
    remaining: int
    days_remaining: int
    recommended_daily: float
    achieved: bool
    prediction: GoalPrediction

# ===== SUMMARIES =====

@dataclass(frozen=True)
class WeeklySummary(_Serializable):
    sessions_this_week: int
    sessions_last_week: int
    change: float
    consistency_score: float
    focus_likelihood_today: float
    recommendations: List[Recommendation] = field(default_factory=list)


@dataclass(frozen=True)
class MonthlySummary(_Serializable):
    sessions_this_month: int
    sessions_last_month: int
    change: float
    average_completion_rate: float
    consistency_score: float
    trend: TrendDirection


DayFrequency = Dict[DayOfWeek, int]
TimeFrequency = Dict[TimeOfDay, int]
