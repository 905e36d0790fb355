# models/__init__.py

from .enums import (
    SessionCategory,
    GoalPeriod,
    Confidence,
    TimeOfDay,
    DayOfWeek,
    InsightType,
    RecommendationType,
    TrendDirection,
    ConsistencyLevel
)

from .session import (
    ValidationError,
    SessionRecord,
    Goal
)

from .analytics import (
    DailyCount,
    MonthlyCount,
    PeriodComparison,
    WeekComparison,
    MonthComparison,
    TrendSummary,
    Insight,
    Recommendation,
    GoalPrediction,
    GoalProgress,
    WeeklySummary,
    MonthlySummary
)

__all__ = [
    # Enums
    'SessionCategory',
    'GoalPeriod',
    'Confidence',
    'TimeOfDay',
    'DayOfWeek',
    'InsightType',
    'RecommendationType',
    'TrendDirection',
    'ConsistencyLevel',

    # Session models
    'ValidationError',
    'SessionRecord',
    'Goal',

    # Analytics value objects
    'DailyCount',
    'MonthlyCount',
    'PeriodComparison',
    'WeekComparison',
    'MonthComparison',
    'TrendSummary',
    'Insight',
    'Recommendation',
    'GoalPrediction',
    'GoalProgress',
    'WeeklySummary',
    'MonthlySummary'
]
