#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
FocusFlow Analytics - Insight Generator
Ranked rule table turning focus history into insights and recommendations

Version: 1.0.0
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from focusflow.core.bucketer import CalendarBucketer, iter_eligible
from focusflow.core.patterns import (
    SESSIONS_PER_CYCLE,
    best_focus_time,
    completion_rate,
    most_consistent_day,
    optimal_focus_time,
    session_statistics,
)
from focusflow.core.trends import consistency_trend, frequency_trend
from focusflow.models.analytics import Insight, Recommendation, TrendSummary
from focusflow.models.enums import (
    ConsistencyLevel,
    InsightType,
    RecommendationType,
    TimeOfDay,
    TrendDirection,
)
from focusflow.models.session import SessionRecord

logger = logging.getLogger(__name__)

# ===== CONTEXT =====

@dataclass
class InsightContext:
    """Signals shared by all rules; derived values are computed once per run"""
    sessions: List[SessionRecord]
    streak: int
    trends: TrendSummary
    now: datetime
    bucketer: CalendarBucketer
    _cache: Dict[str, object] = field(default_factory=dict, repr=False)

    def _memo(self, key: str, factory):
        if key not in self._cache:
            self._cache[key] = factory()
        return self._cache[key]

    @property
    def focus_count(self) -> int:
        return self._memo("focus_count", lambda: sum(
            1 for _ in iter_eligible(self.sessions, self.now, self.bucketer,
                                     qualifying_only=False, focus_only=True)))

    @property
    def completion_rate(self) -> float:
        return self._memo("completion_rate",
                          lambda: completion_rate(self.sessions, self.now, self.bucketer))

    @property
    def best_time(self) -> Optional[TimeOfDay]:
        return self._memo("best_time", lambda: best_focus_time(self.sessions, self.now, self.bucketer))

    @property
    def best_day(self):
        return self._memo("best_day", lambda: most_consistent_day(self.sessions, self.now, self.bucketer))

    @property
    def total_cycles(self) -> int:
        return self._memo("cycles", lambda: session_statistics(self.sessions, self.now, self.bucketer).total_cycles)

# ===== RULES =====

class InsightRule(ABC):
    """One signal, at most one insight"""

    rule_id: str = ""

    @abstractmethod
    def evaluate(self, context: InsightContext) -> Optional[Insight]:
        pass


class StreakRule(InsightRule):
    rule_id = "streak"

    def __init__(self, strong: int = 7, building: int = 3):
        self.strong = strong
        self.building = building

    def evaluate(self, context: InsightContext) -> Optional[Insight]:
        streak = context.streak
        if streak >= self.strong:
            return Insight(
                title="🔥 On Fire!",
                message=f"You've maintained a {streak}-day focus streak! Keep it up!",
                icon="flame.fill",
                weight=90,
                insight_type=InsightType.STREAK,
            )
        if streak >= self.building:
            return Insight(
                title="Great Start!",
                message=f"You're building momentum with a {streak}-day streak.",
                icon="flame.fill",
                weight=60,
                insight_type=InsightType.STREAK,
            )
        return None


class WeeklyVolumeRule(InsightRule):
    rule_id = "weekly_volume"

    def __init__(self, high: int = 10, solid: int = 5):
        self.high = high
        self.solid = solid

    def evaluate(self, context: InsightContext) -> Optional[Insight]:
        total = context.trends.weekly_total
        if total >= self.high:
            return Insight(
                title="Focus Machine",
                message=f"You've logged {total} focus sessions this week. Outstanding!",
                icon="bolt.fill",
                weight=80,
                insight_type=InsightType.PROGRESS,
            )
        if total >= self.solid:
            return Insight(
                title="Steady Rhythm",
                message=f"{total} focus sessions this week. You're in a great rhythm!",
                icon="metronome",
                weight=50,
                insight_type=InsightType.PROGRESS,
            )
        return None


class RisingWeekRule(InsightRule):
    rule_id = "rising_week"

    def __init__(self, min_change: float = 20.0):
        self.min_change = min_change

    def evaluate(self, context: InsightContext) -> Optional[Insight]:
        week = context.trends.week_comparison
        if week is None or week.comparison.from_zero_baseline:
            return None
        if week.change > self.min_change:
            return Insight(
                title="Rising Star!",
                message=f"You've increased your focus sessions by {int(week.change)}% this week!",
                icon="chart.line.uptrend.xyaxis",
                weight=70,
                insight_type=InsightType.PROGRESS,
            )
        return None


class ConsistentDayRule(InsightRule):
    rule_id = "consistent_day"

    def evaluate(self, context: InsightContext) -> Optional[Insight]:
        day = context.best_day
        if day is None:
            return None
        return Insight(
            title="Consistency Counts",
            message=f"You focus most on {day.display_name}s. Keep it consistent!",
            icon="calendar",
            weight=40,
            insight_type=InsightType.PATTERN,
        )


class TimeOfDayRule(InsightRule):
    rule_id = "time_of_day"

    TEMPLATES = {
        TimeOfDay.MORNING: ("Early Bird", "You focus best in the morning. Great way to start the day!",
                            "sunrise.fill"),
        TimeOfDay.AFTERNOON: ("Midday Momentum",
                              "You prefer afternoon focus sessions. Perfect for a midday boost!",
                              "sun.max.fill"),
        TimeOfDay.EVENING: ("Evening Warrior",
                            "You focus in the evenings. Great way to wind down with productivity!",
                            "moon.stars.fill"),
    }

    def evaluate(self, context: InsightContext) -> Optional[Insight]:
        template = self.TEMPLATES.get(context.best_time)
        if template is None:
            return None
        title, message, icon = template
        return Insight(title=title, message=message, icon=icon, weight=40,
                       insight_type=InsightType.PATTERN)


class CompletionRateRule(InsightRule):
    rule_id = "completion_rate"

    def __init__(self, excellent: float = 95.0, low: float = 60.0, min_sessions: int = 5):
        self.excellent = excellent
        self.low = low
        self.min_sessions = min_sessions

    def evaluate(self, context: InsightContext) -> Optional[Insight]:
        if context.focus_count == 0:
            return None
        rate = context.completion_rate
        if rate >= self.excellent:
            return Insight(
                title="Focused!",
                message="You're completing nearly all sessions. Outstanding dedication!",
                icon="checkmark.circle.fill",
                weight=65,
                insight_type=InsightType.ACHIEVEMENT,
            )
        if rate < self.low and context.focus_count >= self.min_sessions:
            return Insight(
                title="Finish Strong",
                message=f"You complete {int(rate)}% of your focus sessions. "
                        f"Shorter sessions can help you build the habit.",
                icon="arrow.uturn.forward",
                weight=75,
                insight_type=InsightType.PROGRESS,
            )
        return None


class CycleRule(InsightRule):
    rule_id = "cycles"

    def evaluate(self, context: InsightContext) -> Optional[Insight]:
        cycles = context.total_cycles
        if cycles < 1:
            return None
        plural = "" if cycles == 1 else "s"
        return Insight(
            title="Deep Focus",
            message=f"You've completed {cycles} full Pomodoro cycle{plural}!",
            icon="infinity",
            weight=30,
            insight_type=InsightType.ACHIEVEMENT,
        )

# ===== REGISTRY =====

class InsightRegistry:
    """Rules in priority order"""

    def __init__(self, load_defaults: bool = True):
        self.rules: List[InsightRule] = []
        if load_defaults:
            self._load_default_rules()

    def register_rule(self, rule: InsightRule) -> None:
        self.rules.append(rule)
        logger.debug(f"Registered insight rule: {rule.rule_id}")

    def _load_default_rules(self):
        for rule in (
            StreakRule(),
            WeeklyVolumeRule(),
            RisingWeekRule(),
            ConsistentDayRule(),
            TimeOfDayRule(),
            CompletionRateRule(),
            CycleRule(),
        ):
            self.register_rule(rule)

    def evaluate(self, context: InsightContext) -> List[Insight]:
        insights = []
        for rule in self.rules:
            try:
                insight = rule.evaluate(context)
            except Exception as e:
                logger.error(f"❌ Insight rule {rule.rule_id} failed: {e}")
                continue
            if insight is not None:
                insights.append(insight)
        # sorted() is stable: equal weights keep rule order
        return sorted(insights, key=lambda insight: insight.weight, reverse=True)


_default_registry = InsightRegistry()


def generate_insights(sessions: Iterable[SessionRecord], streak: int, trends: TrendSummary,
                      now: datetime, bucketer: CalendarBucketer,
                      registry: Optional[InsightRegistry] = None) -> List[Insight]:
    """Ranked insights; an empty history yields an empty list"""
    sessions = list(sessions or [])
    if not sessions:
        return []

    context = InsightContext(
        sessions=sessions,
        streak=max(0, streak or 0),
        trends=trends or TrendSummary(),
        now=now,
        bucketer=bucketer,
    )
    return (registry or _default_registry).evaluate(context)

# ===== RECOMMENDATIONS =====

def generate_recommendations(sessions: Iterable[SessionRecord], streak: int, now: datetime,
                             bucketer: CalendarBucketer) -> List[Recommendation]:
    """Actionable suggestions, most important (lowest priority number) first"""
    sessions = list(sessions or [])
    if not sessions:
        return []

    recommendations = []

    optimal = optimal_focus_time(sessions, now, bucketer)
    if optimal is not None:
        recommendations.append(Recommendation(
            title="Best Focus Time",
            description=f"You perform best at {optimal.time_description}. "
                        f"Try scheduling focus sessions around this time!",
            priority=1,
            recommendation_type=RecommendationType.OPTIMAL_TIME,
        ))

    if frequency_trend(sessions, now, bucketer).direction == TrendDirection.DECLINING:
        recommendations.append(Recommendation(
            title="Getting Back on Track",
            description="Your focus frequency has decreased. Try setting a weekly goal to stay motivated!",
            priority=2,
            recommendation_type=RecommendationType.FREQUENCY,
        ))

    if consistency_trend(sessions, now, bucketer).level == ConsistencyLevel.INCONSISTENT:
        recommendations.append(Recommendation(
            title="Build Consistency",
            description="Aim for more regular focus sessions. Even 2-3 times per week can make a big difference!",
            priority=3,
            recommendation_type=RecommendationType.CONSISTENCY,
        ))

    if 0 < streak < 7:
        recommendations.append(Recommendation(
            title="Keep the Streak Going!",
            description=f"You're on a {streak}-day streak! Keep it up to reach 7 days!",
            priority=1,
            recommendation_type=RecommendationType.FREQUENCY,
        ))

    return sorted(recommendations, key=lambda r: r.priority)


DEFAULT_TIPS = [
    "Start with shorter focus sessions (15-25 minutes) and gradually increase duration.",
    "Take regular breaks between focus sessions to maintain productivity.",
    "Eliminate distractions during focus sessions for better results.",
]


def productivity_tips(sessions: Iterable[SessionRecord], streak: int, now: datetime,
                      bucketer: CalendarBucketer) -> List[str]:
    sessions = list(sessions or [])
    tips = []

    optimal = optimal_focus_time(sessions, now, bucketer)
    if optimal is not None:
        if optimal.time_of_day == TimeOfDay.MORNING:
            tips.append("Schedule your most important tasks in the morning when you're most focused.")
        elif optimal.time_of_day == TimeOfDay.EVENING:
            tips.append("Evening sessions work well for you. Plan your deep work accordingly.")

    if sessions and consistency_trend(sessions, now, bucketer).level == ConsistencyLevel.INCONSISTENT:
        tips.append("Try focusing at the same time each day to build a stronger habit.")

    stats = session_statistics(sessions, now, bucketer)
    if stats.average_duration > 0:
        minutes = int(stats.average_duration // 60)
        if minutes < 20:
            tips.append("Consider trying longer focus sessions (25-45 minutes) for deeper work.")
        elif minutes >= 45:
            tips.append("Great job with longer focus sessions! Remember to take breaks between sessions.")

    if 0 < streak < 7:
        tips.append("Keep your streak going! Consistency is key to building lasting habits.")

    if stats.total_sessions >= SESSIONS_PER_CYCLE:
        tips.append("You've completed full Pomodoro cycles! Try completing multiple cycles in one day for deep work.")

    return tips or list(DEFAULT_TIPS)
