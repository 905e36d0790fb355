#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
FocusFlow Analytics - Session Record
Completed (or abandoned) focus / break interval with ingestion validation

Version: 1.0.0
"""

import math
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Optional, Union

from focusflow.models.enums import SessionCategory, GoalPeriod
from focusflow.utils.datetime_utils import format_iso, parse_iso

MAX_SESSION_DURATION_SECONDS = 3600
MAX_NOTES_LENGTH = 1000

# ===== VALIDATION HELPERS =====

class ValidationError(Exception):
    """Invalid session or goal data"""
    pass


def validate_text(text: Optional[str], max_length: int = MAX_NOTES_LENGTH,
                  field_name: str = "notes") -> Optional[str]:
    """Strip free text; empty strings become None"""
    if text is None:
        return None
    if not isinstance(text, str):
        raise ValidationError(f"{field_name} must be a string")

    text = text.strip()
    if len(text) > max_length:
        raise ValidationError(f"{field_name} must be at most {max_length} characters")

    return text or None


def validate_duration(duration: Any, max_duration: float = MAX_SESSION_DURATION_SECONDS) -> float:
    """Duration in seconds, 0 < duration <= max_duration"""
    if isinstance(duration, bool) or not isinstance(duration, (int, float)):
        raise ValidationError("duration must be a number of seconds")
    if not math.isfinite(duration) or duration <= 0:
        raise ValidationError("duration must be positive")
    if duration > max_duration:
        raise ValidationError(f"duration must not exceed {max_duration:g} seconds")
    return float(duration)


def validate_category(value: Union[str, SessionCategory]) -> SessionCategory:
    if isinstance(value, SessionCategory):
        return value
    try:
        return SessionCategory(value)
    except ValueError:
        valid_values = [c.value for c in SessionCategory]
        raise ValidationError(f"category must be one of: {valid_values}")

# ===== MODELS =====

@dataclass(frozen=True)
class SessionRecord:
    """
    One completed or abandoned interval.

    Construction does not range-check duration so that records already in
    storage can always be represented; use SessionRecord.create() at
    ingestion time.
    """
    date: datetime
    duration: float
    category: SessionCategory = SessionCategory.FOCUS
    completed: bool = True
    notes: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        if not isinstance(self.category, SessionCategory):
            object.__setattr__(self, "category", validate_category(self.category))

    @classmethod
    def create(cls, date: datetime, duration: float,
               category: Union[str, SessionCategory] = SessionCategory.FOCUS,
               completed: bool = True, notes: Optional[str] = None,
               max_duration: float = MAX_SESSION_DURATION_SECONDS,
               session_id: Optional[str] = None) -> "SessionRecord":
        """Validated constructor used by the store and importers"""
        if not isinstance(date, datetime):
            raise ValidationError("date must be a datetime")
        if not isinstance(completed, bool):
            raise ValidationError("completed must be a boolean")

        return cls(
            id=session_id or str(uuid.uuid4()),
            date=date,
            duration=validate_duration(duration, max_duration),
            category=validate_category(category),
            completed=completed,
            notes=validate_text(notes),
        )

    # ===== PROPERTIES =====

    @property
    def is_qualifying(self) -> bool:
        """Counts toward streaks, trends and goals"""
        return self.category.is_primary and self.completed

    @property
    def duration_minutes(self) -> int:
        return int(self.duration // 60) if self.has_valid_duration() else 0

    @property
    def formatted_duration(self) -> str:
        if not self.has_valid_duration():
            return "0:00"
        total = int(self.duration)
        return f"{total // 60}:{total % 60:02d}"

    def has_valid_duration(self, max_duration: float = MAX_SESSION_DURATION_SECONDS) -> bool:
        d = self.duration
        if isinstance(d, bool) or not isinstance(d, (int, float)):
            return False
        return math.isfinite(d) and 0 < d <= max_duration

    def is_countable(self, max_duration: float = MAX_SESSION_DURATION_SECONDS) -> bool:
        """Whether the record may contribute to aggregates at all"""
        return isinstance(self.date, datetime) and self.has_valid_duration(max_duration)

    # ===== COPIES =====

    def with_notes(self, notes: Optional[str]) -> "SessionRecord":
        return replace(self, notes=validate_text(notes))

    def with_completed(self, completed: bool) -> "SessionRecord":
        return replace(self, completed=completed)

    # ===== SERIALIZATION =====

    def to_dict(self) -> Dict[str, Any]:
        duration = self.duration
        if isinstance(duration, float) and duration.is_integer():
            duration = int(duration)
        return {
            "id": self.id,
            "date": format_iso(self.date),
            "duration": duration,
            "category": self.category.value,
            "completed": self.completed,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionRecord":
        date = data["date"]
        if isinstance(date, str):
            date = parse_iso(date)
        return cls(
            id=str(data.get("id") or uuid.uuid4()),
            date=date,
            duration=data["duration"],
            category=validate_category(data.get("category", SessionCategory.FOCUS.value)),
            completed=bool(data.get("completed", True)),
            notes=data.get("notes"),
        )


@dataclass
class Goal:
    """User-set target; target 0 means no goal"""
    period: GoalPeriod
    target: int = 0

    def __post_init__(self):
        if not isinstance(self.period, GoalPeriod):
            self.period = GoalPeriod(self.period)
        if isinstance(self.target, bool) or not isinstance(self.target, int) or self.target < 0:
            raise ValidationError("target must be a non-negative integer")

    @property
    def is_set(self) -> bool:
        return self.target > 0

    def to_dict(self) -> Dict[str, Any]:
        return {"period": self.period.value, "target": self.target}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Goal":
        return cls(period=GoalPeriod(data["period"]), target=int(data.get("target", 0)))
