#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
FocusFlow Analytics
Streaks, trends, comparisons, insights and goal tracking for a Pomodoro
session log

Version: 1.0.0
"""

from .core.bucketer import CalendarBucketer
from .core.engine import AnalyticsEngine
from .core.goals import GoalManager
from .models.enums import GoalPeriod, SessionCategory
from .models.session import Goal, SessionRecord, ValidationError
from .services.session_store import SessionStore

__version__ = "1.0.0"

__all__ = [
    'AnalyticsEngine',
    'CalendarBucketer',
    'Goal',
    'GoalManager',
    'GoalPeriod',
    'SessionCategory',
    'SessionRecord',
    'SessionStore',
    'ValidationError',
]
