#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
FocusFlow Analytics - Configuration
Environment-driven settings with validation

Version: 1.0.0
"""

import logging
import logging.config
import os
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import pytz

from focusflow.core.bucketer import CalendarBucketer
from focusflow.core.goals import DEFAULT_MAX_MONTHLY_GOAL, DEFAULT_MAX_WEEKLY_GOAL, GoalManager
from focusflow.models.enums import DayOfWeek
from focusflow.models.session import MAX_SESSION_DURATION_SECONDS
from focusflow.utils.logger import setup_logger


class Environment(Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class AnalyticsConfig:
    """Calendar and ingestion settings"""
    timezone: str = "UTC"
    week_start: str = "SUNDAY"
    max_session_seconds: int = MAX_SESSION_DURATION_SECONDS


@dataclass
class GoalConfig:
    max_weekly_goal: int = DEFAULT_MAX_WEEKLY_GOAL
    max_monthly_goal: int = DEFAULT_MAX_MONTHLY_GOAL


@dataclass
class StorageConfig:
    data_dir: Path
    export_dir: Path
    log_dir: Path

    @property
    def sessions_file(self) -> Path:
        return self.data_dir / "sessions.json"

    @property
    def goals_file(self) -> Path:
        return self.data_dir / "goals.json"


def _int_env(key: str, default: int, errors: list) -> int:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        errors.append(f"{key} must be an integer, got {raw!r}")
        return default


class EngineConfig:
    """Main configuration object"""

    def __init__(self, ensure_dirs: bool = True):
        self._errors = []
        self._load_config()
        self._validate_config()
        if ensure_dirs:
            self._ensure_directories()

    def _load_config(self):
        """Read settings from environment variables"""
        errors = self._errors

        try:
            self.environment = Environment(os.getenv('ENVIRONMENT', 'development').lower())
        except ValueError:
            errors.append(f"ENVIRONMENT has unknown value {os.getenv('ENVIRONMENT')!r}")
            self.environment = Environment.DEVELOPMENT

        self.analytics = AnalyticsConfig(
            timezone=os.getenv('FOCUSFLOW_TZ', 'UTC'),
            week_start=os.getenv('FOCUSFLOW_WEEK_START', 'SUNDAY'),
            max_session_seconds=_int_env('FOCUSFLOW_MAX_SESSION_SECONDS', MAX_SESSION_DURATION_SECONDS, errors),
        )

        self.goals = GoalConfig(
            max_weekly_goal=_int_env('FOCUSFLOW_MAX_WEEKLY_GOAL', DEFAULT_MAX_WEEKLY_GOAL, errors),
            max_monthly_goal=_int_env('FOCUSFLOW_MAX_MONTHLY_GOAL', DEFAULT_MAX_MONTHLY_GOAL, errors),
        )

        self.storage = StorageConfig(
            data_dir=Path(os.getenv('DATA_DIR', 'data')),
            export_dir=Path(os.getenv('EXPORT_DIR', 'exports')),
            log_dir=Path(os.getenv('LOG_DIR', 'logs')),
        )

        try:
            self.log_level = LogLevel(os.getenv('LOG_LEVEL', 'INFO').upper())
        except ValueError:
            errors.append(f"LOG_LEVEL has unknown value {os.getenv('LOG_LEVEL')!r}")
            self.log_level = LogLevel.INFO
        self.log_to_file = os.getenv('LOG_TO_FILE', 'false').lower() == 'true'
        self.log_format = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

    def _validate_config(self):
        errors = self._errors

        if self.analytics.timezone not in pytz.all_timezones_set:
            errors.append(f"FOCUSFLOW_TZ {self.analytics.timezone!r} is not a known timezone")

        try:
            DayOfWeek.parse(self.analytics.week_start)
        except (KeyError, ValueError):
            errors.append(f"FOCUSFLOW_WEEK_START {self.analytics.week_start!r} is not a weekday name")

        if self.analytics.max_session_seconds <= 0:
            errors.append("FOCUSFLOW_MAX_SESSION_SECONDS must be positive")
        if self.goals.max_weekly_goal < 1:
            errors.append("FOCUSFLOW_MAX_WEEKLY_GOAL must be at least 1")
        if self.goals.max_monthly_goal < 1:
            errors.append("FOCUSFLOW_MAX_MONTHLY_GOAL must be at least 1")

        if errors:
            raise ValueError("Configuration errors:\n" + "\n".join(f"• {error}" for error in errors))

    def _ensure_directories(self):
        directories = [self.storage.data_dir, self.storage.export_dir]
        if self.log_to_file:
            directories.append(self.storage.log_dir)
        for directory in directories:
            directory.mkdir(parents=True, exist_ok=True)

    def make_bucketer(self) -> CalendarBucketer:
        return CalendarBucketer(self.analytics.timezone, DayOfWeek.parse(self.analytics.week_start))

    def make_goal_manager(self, bucketer: Optional[CalendarBucketer] = None) -> GoalManager:
        return GoalManager(
            bucketer or self.make_bucketer(),
            max_weekly=self.goals.max_weekly_goal,
            max_monthly=self.goals.max_monthly_goal,
        )

    @property
    def log_file(self) -> Path:
        return self.storage.log_dir / f"focusflow_{self.environment.value}.log"

    def get_logging_config(self, with_file: bool = True) -> Dict[str, Any]:
        """dictConfig for logging.config.dictConfig"""
        handlers = ['console']
        config = {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'default': {
                    'format': self.log_format,
                    'datefmt': '%Y-%m-%d %H:%M:%S'
                }
            },
            'handlers': {
                'console': {
                    'class': 'logging.StreamHandler',
                    'level': self.log_level.value,
                    'formatter': 'default',
                    'stream': sys.stdout
                },
            },
            'loggers': {
                '': {
                    'level': self.log_level.value,
                    'handlers': handlers,
                    'propagate': False
                },
            }
        }

        if with_file and self.log_to_file:
            handlers.append('file')
            config['handlers']['file'] = {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': self.log_level.value,
                'formatter': 'default',
                'filename': str(self.log_file),
                'maxBytes': 10485760,  # 10MB
                'backupCount': 5,
                'encoding': 'utf-8'
            }

        return config

    def setup_logging(self) -> logging.Logger:
        """Console logging for the whole process, plus the rotating log file when enabled"""
        logging.config.dictConfig(self.get_logging_config(with_file=False))
        if self.log_to_file:
            setup_logger(self.log_file, level=getattr(logging, self.log_level.value))
        return logging.getLogger('focusflow')

    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    def to_dict(self) -> Dict[str, Any]:
        return {
            'environment': self.environment.value,
            'analytics': {
                'timezone': self.analytics.timezone,
                'week_start': self.analytics.week_start,
                'max_session_seconds': self.analytics.max_session_seconds,
            },
            'goals': {
                'max_weekly_goal': self.goals.max_weekly_goal,
                'max_monthly_goal': self.goals.max_monthly_goal,
            },
            'storage': {
                'data_dir': str(self.storage.data_dir),
                'export_dir': str(self.storage.export_dir),
                'log_dir': str(self.storage.log_dir),
            },
            'log_level': self.log_level.value,
            'log_to_file': self.log_to_file,
        }


_config: Optional[EngineConfig] = None


def get_config() -> EngineConfig:
    """Shared configuration, created on first use"""
    global _config
    if _config is None:
        _config = EngineConfig()
    return _config


def reset_config() -> None:
    global _config
    _config = None


__all__ = [
    'EngineConfig',
    'Environment',
    'LogLevel',
    'AnalyticsConfig',
    'GoalConfig',
    'StorageConfig',
    'get_config',
    'reset_config',
]
