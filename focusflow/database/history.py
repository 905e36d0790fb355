# database/history.py

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, List

from focusflow.models.session import Goal, SessionRecord, ValidationError

logger = logging.getLogger(__name__)

SESSIONS_FILE = "sessions.json"
GOALS_FILE = "goals.json"


def _write_json(path: Path, data: Any) -> None:
    path = Path(path)
    path.parent.mkdir(exist_ok=True, parents=True)
    # atomic replace
    temp_file = path.with_suffix(".tmp")
    with open(temp_file, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    temp_file.replace(path)


def _read_json(path: Path) -> List[Any]:
    """List stored at path; missing file is empty, a corrupt one is moved aside"""
    path = Path(path)
    if not path.exists():
        return []
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error(f"❌ Corrupt data file {path}: {e}")
        _backup_corrupt(path)
        return []

    if not isinstance(data, list):
        logger.error(f"❌ Unexpected data format in {path}")
        _backup_corrupt(path)
        return []
    return data


def _backup_corrupt(path: Path) -> None:
    backup_path = path.with_name(f"{path.stem}_corrupted_{datetime.now().strftime('%Y%m%d_%H%M%S')}{path.suffix}")
    try:
        path.replace(backup_path)
        logger.warning(f"🔄 Corrupt file moved to {backup_path}")
    except OSError as e:
        logger.error(f"❌ Could not back up {path}: {e}")

# ===== SESSIONS =====

def save_sessions(path: Path, sessions: Iterable[SessionRecord]) -> None:
    data = [s.to_dict() for s in sessions]
    _write_json(path, data)
    logger.debug(f"💾 Saved {len(data)} sessions to {path}")


def load_sessions(path: Path) -> List[SessionRecord]:
    """
    Stored records are loaded as they are, without ingestion range checks;
    only entries that cannot be parsed at all are dropped.
    """
    sessions = []
    for entry in _read_json(path):
        try:
            sessions.append(SessionRecord.from_dict(entry))
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            logger.warning(f"⚠️ Skipping unreadable session entry: {e}")
    return sessions

# ===== GOALS =====

def save_goals(path: Path, goals: Iterable[Goal]) -> None:
    _write_json(path, [g.to_dict() for g in goals])


def load_goals(path: Path) -> List[Goal]:
    goals = []
    for entry in _read_json(path):
        try:
            goals.append(Goal.from_dict(entry))
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            logger.warning(f"⚠️ Skipping unreadable goal entry: {e}")
    return goals
