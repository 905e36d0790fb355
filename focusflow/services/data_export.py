# services/data_export.py

import csv
import io
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as SchemaError

from focusflow.models.enums import SessionCategory
from focusflow.models.session import (
    MAX_NOTES_LENGTH,
    MAX_SESSION_DURATION_SECONDS,
    SessionRecord,
    ValidationError,
)
from focusflow.utils.datetime_utils import format_iso

logger = logging.getLogger(__name__)

CSV_FIELDS = ["date", "category", "duration_seconds", "completed", "notes"]


class SessionImportSchema(BaseModel):
    """One imported row, JSON object or CSV line"""
    id: Optional[str] = None
    date: datetime
    duration: float = Field(..., gt=0)
    category: SessionCategory = SessionCategory.FOCUS
    completed: bool = True
    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH)

    @field_validator("id", "notes", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return SessionCategory.FOCUS
        return v

    def to_record(self, max_duration: float = MAX_SESSION_DURATION_SECONDS) -> SessionRecord:
        return SessionRecord.create(
            date=self.date,
            duration=self.duration,
            category=self.category,
            completed=self.completed,
            notes=self.notes,
            max_duration=max_duration,
            session_id=self.id,
        )


@dataclass
class ImportResult:
    sessions: List[SessionRecord] = field(default_factory=list)
    imported: int = 0
    failed: int = 0

    @property
    def has_errors(self) -> bool:
        return self.failed > 0


def _format_duration(duration: float):
    if isinstance(duration, float) and duration.is_integer():
        return int(duration)
    return duration


def _import_rows(rows: Iterable[Dict[str, Any]], max_duration: float) -> ImportResult:
    result = ImportResult()
    for index, row in enumerate(rows, start=1):
        try:
            result.sessions.append(SessionImportSchema.model_validate(row).to_record(max_duration))
            result.imported += 1
        except (SchemaError, ValidationError) as e:
            result.failed += 1
            logger.warning(f"⚠️ Skipping row {index}: {e}")

    logger.info(f"📥 Imported {result.imported} session(s), {result.failed} failed")
    return result

# ===== JSON =====

def sessions_to_json(sessions: Iterable[SessionRecord], indent: Optional[int] = 2) -> str:
    """Every field, ISO-8601 dates to the second"""
    return json.dumps([s.to_dict() for s in sessions], ensure_ascii=False, indent=indent)


def sessions_from_json(payload: str, max_duration: float = MAX_SESSION_DURATION_SECONDS) -> ImportResult:
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, TypeError) as e:
        logger.error(f"❌ Invalid JSON export: {e}")
        return ImportResult()

    if not isinstance(data, list):
        logger.error("❌ JSON export must be a list of sessions")
        return ImportResult()

    rows = []
    failed = 0
    for item in data:
        if isinstance(item, dict):
            rows.append(item)
        else:
            failed += 1
            logger.warning(f"⚠️ Skipping non-object entry: {item!r}")

    result = _import_rows(rows, max_duration)
    result.failed += failed
    return result

# ===== CSV =====

def sessions_to_csv(sessions: Iterable[SessionRecord]) -> str:
    """
    date,category,duration_seconds,completed,notes

    Notes containing commas, quotes or newlines are quoted with doubled
    quotes; completed is written as true / false.
    """
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CSV_FIELDS, lineterminator="\n")
    writer.writeheader()
    for session in sessions:
        writer.writerow({
            "date": format_iso(session.date),
            "category": session.category.value,
            "duration_seconds": _format_duration(session.duration),
            "completed": "true" if session.completed else "false",
            "notes": session.notes or "",
        })
    return buffer.getvalue()


def sessions_from_csv(payload: str, max_duration: float = MAX_SESSION_DURATION_SECONDS) -> ImportResult:
    try:
        reader = csv.DictReader(io.StringIO(payload))
        header = reader.fieldnames or []
        missing = [name for name in ("date", "duration_seconds") if name not in header]
        if missing:
            logger.error(f"❌ CSV export is missing columns: {missing}")
            return ImportResult()

        rows = [
            {
                "date": row.get("date"),
                "category": row.get("category"),
                "duration": row.get("duration_seconds"),
                "completed": row.get("completed") or True,
                "notes": row.get("notes"),
            }
            for row in reader
        ]
    except csv.Error as e:
        logger.error(f"❌ Invalid CSV export: {e}")
        return ImportResult()

    return _import_rows(rows, max_duration)

# ===== FILES =====

def export_to_json_file(sessions: Iterable[SessionRecord], export_dir: Path,
                        name: str = "focus_sessions") -> Path:
    export_dir = Path(export_dir)
    export_dir.mkdir(parents=True, exist_ok=True)
    filename = export_dir / f"{name}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
    with open(filename, "w", encoding="utf-8") as f:
        f.write(sessions_to_json(sessions))
    logger.info(f"📤 Sessions exported to {filename}")
    return filename


def export_to_csv_file(sessions: Iterable[SessionRecord], export_dir: Path,
                       name: str = "focus_sessions") -> Path:
    export_dir = Path(export_dir)
    export_dir.mkdir(parents=True, exist_ok=True)
    filename = export_dir / f"{name}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"
    with open(filename, "w", newline="", encoding="utf-8") as f:
        f.write(sessions_to_csv(sessions))
    logger.info(f"📤 Sessions exported to {filename}")
    return filename


def import_from_file(path: Path, max_duration: float = MAX_SESSION_DURATION_SECONDS) -> ImportResult:
    """Dispatch on the file extension (.json or .csv)"""
    path = Path(path)
    try:
        with open(path, "r", newline="", encoding="utf-8") as f:
            payload = f.read()
    except OSError as e:
        logger.error(f"❌ Cannot read {path}: {e}")
        return ImportResult()

    if path.suffix.lower() == ".csv":
        return sessions_from_csv(payload, max_duration)
    return sessions_from_json(payload, max_duration)
