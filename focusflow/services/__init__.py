# services/__init__.py

from .session_store import SessionStore
from .data_export import (
    ImportResult,
    SessionImportSchema,
    sessions_to_json,
    sessions_from_json,
    sessions_to_csv,
    sessions_from_csv
)

__all__ = [
    'SessionStore',
    'ImportResult',
    'SessionImportSchema',
    'sessions_to_json',
    'sessions_from_json',
    'sessions_to_csv',
    'sessions_from_csv'
]
