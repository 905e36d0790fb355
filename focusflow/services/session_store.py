# services/session_store.py

import logging
import threading
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Tuple, Union

from focusflow.models.enums import SessionCategory
from focusflow.models.session import MAX_SESSION_DURATION_SECONDS, SessionRecord, ValidationError

logger = logging.getLogger(__name__)

Listener = Callable[[Tuple[SessionRecord, ...]], None]


class SessionStore:
    """
    Owner of the session log.

    Newest sessions are kept first. The last delete can be undone once: the
    removed records go back to their old positions, shifted past anything
    added since. Listeners receive the new snapshot after every change.
    """

    def __init__(self, sessions: Optional[Iterable[SessionRecord]] = None,
                 max_duration: float = MAX_SESSION_DURATION_SECONDS):
        self.max_duration = max_duration
        self._sessions: List[SessionRecord] = list(sessions or [])
        self._deleted: List[Tuple[int, SessionRecord]] = []
        self._added_since_delete = 0
        self._listeners: List[Listener] = []
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._sessions)

    @property
    def sessions(self) -> Tuple[SessionRecord, ...]:
        with self._lock:
            return tuple(self._sessions)

    def get(self, session_id: str) -> Optional[SessionRecord]:
        with self._lock:
            for session in self._sessions:
                if session.id == session_id:
                    return session
        return None

    # ===== MUTATIONS =====

    def add_session(self, date: datetime, duration: float,
                    category: Union[str, SessionCategory] = SessionCategory.FOCUS,
                    completed: bool = True, notes: Optional[str] = None) -> SessionRecord:
        """Validate and insert a new session; raises ValidationError"""
        session = SessionRecord.create(
            date=date,
            duration=duration,
            category=category,
            completed=completed,
            notes=notes,
            max_duration=self.max_duration,
        )
        self._insert(session)
        return session

    def add(self, session: SessionRecord) -> SessionRecord:
        """Insert a pre-built record after the same ingestion checks"""
        if not isinstance(session, SessionRecord):
            raise ValidationError("session must be a SessionRecord")
        if not session.is_countable(self.max_duration):
            raise ValidationError(
                f"session {session.id} has an invalid date or duration {session.duration!r}"
            )
        if self.get(session.id) is not None:
            raise ValidationError(f"session {session.id} already exists")
        self._insert(session)
        return session

    def _insert(self, session: SessionRecord) -> None:
        with self._lock:
            self._sessions.insert(0, session)
            if self._deleted:
                self._added_since_delete += 1
        logger.debug(f"Session {session.id} added ({session.category.value}, {session.formatted_duration})")
        self._notify()

    def delete_session(self, session_id: str) -> bool:
        return self.delete_sessions([session_id]) > 0

    def delete_sessions(self, session_ids: Iterable[str]) -> int:
        """Remove sessions by id; returns how many were removed"""
        ids = set(session_ids)
        with self._lock:
            deleted = [(i, s) for i, s in enumerate(self._sessions) if s.id in ids]
            if not deleted:
                return 0
            self._sessions = [s for s in self._sessions if s.id not in ids]
            self._deleted = deleted
            self._added_since_delete = 0
            removed = len(deleted)

        logger.info(f"🗑️ Deleted {removed} session(s)")
        self._notify()
        return removed

    def delete_at(self, indices: Iterable[int]) -> int:
        """Remove sessions by position in the current snapshot"""
        with self._lock:
            size = len(self._sessions)
            ids = [self._sessions[i].id for i in set(indices) if -size <= i < size]
        return self.delete_sessions(ids)

    @property
    def can_undo(self) -> bool:
        return bool(self._deleted)

    def undo_delete(self) -> bool:
        """Put the records removed by the last delete back where they were"""
        with self._lock:
            if not self._deleted:
                return False
            present = {s.id for s in self._sessions}
            shift = self._added_since_delete
            for index, session in self._deleted:
                if session.id in present:
                    shift -= 1
                    continue
                self._sessions.insert(index + shift, session)
            self._deleted = []
            self._added_since_delete = 0

        logger.info("↩️ Last delete undone")
        self._notify()
        return True

    def replace_all(self, sessions: Iterable[SessionRecord]) -> None:
        """Swap in a new collection, e.g. after an import; clears undo"""
        with self._lock:
            self._sessions = list(sessions)
            self._deleted = []
            self._added_since_delete = 0
        logger.info(f"🔄 Session log replaced ({len(self._sessions)} sessions)")
        self._notify()

    def reset(self) -> None:
        self.replace_all([])

    # ===== LISTENERS =====

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        snapshot = self.sessions
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"❌ Session listener failed: {e}")
