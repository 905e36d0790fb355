import pytest

from focusflow.models.enums import SessionCategory
from focusflow.models.session import SessionRecord, ValidationError
from focusflow.services.session_store import SessionStore


@pytest.fixture
def store():
    return SessionStore()


class TestAdding:

    def test_add_session_validates(self, store, local):
        with pytest.raises(ValidationError):
            store.add_session(local(2025, 6, 10), 0)
        with pytest.raises(ValidationError):
            store.add_session(local(2025, 6, 10), 4000)
        with pytest.raises(ValidationError):
            store.add_session(local(2025, 6, 10), 1500, category="nap")
        with pytest.raises(ValidationError):
            store.add_session("2025-06-10", 1500)
        assert len(store) == 0

    def test_newest_first(self, store, local):
        first = store.add_session(local(2025, 6, 10, 9), 1500)
        second = store.add_session(local(2025, 6, 10, 10), 300, category=SessionCategory.SHORT_BREAK)
        assert store.sessions == (second, first)
        assert store.get(first.id) is first

    def test_notes_are_stripped(self, store, local):
        session = store.add_session(local(2025, 6, 10), 1500, notes="  deep work  ")
        assert session.notes == "deep work"
        assert store.add_session(local(2025, 6, 10), 1500, notes="   ").notes is None

    def test_add_prebuilt_record(self, store, local, make_session):
        record = make_session(local(2025, 6, 10))
        store.add(record)
        with pytest.raises(ValidationError):
            store.add(record)
        with pytest.raises(ValidationError):
            store.add(make_session(local(2025, 6, 10), duration=-5))

    def test_custom_max_duration(self, local):
        store = SessionStore(max_duration=7200)
        assert store.add_session(local(2025, 6, 10), 5400).duration == 5400

    def test_snapshot_is_immutable(self, store, local):
        store.add_session(local(2025, 6, 10), 1500)
        snapshot = store.sessions
        store.add_session(local(2025, 6, 11), 1500)
        assert len(snapshot) == 1


class TestDeleteAndUndo:

    @pytest.fixture
    def filled(self, store, local):
        for hour in (9, 10, 11):
            store.add_session(local(2025, 6, 10, hour), 1500)
        return store

    def test_delete_and_undo_restores_exact_order(self, filled):
        before = filled.sessions
        assert filled.delete_session(before[1].id) is True
        assert len(filled) == 2
        assert filled.can_undo
        assert filled.undo_delete() is True
        assert filled.sessions == before
        assert not filled.can_undo
        assert filled.undo_delete() is False

    def test_delete_unknown_id(self, filled):
        assert filled.delete_session("missing") is False
        assert not filled.can_undo

    def test_delete_many_and_at(self, filled):
        before = filled.sessions
        assert filled.delete_at([0, 2, 99]) == 2
        assert filled.sessions == (before[1],)
        filled.undo_delete()
        assert filled.delete_sessions([s.id for s in before]) == 3
        assert filled.sessions == ()

    def test_undo_is_single_level(self, filled):
        before = filled.sessions
        filled.delete_session(before[0].id)
        middle = filled.sessions
        filled.delete_session(before[1].id)
        filled.undo_delete()
        assert filled.sessions == middle
        assert filled.undo_delete() is False

    def test_undo_keeps_sessions_added_after_delete(self, store, local):
        first = store.add_session(local(2025, 6, 10, 9), 1500)
        store.delete_session(first.id)
        second = store.add_session(local(2025, 6, 10, 10), 1500)

        assert store.undo_delete() is True
        assert store.sessions == (second, first)

    def test_undo_restores_positions_behind_new_sessions(self, filled, local):
        before = filled.sessions
        filled.delete_at([1, 2])
        newest = filled.add_session(local(2025, 6, 10, 12), 1500)

        filled.undo_delete()
        assert filled.sessions == (newest,) + before

    def test_undo_skips_records_added_back_by_hand(self, filled):
        before = filled.sessions
        filled.delete_at([0, 2])
        filled.add(before[0])

        filled.undo_delete()
        assert filled.sessions == before

    def test_replace_all_and_reset_clear_undo(self, filled, local, make_session):
        filled.delete_session(filled.sessions[0].id)
        filled.replace_all([make_session(local(2025, 6, 1))])
        assert len(filled) == 1
        assert not filled.can_undo
        filled.reset()
        assert filled.sessions == ()


class TestListeners:

    def test_listener_receives_snapshots(self, store, local):
        received = []
        store.subscribe(received.append)
        session = store.add_session(local(2025, 6, 10), 1500)
        store.delete_session(session.id)
        store.undo_delete()
        assert received == [(session,), (), (session,)]

    def test_unsubscribe(self, store, local):
        received = []
        store.subscribe(received.append)
        store.unsubscribe(received.append)
        store.add_session(local(2025, 6, 10), 1500)
        assert received == []

    def test_failing_listener_does_not_block_others(self, store, local):
        received = []

        def broken(_):
            raise RuntimeError("listener failure")

        store.subscribe(broken)
        store.subscribe(received.append)
        store.add_session(local(2025, 6, 10), 1500)
        assert len(received) == 1


def test_initial_sessions(local):
    record = SessionRecord(date=local(2025, 6, 10), duration=1500)
    assert SessionStore([record]).sessions == (record,)
