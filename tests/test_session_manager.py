from datetime import timedelta, timezone

from farm_assistant.common import session_manager
from farm_assistant.common.session_manager import SessionManager


def test_create_and_get():
    manager = SessionManager(dict)
    session_id, session = manager.create_session()
    assert manager.get_session(session_id) is session
    assert manager.get_session_count() == 1


def test_unknown_or_missing_id_starts_new_session():
    manager = SessionManager(dict)
    new_id, _ = manager.get_or_create("no-such-session")
    assert new_id != "no-such-session"
    other_id, _ = manager.get_or_create(None)
    assert other_id != new_id
    assert manager.get_session_count() == 2


def test_get_or_create_reuses_live_session():
    manager = SessionManager(dict)
    session_id, session = manager.create_session()
    assert manager.get_or_create(session_id) == (session_id, session)


def test_delete_session():
    manager = SessionManager(dict)
    session_id, _ = manager.create_session()
    assert manager.delete_session(session_id) is True
    assert manager.delete_session(session_id) is False
    assert manager.get_session(session_id) is None


def test_idle_sessions_expire(monkeypatch):
    manager = SessionManager(dict, timeout=timedelta(minutes=5))
    stale_id, _ = manager.create_session()
    fresh_id, _ = manager.create_session()

    real_datetime = session_manager.datetime
    later = real_datetime.now(timezone.utc) + timedelta(minutes=10)

    class LaterDatetime(real_datetime):
        @classmethod
        def now(cls, tz=None):
            return later

    monkeypatch.setattr(session_manager, "datetime", LaterDatetime)
    assert manager.get_session(stale_id) is None
    assert manager.cleanup_expired_sessions() == 1
    assert manager.get_session(fresh_id) is None
    assert manager.get_session_count() == 0


def test_new_session_sweeps_abandoned_ones(monkeypatch):
    manager = SessionManager(dict, timeout=timedelta(minutes=5))
    for _ in range(3):
        manager.create_session()

    real_datetime = session_manager.datetime
    later = real_datetime.now(timezone.utc) + timedelta(minutes=10)

    class LaterDatetime(real_datetime):
        @classmethod
        def now(cls, tz=None):
            return later

    monkeypatch.setattr(session_manager, "datetime", LaterDatetime)
    new_id, _ = manager.get_or_create(None)
    assert manager.get_session_count() == 1
    assert manager.get_session(new_id) is not None
