# farm_assistant/common/session_manager.py
"""
Thread-safe store of chat sessions, one ChatSession per session id.
Built once at composition time and handed to the routes that need it.
"""
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional, Tuple

from farm_assistant.common.logger import get_logger

logger = get_logger(__name__)


class SessionManager:
    """
    Args:
        session_factory: builds a fresh session object for a new id
        timeout: idle time after which a session is dropped
    """

    def __init__(self, session_factory: Callable[[], Any], timeout: timedelta = timedelta(hours=24)):
        self._factory = session_factory
        self._sessions: Dict[str, Dict[str, Any]] = {}
        self._session_lock = threading.RLock()
        self._session_timeout = timeout

    def _expired(self, entry: Dict[str, Any], now: datetime) -> bool:
        return now - entry["last_accessed"] > self._session_timeout

    def create_session(self) -> Tuple[str, Any]:
        with self._session_lock:
            session_id = str(uuid.uuid4())
            now = datetime.now(timezone.utc)
            self._sessions[session_id] = {
                "session": self._factory(),
                "created_at": now,
                "last_accessed": now,
            }
            logger.info(f"Created session {session_id}")
            return session_id, self._sessions[session_id]["session"]

    def get_session(self, session_id: Optional[str]) -> Optional[Any]:
        """The live session for an id, or None if unknown or expired"""
        if not session_id:
            return None
        with self._session_lock:
            entry = self._sessions.get(session_id)
            if entry is None:
                return None
            now = datetime.now(timezone.utc)
            if self._expired(entry, now):
                logger.info(f"Session {session_id} expired, removing")
                del self._sessions[session_id]
                return None
            entry["last_accessed"] = now
            return entry["session"]

    def get_or_create(self, session_id: Optional[str]) -> Tuple[str, Any]:
        with self._session_lock:
            session = self.get_session(session_id)
            if session is not None:
                return session_id, session
            if session_id:
                logger.warning(f"Session {session_id} not found, starting a new one")
            self.cleanup_expired_sessions()
            return self.create_session()

    def delete_session(self, session_id: str) -> bool:
        with self._session_lock:
            if session_id in self._sessions:
                del self._sessions[session_id]
                logger.info(f"Deleted session {session_id}")
                return True
            return False

    def cleanup_expired_sessions(self) -> int:
        """Remove all expired sessions; returns how many were dropped"""
        with self._session_lock:
            now = datetime.now(timezone.utc)
            expired = [sid for sid, entry in self._sessions.items() if self._expired(entry, now)]
            for sid in expired:
                del self._sessions[sid]
                logger.info(f"Cleaned up expired session {sid}")
            return len(expired)

    def get_session_count(self) -> int:
        with self._session_lock:
            return len(self._sessions)
