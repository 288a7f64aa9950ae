import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from src.domain.jira import JiraSession

logger = logging.getLogger(__name__)

_DEFAULT_TTL_MINUTES = 60 * 24

ExpiryListener = Callable[[str], object]


@dataclass(frozen=True)
class _StoredSession:
    session: JiraSession
    expires_at: datetime


class InMemorySessionStore:
    """In-memory 로그인 세션 저장소 (고정 TTL, 활동 시 연장 없음)"""

    def __init__(
        self,
        ttl_minutes: int = _DEFAULT_TTL_MINUTES,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._sessions: dict[str, _StoredSession] = {}
        self._ttl = timedelta(minutes=ttl_minutes)
        self._clock = clock
        self._lock = threading.Lock()
        self._expiry_listeners: list[ExpiryListener] = []

    def add_expiry_listener(self, listener: ExpiryListener) -> None:
        """만료로 세션이 삭제될 때 세션 id 로 호출할 콜백을 등록합니다."""
        self._expiry_listeners.append(listener)

    def save(self, session_id: str, session: JiraSession) -> None:
        expires_at = self._clock() + self._ttl
        with self._lock:
            self._sessions[session_id] = _StoredSession(session=session, expires_at=expires_at)
        logger.info(
            "세션 저장: project=%s, expires_at=%s",
            session.project_key,
            expires_at.isoformat(timespec="seconds"),
        )

    def get(self, session_id: str) -> JiraSession | None:
        with self._lock:
            stored = self._sessions.get(session_id)
            if stored is None:
                return None
            if not self._is_expired(stored):
                return stored.session
            del self._sessions[session_id]

        logger.info("만료된 세션 삭제")
        self._notify_expired([session_id])
        return None

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def cleanup_expired(self) -> int:
        with self._lock:
            expired = [sid for sid, s in self._sessions.items() if self._is_expired(s)]
            for sid in expired:
                del self._sessions[sid]
        if expired:
            logger.info("만료 세션 정리: %d건 삭제", len(expired))
            self._notify_expired(expired)
        return len(expired)

    def _notify_expired(self, session_ids: list[str]) -> None:
        # 락 밖에서 호출 (리스너가 다른 저장소의 락을 잡음)
        for session_id in session_ids:
            for listener in self._expiry_listeners:
                listener(session_id)

    def _is_expired(self, stored: _StoredSession) -> bool:
        return self._clock() >= stored.expires_at
