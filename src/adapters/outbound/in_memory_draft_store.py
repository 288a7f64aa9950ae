import logging
import threading
from typing import Any

logger = logging.getLogger(__name__)


class InMemoryDraftStore:
    """세션별 행 편집값(draft) 저장소. 같은 키는 마지막 쓰기가 이김"""

    def __init__(self):
        self._drafts: dict[tuple[str, str], dict[str, Any]] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str, ticket_key: str) -> dict[str, Any]:
        with self._lock:
            return dict(self._drafts.get((session_id, ticket_key), {}))

    def save(self, session_id: str, ticket_key: str, values: dict[str, Any]) -> None:
        with self._lock:
            draft = self._drafts.setdefault((session_id, ticket_key), {})
            draft.update(values)
        logger.info("draft 저장: ticket=%s, fields=%s", ticket_key, list(values))

    def clear_session(self, session_id: str) -> int:
        with self._lock:
            keys = [k for k in self._drafts if k[0] == session_id]
            for k in keys:
                del self._drafts[k]
        return len(keys)
