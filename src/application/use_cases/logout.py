import logging

from src.application.ports.draft_store_port import DraftStorePort
from src.application.ports.session_store_port import SessionStorePort

logger = logging.getLogger(__name__)


class LogoutUseCase:
    """세션과 세션의 draft 를 삭제하는 Use Case"""

    def __init__(self, session_store: SessionStorePort, draft_store: DraftStorePort):
        self.session_store = session_store
        self.draft_store = draft_store

    def execute(self, session_id: str | None) -> dict:
        if not session_id:
            return {"message": "Logged out"}
        self.session_store.delete(session_id)
        cleared = self.draft_store.clear_session(session_id)
        logger.info("로그아웃: draft %d건 삭제", cleared)
        return {"message": "Logged out"}
