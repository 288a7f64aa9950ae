import logging

from src.application.ports.session_store_port import SessionStorePort
from src.domain.errors import Unauthorized
from src.domain.jira import JiraSession

logger = logging.getLogger(__name__)


def require_session(session_store: SessionStorePort, session_id: str | None) -> JiraSession:
    """세션 id 로 로그인 세션을 찾습니다. 없거나 만료되면 Unauthorized."""
    if not session_id:
        logger.info("세션 확인 실패: 세션 id 없음")
        raise Unauthorized()
    session = session_store.get(session_id)
    if session is None:
        logger.info("세션 확인 실패: 세션 없음 또는 만료")
        raise Unauthorized()
    return session
