from typing import Callable, Protocol

from src.domain.jira import JiraSession


class SessionStorePort(Protocol):
    """로그인 세션 저장소 계약 (세션 id 별, 고정 TTL)"""

    def save(self, session_id: str, session: JiraSession) -> None:
        """세션을 저장합니다. 만료 시각은 저장 시점 + TTL 로 고정됩니다."""
        ...

    def get(self, session_id: str) -> JiraSession | None:
        """세션을 조회합니다. 만료된 세션은 None을 반환합니다."""
        ...

    def delete(self, session_id: str) -> None:
        """세션을 삭제합니다."""
        ...

    def cleanup_expired(self) -> int:
        """만료된 세션을 정리합니다. 삭제된 세션 수를 반환합니다."""
        ...

    def add_expiry_listener(self, listener: Callable[[str], object]) -> None:
        """만료로 세션이 삭제될 때 세션 id 로 호출할 콜백을 등록합니다."""
        ...
