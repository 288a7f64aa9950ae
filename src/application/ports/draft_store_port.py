from typing import Any, Protocol


class DraftStorePort(Protocol):
    """편집 중인 행 값(draft) 저장소 계약. 마지막 쓰기가 이김"""

    def get(self, session_id: str, ticket_key: str) -> dict[str, Any]:
        ...

    def save(self, session_id: str, ticket_key: str, values: dict[str, Any]) -> None:
        """기존 draft 에 values 를 덮어써 병합합니다."""
        ...

    def clear_session(self, session_id: str) -> int:
        """세션의 모든 draft 를 삭제하고 삭제 건수를 반환합니다."""
        ...
