from typing import Any, Callable, Protocol

from src.domain.jira import FieldDescriptor, JiraSession, JiraTicket, JiraTransition


class JiraPort(Protocol):
    """Jira 서비스와의 계약을 정의하는 Port (세션 하나의 자격 증명에 바인딩)"""

    async def get_myself(self) -> dict[str, Any]:
        """현재 자격 증명의 사용자 정보를 조회합니다. 200 이 아니면 UpstreamError."""
        ...

    async def get_fields(self) -> list[FieldDescriptor]:
        """Jira 필드 디렉터리를 조회합니다."""
        ...

    async def search_issues(self, jql: str, fields: list[str]) -> list[JiraTicket]:
        """JQL 쿼리로 이슈를 조회합니다. fields 에 지정한 필드만 요청합니다."""
        ...

    async def get_transitions(self, key: str) -> list[JiraTransition]:
        """이슈에서 현재 전환 가능한 트랜지션 목록을 조회합니다."""
        ...

    async def update_fields(self, key: str, fields: dict[str, Any]) -> None:
        """이슈 필드를 한 번의 요청으로 일괄 수정합니다."""
        ...

    async def apply_transition(self, key: str, transition_id: str) -> None:
        """트랜지션을 실행합니다."""
        ...


# 세션 자격 증명으로 JiraPort 를 만드는 팩토리
JiraPortFactory = Callable[[JiraSession], JiraPort]
