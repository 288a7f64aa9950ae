import logging

from src.application.ports.column_repository_port import ColumnRepositoryPort
from src.application.ports.draft_store_port import DraftStorePort
from src.application.ports.jira_port import JiraPortFactory
from src.application.ports.session_store_port import SessionStorePort
from src.application.services.catalog_loader import load_catalog
from src.application.services.session_access import require_session
from src.domain.jira import build_ticket_jql

logger = logging.getLogger(__name__)


class ListTicketsUseCase:
    """세션 프로젝트의 대시보드 티켓을 조회하는 Use Case"""

    def __init__(
        self,
        jira_port_factory: JiraPortFactory,
        session_store: SessionStorePort,
        column_repo: ColumnRepositoryPort,
        draft_store: DraftStorePort,
        default_issue_type: str = "Story",
    ):
        self.jira_port_factory = jira_port_factory
        self.session_store = session_store
        self.column_repo = column_repo
        self.draft_store = draft_store
        self.default_issue_type = default_issue_type

    async def execute(self, session_id: str | None, issue_type: str | None = None) -> list[dict]:
        """
        티켓 목록을 조회합니다.

        컬럼 정의에 해당하는 필드만 요청하며, 각 행에 세션의 draft 를 붙여 반환합니다.

        Args:
            session_id: 로그인 세션 id
            issue_type: 이슈 유형 필터. None이면 기본값 (Story)

        Returns:
            [{"key", "fields", "draft"}, ...] (생성일 내림차순)
        """
        session = require_session(self.session_store, session_id)
        issue_type = (issue_type or "").strip() or self.default_issue_type

        logger.info("📋 ListTicketsUseCase 실행: project=%s, issuetype=%s", session.project_key, issue_type)

        jira_port = self.jira_port_factory(session)
        catalog = await load_catalog(jira_port, self.column_repo)

        jql = build_ticket_jql(session.project_key, issue_type)
        tickets = await jira_port.search_issues(jql, catalog.search_field_ids())

        logger.info("✅ Use Case 실행 완료: %d개 티켓", len(tickets))

        return [
            {
                "key": ticket.key,
                "fields": ticket.fields,
                "draft": self.draft_store.get(session_id, ticket.key),
            }
            for ticket in tickets
        ]
