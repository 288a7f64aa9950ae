import logging

from src.application.ports.column_repository_port import ColumnRepositoryPort
from src.application.ports.jira_port import JiraPortFactory
from src.application.ports.session_store_port import SessionStorePort
from src.application.services.catalog_loader import load_catalog
from src.application.services.session_access import require_session

logger = logging.getLogger(__name__)


class GetFieldCatalogUseCase:
    """대시보드 컬럼과 Jira 필드 id 매핑을 조회하는 Use Case"""

    def __init__(
        self,
        jira_port_factory: JiraPortFactory,
        session_store: SessionStorePort,
        column_repo: ColumnRepositoryPort,
    ):
        self.jira_port_factory = jira_port_factory
        self.session_store = session_store
        self.column_repo = column_repo

    async def execute(self, session_id: str | None) -> list[dict]:
        session = require_session(self.session_store, session_id)
        logger.info("GetFieldCatalogUseCase 실행: project=%s", session.project_key)

        catalog = await load_catalog(self.jira_port_factory(session), self.column_repo)
        return [entry.to_dict() for entry in catalog.entries]
