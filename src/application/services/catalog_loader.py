import logging

from src.application.ports.column_repository_port import ColumnRepositoryPort
from src.application.ports.jira_port import JiraPort
from src.domain.field_catalog import FieldCatalog, resolve_catalog

logger = logging.getLogger(__name__)


async def load_catalog(jira_port: JiraPort, column_repo: ColumnRepositoryPort) -> FieldCatalog:
    """Jira 필드 디렉터리를 조회해 컬럼 정의의 remote id 를 해석합니다."""
    directory = await jira_port.get_fields()
    catalog = resolve_catalog(directory, column_repo.get_columns())

    unresolved = catalog.unresolved()
    if unresolved:
        # 해석 실패 컬럼은 이름 그대로 사용 → Jira 호출 시 오류로 드러남
        logger.warning("⚠️ Jira 필드에서 찾지 못한 컬럼: %s", unresolved)
    return catalog
