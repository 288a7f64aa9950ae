import logging

from src.application.ports.column_repository_port import ColumnRepositoryPort

logger = logging.getLogger(__name__)


class ReloadColumnsUseCase:
    """컬럼 정의 캐시를 무효화하고 다시 로드하는 Use Case"""

    def __init__(self, column_repo: ColumnRepositoryPort):
        self._repo = column_repo

    def execute(self) -> dict:
        logger.info("컬럼 정의 리로드 실행")
        self._repo.reload()

        # 검증: 로드 가능한지 확인
        columns = self._repo.get_columns()

        return {
            "status": "success",
            "column_count": len(columns),
            "editable_columns": [c.name for c in columns if c.editable],
        }
