from typing import Protocol

from src.domain.field_catalog import ColumnDefinition


class ColumnRepositoryPort(Protocol):
    """대시보드 컬럼 정의 저장소 계약"""

    def get_columns(self) -> list[ColumnDefinition]:
        """컬럼 정의 목록을 설정 순서대로 반환합니다."""
        ...

    def reload(self) -> None:
        """캐시를 무효화하고 설정 파일을 다시 로드합니다."""
        ...
