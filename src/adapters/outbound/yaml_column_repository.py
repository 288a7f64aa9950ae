import logging
from pathlib import Path

import yaml

from src.domain.field_catalog import ColumnDefinition, FieldKind

logger = logging.getLogger(__name__)


class YamlColumnRepository:
    """YAML 파일 기반 대시보드 컬럼 정의 저장소 (mtime 캐시)"""

    def __init__(self, yaml_path: str | Path):
        self._path = Path(yaml_path)
        self._cache: list[ColumnDefinition] | None = None
        self._cache_mtime: float = 0.0

    def _ensure_loaded(self) -> list[ColumnDefinition]:
        """파일이 변경되었으면 다시 로드합니다."""
        try:
            current_mtime = self._path.stat().st_mtime
        except FileNotFoundError:
            raise FileNotFoundError(
                f"컬럼 정의 YAML 파일을 찾을 수 없습니다: {self._path}"
            )

        if self._cache is None or current_mtime > self._cache_mtime:
            logger.info("YAML 컬럼 정의 로드: %s", self._path)
            with open(self._path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            self._cache = [self._parse_column(item) for item in data.get("columns", [])]
            self._cache_mtime = current_mtime
            logger.info("YAML 컬럼 정의 로드 완료: %d 컬럼", len(self._cache))

        return self._cache

    def get_columns(self) -> list[ColumnDefinition]:
        return list(self._ensure_loaded())

    def reload(self) -> None:
        """캐시를 강제로 무효화합니다."""
        logger.info("컬럼 정의 캐시 강제 무효화")
        self._cache = None
        self._cache_mtime = 0.0

    def _parse_column(self, item: dict) -> ColumnDefinition:
        name = item.get("name")
        if not name:
            raise ValueError(f"컬럼 이름(name)이 없습니다: {item} ({self._path})")

        kind_raw = item.get("type", FieldKind.TEXT.value)
        try:
            kind = FieldKind(kind_raw)
        except ValueError:
            available = [k.value for k in FieldKind]
            raise ValueError(
                f"존재하지 않는 컬럼 유형: '{kind_raw}' ({name}). 사용 가능: {available}"
            )

        return ColumnDefinition(
            name=name,
            jira_name=item.get("jira_name", name),
            editable=bool(item.get("editable", False)),
            visible=bool(item.get("visible", True)),
            kind=kind,
            allowed_values=tuple(item.get("options", []) or ()),
            standard=bool(item.get("standard", False)),
        )
