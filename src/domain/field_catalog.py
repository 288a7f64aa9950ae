from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from src.domain.jira import FieldDescriptor


class FieldKind(Enum):
    TEXT = "text"
    DATE = "date"
    STATUS_ENUM = "status-enum"


@dataclass(frozen=True)
class ColumnDefinition:
    """대시보드 컬럼 설정 (YAML). jira_name 은 Jira 필드명 또는 id"""
    name: str
    jira_name: str
    editable: bool = False
    visible: bool = True
    kind: FieldKind = FieldKind.TEXT
    allowed_values: tuple[str, ...] = ()
    standard: bool = False


@dataclass(frozen=True)
class FieldCatalogEntry:
    """컬럼 정의 + 해석된 remote field id"""
    logical_name: str
    remote_id: str
    editable: bool
    visible: bool
    kind: FieldKind
    allowed_values: tuple[str, ...] = ()
    standard: bool = False
    resolved: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.logical_name,
            "id": self.remote_id,
            "editable": self.editable,
            "visible": self.visible,
            "type": self.kind.value,
            "options": list(self.allowed_values),
            "standard": self.standard,
            "resolved": self.resolved,
        }


@dataclass(frozen=True)
class FieldCatalog:
    entries: tuple[FieldCatalogEntry, ...] = field(default_factory=tuple)

    def entry_for(self, logical_name: str) -> FieldCatalogEntry | None:
        wanted = logical_name.strip().lower()
        for entry in self.entries:
            if entry.logical_name.lower() == wanted:
                return entry
        return None

    def remote_id_for(self, logical_name: str) -> str:
        """논리 컬럼명 → remote id. 카탈로그에 없으면 그대로 반환합니다."""
        entry = self.entry_for(logical_name)
        return entry.remote_id if entry else logical_name

    def search_field_ids(self) -> list[str]:
        """티켓 조회 시 요청할 필드 id 목록 (중복 제거, 순서 보존)"""
        return list(dict.fromkeys(entry.remote_id for entry in self.entries))

    def unresolved(self) -> list[str]:
        return [e.logical_name for e in self.entries if not e.resolved]


def resolve_catalog(
    directory: Iterable[FieldDescriptor],
    columns: Iterable[ColumnDefinition],
) -> FieldCatalog:
    """
    필드 디렉터리에서 컬럼별 remote id 를 해석합니다.

    이름과 id 모두 대소문자 무시로 비교하며, 일치하는 필드가 없으면
    컬럼의 jira_name 을 그대로 remote id 로 사용합니다 (resolved=False).
    """
    descriptors = list(directory)
    lookup: dict[str, FieldDescriptor] = {}
    for descriptor in descriptors:
        lookup.setdefault(descriptor.name.lower(), descriptor)
    # id 일치가 이름 일치보다 우선
    for descriptor in descriptors:
        lookup[descriptor.id.lower()] = descriptor

    entries = []
    for column in columns:
        match = lookup.get(column.jira_name.lower())
        entries.append(FieldCatalogEntry(
            logical_name=column.name,
            remote_id=match.id if match else column.jira_name,
            editable=column.editable,
            visible=column.visible,
            kind=column.kind,
            allowed_values=column.allowed_values,
            standard=column.standard,
            resolved=match is not None,
        ))
    return FieldCatalog(entries=tuple(entries))
