from dataclasses import dataclass, field
from typing import Any, Mapping

from src.domain.errors import BadRequestError
from src.domain.field_catalog import FieldCatalog, FieldKind

# 워크플로우 상태 필드명 (대소문자 무시). 이 키는 필드 쓰기가 아닌 트랜지션으로 처리
WORKFLOW_STATUS_FIELD = "status"


@dataclass(frozen=True)
class TransitionRequest:
    """상태 변경 요청 (트랜지션 이름으로 해석될 값)"""
    field_name: str
    target_value: str


@dataclass(frozen=True)
class ChangeSet:
    """업데이트 요청을 필드 쓰기 버킷과 트랜지션 요청으로 분리한 결과"""
    field_changes: dict[str, Any] = field(default_factory=dict)
    transition: TransitionRequest | None = None

    @property
    def is_empty(self) -> bool:
        return not self.field_changes and self.transition is None

    def remote_fields(self, catalog: FieldCatalog) -> dict[str, Any]:
        """논리 컬럼명을 remote id 로 바꾸고 필드 종류에 맞게 값을 변환합니다."""
        payload: dict[str, Any] = {}
        for logical_name, value in self.field_changes.items():
            entry = catalog.entry_for(logical_name)
            if entry is None:
                payload[logical_name] = value
                continue
            payload[entry.remote_id] = _coerce_value(entry.kind, value)
        return payload


def _coerce_value(kind: FieldKind, value: Any) -> Any:
    if kind is FieldKind.DATE and isinstance(value, str):
        value = value.strip()
        # 날짜 입력칸의 빈 값은 Jira 에서 null 로 지워야 함
        return value.split("T")[0] if value else None
    if kind is FieldKind.STATUS_ENUM and isinstance(value, str):
        return {"value": value} if value else None
    return value


def classify_changes(changes: Mapping[str, Any]) -> ChangeSet:
    """
    변경 요청을 분류합니다.

    - 'status' 키 (대소문자 무시) → 트랜지션 요청 (최대 1개)
    - 그 외 → 필드 쓰기 버킷 (논리 컬럼명 유지)
    """
    field_changes: dict[str, Any] = {}
    transition: TransitionRequest | None = None

    for name, value in changes.items():
        if name.strip().lower() != WORKFLOW_STATUS_FIELD:
            field_changes[name] = value
            continue
        if transition is not None:
            raise BadRequestError("Only one status change is allowed per update.")
        if not isinstance(value, str) or not value.strip():
            raise BadRequestError("Status value must be a non-empty string.")
        transition = TransitionRequest(field_name=name, target_value=value.strip())

    return ChangeSet(field_changes=field_changes, transition=transition)
