"""
대시보드 행 단위 날짜 검증 및 상태 자동 산출.

한 행의 4개 날짜(인계일, UAT 시작/완료 예정일, 릴리스 예정일)의 선후 관계를
검증하고, 오늘 날짜 기준으로 UAT 상태 / 릴리스 상태를 보정합니다.
네트워크를 호출하지 않는 순수 함수만 포함합니다.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Mapping

from src.domain.errors import BadRequestError

HANDOVER = "UAT Handover Date"
PLANNED_START = "UAT Planned Start Date"
PLANNED_COMPLETION = "UAT Planned Completion"
PLANNED_RELEASE = "Planned Release Date"
UAT_STATUS = "UAT Status"
RELEASE_STATUS = "Release Status"

NOT_STARTED = "Not Started"
IN_PROGRESS = "In Progress"
DELAYED = "Delayed"
SIGNED_OFF = "Signed-off"
RELEASED = "Released"

UAT_STATUS_OPTIONS = (NOT_STARTED, IN_PROGRESS, SIGNED_OFF, DELAYED)
RELEASE_STATUS_OPTIONS = (NOT_STARTED, IN_PROGRESS, RELEASED, DELAYED)

TONE_ALERT = "alert"
TONE_ACTIVE = "active"


@dataclass(frozen=True)
class DateRule:
    """earlier <= later 이어야 하며, 위반 시 later 필드에 오류 표시"""
    earlier: str
    later: str
    message: str


DATE_RULES: tuple[DateRule, ...] = (
    DateRule(HANDOVER, PLANNED_START,
             "UAT Planned Start Date must be on/after UAT Handover Date."),
    DateRule(PLANNED_START, PLANNED_COMPLETION,
             "UAT Planned Completion must be on/after UAT Planned Start Date."),
    DateRule(PLANNED_COMPLETION, PLANNED_RELEASE,
             "Planned Release Date must be on/after UAT Planned Completion."),
)

# 상태 필드 → 기준 예정일
STATUS_DRIVERS: dict[str, str] = {
    UAT_STATUS: PLANNED_START,
    RELEASE_STATUS: PLANNED_RELEASE,
}


@dataclass
class RowEvaluation:
    key: str
    values: dict[str, Any]
    errors: list[str] = field(default_factory=list)
    error_fields: list[str] = field(default_factory=list)
    status_tones: dict[str, str] = field(default_factory=dict)

    @property
    def has_errors(self) -> bool:
        return bool(self.error_fields)

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "values": self.values,
            "errors": self.errors,
            "errorFields": self.error_fields,
            "statusTones": self.status_tones,
        }


@dataclass(frozen=True)
class ErrorBanner:
    visible: bool
    messages: tuple[str, ...] = ()

    @property
    def text(self) -> str:
        return " ".join(self.messages)


def parse_row_date(value: Any) -> date | None:
    """빈 값은 None. 'YYYY-MM-DD' 또는 ISO datetime 문자열을 허용합니다."""
    if value is None:
        return None
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text.split("T")[0])
    except ValueError as e:
        raise BadRequestError(f"Invalid date value: {text!r}") from e


def validate_dates(values: Mapping[str, Any]) -> tuple[list[str], list[str]]:
    """모든 규칙을 검사해 (오류 메시지 목록, 오류 필드 목록)을 반환합니다."""
    dates = {name: parse_row_date(values.get(name))
             for name in (HANDOVER, PLANNED_START, PLANNED_COMPLETION, PLANNED_RELEASE)}

    messages: list[str] = []
    error_fields: list[str] = []
    for rule in DATE_RULES:
        earlier, later = dates[rule.earlier], dates[rule.later]
        if earlier is None or later is None:
            continue
        if later < earlier:
            messages.append(rule.message)
            if rule.later not in error_fields:
                error_fields.append(rule.later)
    return messages, error_fields


def status_label(value: Any) -> str | None:
    """상태 값을 문자열 라벨로 변환합니다. Jira select 필드 형태({"value"} / {"name"})도 허용."""
    if isinstance(value, Mapping):
        value = value.get("value") or value.get("name")
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def derive_status(current: Any, planned: date | None, today: date) -> str | None:
    """
    예정일 기준 상태 보정.

    - 예정일이 과거이고 Not Started → Delayed
    - 예정일이 미래 → Not Started (수동 선택값도 덮어씀)
    - 그 외 (오늘이거나 날짜 없음) → 그대로
    """
    current = status_label(current)
    if planned is None:
        return current
    if planned < today and current == NOT_STARTED:
        return DELAYED
    if planned > today:
        return NOT_STARTED
    return current


def status_tone(status: Any) -> str:
    return TONE_ALERT if status_label(status) == DELAYED else TONE_ACTIVE


def evaluate_row(key: str, values: Mapping[str, Any], today: date) -> RowEvaluation:
    """
    행 하나를 검증하고 상태를 산출합니다. 입력 값은 변경하지 않습니다.

    상태 컬럼은 결과에서 항상 문자열 라벨로 정규화됩니다.
    """
    result_values = dict(values)
    errors, error_fields = validate_dates(result_values)

    tones: dict[str, str] = {}
    for status_field, driver in STATUS_DRIVERS.items():
        derived = derive_status(
            result_values.get(status_field),
            parse_row_date(result_values.get(driver)),
            today,
        )
        if derived is not None:
            result_values[status_field] = derived
        tones[status_field] = status_tone(derived)

    return RowEvaluation(
        key=key,
        values=result_values,
        errors=errors,
        error_fields=error_fields,
        status_tones=tones,
    )


def summarize_rows(evaluations: Iterable[RowEvaluation]) -> ErrorBanner:
    """모든 행의 오류 메시지를 합친 배너. 오류 표시된 행이 없으면 숨김."""
    evaluations = list(evaluations)
    messages = tuple(msg for ev in evaluations for msg in ev.errors)
    visible = any(ev.has_errors for ev in evaluations)
    return ErrorBanner(visible=visible, messages=messages if visible else ())
