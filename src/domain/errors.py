import json
from typing import Any


class DashboardError(Exception):
    """대시보드 도메인 오류의 기본 클래스 (HTTP 상태 코드 포함)"""

    http_status: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def details(self) -> Any:
        return {}


class BadRequestError(DashboardError):
    """요청 형식 오류 (필수 값 누락 등)"""

    http_status = 400


class AuthError(DashboardError):
    """로그인 검증 실패. reason: invalid-credentials | unreachable | unexpected-status"""

    INVALID_CREDENTIALS = "invalid-credentials"
    UNREACHABLE = "unreachable"
    UNEXPECTED_STATUS = "unexpected-status"

    def __init__(self, reason: str, message: str, status: int | None = None):
        super().__init__(message)
        self.reason = reason
        self.status = status

    @property
    def http_status(self) -> int:  # type: ignore[override]
        return 401 if self.reason == self.INVALID_CREDENTIALS else 500


class Unauthorized(DashboardError):
    """세션이 없거나 만료됨 → 재로그인 필요"""

    http_status = 401

    def __init__(self, message: str = "Unauthorized. Please log in first."):
        super().__init__(message)


class InvalidTransition(DashboardError):
    """요청한 상태값과 일치하는 워크플로우 트랜지션이 없음"""

    http_status = 400

    def __init__(self, requested_value: str, available: list[str] | None = None):
        super().__init__(f'Invalid status transition: "{requested_value}"')
        self.requested_value = requested_value
        self.available = available or []

    @property
    def details(self) -> Any:
        return {"requestedValue": self.requested_value, "available": self.available}


class UpstreamError(DashboardError):
    """Jira API 호출 실패. status가 None이면 네트워크 오류"""

    http_status = 500

    def __init__(self, message: str, status: int | None = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body

    @property
    def details(self) -> Any:
        """Jira 오류 응답의 errors / errorMessages 를 그대로 전달합니다."""
        try:
            payload = json.loads(self.body) if self.body else {}
        except json.JSONDecodeError:
            return {"raw": self.body[:500]}
        if not isinstance(payload, dict):
            return {"raw": payload}
        return payload.get("errors") or payload.get("errorMessages") or {}


class UpdateError(UpstreamError):
    """이슈 업데이트 중 단계별 실패. stage: field-write | transition"""

    FIELD_WRITE = "field-write"
    TRANSITION = "transition"

    def __init__(self, stage: str, status: int | None = None, body: str = ""):
        super().__init__("Failed to update ticket in Jira.", status=status, body=body)
        self.stage = stage
