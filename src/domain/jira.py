import base64
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class JiraSession:
    """로그인으로 확정된 Jira 접속 정보 (세션 단위)"""
    base_url: str        # https:// 로 정규화된 사이트 URL
    auth_header: str     # Basic 인증 헤더 값
    project_key: str


@dataclass(frozen=True)
class FieldDescriptor:
    """Jira 필드 디렉터리 항목 (GET /field)"""
    id: str
    name: str
    custom: bool = False


@dataclass(frozen=True)
class JiraTicket:
    """Jira 이슈 스냅샷. fields 는 remote field id → 값"""
    key: str
    fields: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class JiraTransition:
    """이슈별 전환 가능한 워크플로우 트랜지션"""
    id: str
    name: str
    to_status: str = ""


def normalize_site_url(raw_site: str) -> str:
    """스킴이 없으면 https:// 를 붙이고 끝의 / 를 제거합니다."""
    site = raw_site.strip().rstrip("/")
    if not site.lower().startswith(("http://", "https://")):
        site = f"https://{site}"
    return site


def build_basic_auth_header(identity: str, secret: str) -> str:
    token = base64.b64encode(f"{identity}:{secret}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def _quote_jql(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_ticket_jql(project_key: str, issue_type: str) -> str:
    """프로젝트 + 이슈 유형 필터, 생성일 내림차순 JQL"""
    return (
        f"project = {_quote_jql(project_key)} "
        f"AND issuetype = {_quote_jql(issue_type)} "
        f"ORDER BY created DESC"
    )
