"""Shared fixtures: in-memory fake Jira port and a wired container."""
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest

from src.adapters.outbound.in_memory_draft_store import InMemoryDraftStore
from src.adapters.outbound.in_memory_session_store import InMemorySessionStore
from src.adapters.outbound.yaml_column_repository import YamlColumnRepository
from src.configuration.container import wire_container
from src.configuration.settings import Settings
from src.domain.errors import UpstreamError
from src.domain.jira import FieldDescriptor, JiraSession, JiraTicket, JiraTransition

PROJECT_ROOT = Path(__file__).parent.parent
COLUMNS_YAML = PROJECT_ROOT / "config" / "dashboard_columns.yaml"

FIELD_DIRECTORY = [
    FieldDescriptor(id="summary", name="Summary"),
    FieldDescriptor(id="status", name="Status"),
    FieldDescriptor(id="duedate", name="Due date"),
    FieldDescriptor(id="customfield_10010", name="UAT Planned Start Date", custom=True),
    FieldDescriptor(id="customfield_10011", name="UAT Planned Completion", custom=True),
    FieldDescriptor(id="customfield_10012", name="UAT Status", custom=True),
    FieldDescriptor(id="customfield_10013", name="Planned Release Date", custom=True),
    FieldDescriptor(id="customfield_10014", name="Release Status", custom=True),
    FieldDescriptor(id="issuetype", name="Issue Type"),
    FieldDescriptor(id="project", name="Project"),
    FieldDescriptor(id="created", name="Created"),
    FieldDescriptor(id="labels", name="Labels"),
    FieldDescriptor(id="reporter", name="Reporter"),
    FieldDescriptor(id="assignee", name="Assignee"),
]


class FakeJiraPort:
    """JiraPort 대역. 호출 순서를 calls 에 기록합니다."""

    def __init__(self):
        self.calls: list[tuple[str, Any]] = []
        self.fields = list(FIELD_DIRECTORY)
        self.tickets = [
            JiraTicket(key="ABC-2", fields={"summary": "Second", "status": {"name": "To Do"}}),
            JiraTicket(key="ABC-1", fields={"summary": "First", "status": {"name": "In Progress"}}),
        ]
        self.transitions = [
            JiraTransition(id="11", name="To Do", to_status="To Do"),
            JiraTransition(id="21", name="In Progress", to_status="In Progress"),
            JiraTransition(id="31", name="Done", to_status="Done"),
        ]
        self.myself_error: UpstreamError | None = None
        self.update_error: UpstreamError | None = None
        self.transition_error: UpstreamError | None = None

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    async def get_myself(self) -> dict[str, Any]:
        self.calls.append(("get_myself", None))
        if self.myself_error:
            raise self.myself_error
        return {"displayName": "Tester"}

    async def get_fields(self) -> list[FieldDescriptor]:
        self.calls.append(("get_fields", None))
        return list(self.fields)

    async def search_issues(self, jql: str, fields: list[str]) -> list[JiraTicket]:
        self.calls.append(("search_issues", {"jql": jql, "fields": fields}))
        return list(self.tickets)

    async def get_transitions(self, key: str) -> list[JiraTransition]:
        self.calls.append(("get_transitions", key))
        return list(self.transitions)

    async def update_fields(self, key: str, fields: dict[str, Any]) -> None:
        self.calls.append(("update_fields", {"key": key, "fields": fields}))
        if self.update_error:
            raise self.update_error

    async def apply_transition(self, key: str, transition_id: str) -> None:
        self.calls.append(("apply_transition", {"key": key, "id": transition_id}))
        if self.transition_error:
            raise self.transition_error


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def fake_jira() -> FakeJiraPort:
    return FakeJiraPort()


@pytest.fixture
def jira_factory(fake_jira):
    sessions: list[JiraSession] = []

    def factory(session: JiraSession) -> FakeJiraPort:
        sessions.append(session)
        return fake_jira

    factory.sessions = sessions
    return factory


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 6, 1, 9, 0, 0))


@pytest.fixture
def session_store(clock) -> InMemorySessionStore:
    return InMemorySessionStore(ttl_minutes=60, clock=clock)


@pytest.fixture
def draft_store() -> InMemoryDraftStore:
    return InMemoryDraftStore()


@pytest.fixture
def column_repo() -> YamlColumnRepository:
    return YamlColumnRepository(COLUMNS_YAML)


@pytest.fixture
def jira_session() -> JiraSession:
    return JiraSession(
        base_url="https://example.atlassian.net",
        auth_header="Basic dGVzdDp0b2tlbg==",
        project_key="ABC",
    )


@pytest.fixture
def logged_in(session_store, jira_session) -> str:
    session_store.save("sid-1", jira_session)
    return "sid-1"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        app_env="test",
        server_name="jira-dashboard-test",
        jira_api_version="3",
        jira_timeout_seconds=5,
        dashboard_issue_type="Story",
        session_ttl_minutes=60,
        columns_yaml_path=str(COLUMNS_YAML),
        cors_allowed_origins=["http://localhost:3000"],
        http_host="127.0.0.1",
        http_port=5001,
    )


@pytest.fixture
def container(settings, jira_factory, session_store):
    return wire_container(settings, jira_port_factory=jira_factory, session_store=session_store)
