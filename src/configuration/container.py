from dataclasses import dataclass
from functools import lru_cache

from src.adapters.outbound.in_memory_draft_store import InMemoryDraftStore
from src.adapters.outbound.in_memory_session_store import InMemorySessionStore
from src.adapters.outbound.jira_adapter import JiraAdapter
from src.adapters.outbound.yaml_column_repository import YamlColumnRepository
from src.application.ports.jira_port import JiraPortFactory
from src.application.use_cases.evaluate_rows import EvaluateRowsUseCase
from src.application.use_cases.get_field_catalog import GetFieldCatalogUseCase
from src.application.use_cases.list_tickets import ListTicketsUseCase
from src.application.use_cases.login import LoginUseCase
from src.application.use_cases.logout import LogoutUseCase
from src.application.use_cases.reload_columns import ReloadColumnsUseCase
from src.application.use_cases.update_ticket import UpdateTicketUseCase
from src.configuration.settings import Settings, build_settings
from src.domain.jira import JiraSession


@dataclass(frozen=True)
class Container:
    settings: Settings
    session_store: InMemorySessionStore
    draft_store: InMemoryDraftStore
    login_use_case: LoginUseCase
    logout_use_case: LogoutUseCase
    get_field_catalog_use_case: GetFieldCatalogUseCase
    list_tickets_use_case: ListTicketsUseCase
    update_ticket_use_case: UpdateTicketUseCase
    evaluate_rows_use_case: EvaluateRowsUseCase
    reload_columns_use_case: ReloadColumnsUseCase


def _jira_adapter_factory(settings: Settings) -> JiraPortFactory:
    """세션 자격 증명마다 JiraAdapter 를 생성하는 팩토리"""

    def factory(session: JiraSession) -> JiraAdapter:
        return JiraAdapter(
            base_url=session.base_url,
            auth_header=session.auth_header,
            api_version=settings.jira_api_version,
            timeout=float(settings.jira_timeout_seconds),
        )

    return factory


def wire_container(
    settings: Settings,
    jira_port_factory: JiraPortFactory | None = None,
    session_store: InMemorySessionStore | None = None,
) -> Container:
    """설정과 (선택적) 대체 어댑터로 Container 를 조립합니다."""
    jira_port_factory = jira_port_factory or _jira_adapter_factory(settings)
    session_store = session_store or InMemorySessionStore(ttl_minutes=settings.session_ttl_minutes)
    draft_store = InMemoryDraftStore()
    session_store.add_expiry_listener(draft_store.clear_session)
    column_repo = YamlColumnRepository(yaml_path=settings.columns_yaml_path)

    return Container(
        settings=settings,
        session_store=session_store,
        draft_store=draft_store,
        login_use_case=LoginUseCase(
            jira_port_factory=jira_port_factory,
            session_store=session_store,
        ),
        logout_use_case=LogoutUseCase(
            session_store=session_store,
            draft_store=draft_store,
        ),
        get_field_catalog_use_case=GetFieldCatalogUseCase(
            jira_port_factory=jira_port_factory,
            session_store=session_store,
            column_repo=column_repo,
        ),
        list_tickets_use_case=ListTicketsUseCase(
            jira_port_factory=jira_port_factory,
            session_store=session_store,
            column_repo=column_repo,
            draft_store=draft_store,
            default_issue_type=settings.dashboard_issue_type,
        ),
        update_ticket_use_case=UpdateTicketUseCase(
            jira_port_factory=jira_port_factory,
            session_store=session_store,
            column_repo=column_repo,
            draft_store=draft_store,
        ),
        evaluate_rows_use_case=EvaluateRowsUseCase(
            draft_store=draft_store,
            session_store=session_store,
        ),
        # 컬럼 정의 핫 리로드
        reload_columns_use_case=ReloadColumnsUseCase(
            column_repo=column_repo,
        ),
    )


@lru_cache(maxsize=1)
def build_container() -> Container:
    return wire_container(build_settings())


def clear_container() -> None:
    build_container.cache_clear()
