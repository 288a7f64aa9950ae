import logging
from typing import Any, Mapping

from src.application.ports.column_repository_port import ColumnRepositoryPort
from src.application.ports.draft_store_port import DraftStorePort
from src.application.ports.jira_port import JiraPort, JiraPortFactory
from src.application.ports.session_store_port import SessionStorePort
from src.application.services.catalog_loader import load_catalog
from src.application.services.session_access import require_session
from src.domain.change_set import TransitionRequest, classify_changes
from src.domain.errors import BadRequestError, InvalidTransition, UpdateError, UpstreamError
from src.domain.jira import JiraTransition

logger = logging.getLogger(__name__)


class UpdateTicketUseCase:
    """
    대시보드 행 변경을 Jira 에 반영하는 Use Case.

    실행 순서:
    1. 변경값 분류 (status → 트랜지션, 나머지 → 필드 쓰기)
    2. 트랜지션 요청이 있으면 이슈의 트랜지션 목록에서 이름으로 id 결정
       (일치 없음 → InvalidTransition, 필드 쓰기 없이 종료)
    3. 필드 쓰기 (PUT 1회)
    4. 트랜지션 실행 (POST)

    필드 값이 먼저 반영된 뒤 트랜지션을 적용합니다. 이미 완료된 단계는 되돌리지 않습니다.
    """

    def __init__(
        self,
        jira_port_factory: JiraPortFactory,
        session_store: SessionStorePort,
        column_repo: ColumnRepositoryPort,
        draft_store: DraftStorePort,
    ):
        self.jira_port_factory = jira_port_factory
        self.session_store = session_store
        self.column_repo = column_repo
        self.draft_store = draft_store

    async def execute(
        self,
        session_id: str | None,
        ticket_key: str,
        changes: Mapping[str, Any] | None,
    ) -> dict:
        session = require_session(self.session_store, session_id)

        ticket_key = (ticket_key or "").strip()
        if not ticket_key:
            raise BadRequestError("Ticket key is missing.")
        if changes is None:
            raise BadRequestError("Update data is missing.")

        change_set = classify_changes(changes)
        logger.info(
            "🔄 UpdateTicketUseCase 실행: key=%s, fields=%s, transition=%s",
            ticket_key,
            list(change_set.field_changes),
            change_set.transition.target_value if change_set.transition else None,
        )

        if change_set.is_empty:
            logger.info("변경 사항 없음 → 생략: %s", ticket_key)
            return self._ack(ticket_key, [], None)

        self.draft_store.save(session_id, ticket_key, dict(changes))

        jira_port = self.jira_port_factory(session)

        transition: JiraTransition | None = None
        if change_set.transition is not None:
            transition = await self._resolve_transition(jira_port, ticket_key, change_set.transition)

        updated_fields: list[str] = []
        if change_set.field_changes:
            catalog = await load_catalog(jira_port, self.column_repo)
            remote_fields = change_set.remote_fields(catalog)
            try:
                await jira_port.update_fields(ticket_key, remote_fields)
            except UpstreamError as e:
                logger.error("❌ 필드 쓰기 실패: key=%s, status=%s", ticket_key, e.status)
                raise UpdateError(UpdateError.FIELD_WRITE, status=e.status, body=e.body) from e
            updated_fields = list(remote_fields)

        if transition is not None:
            try:
                await jira_port.apply_transition(ticket_key, transition.id)
            except UpstreamError as e:
                # 필드 쓰기가 이미 반영된 경우에도 되돌리지 않음
                logger.error("❌ 트랜지션 실패: key=%s, status=%s", ticket_key, e.status)
                raise UpdateError(UpdateError.TRANSITION, status=e.status, body=e.body) from e

        logger.info("✅ Use Case 실행 완료: %s", ticket_key)
        return self._ack(ticket_key, updated_fields, transition.name if transition else None)

    async def _resolve_transition(
        self,
        jira_port: JiraPort,
        ticket_key: str,
        request: TransitionRequest,
    ) -> JiraTransition:
        """요청 상태값과 이름이 같은 (대소문자 무시) 트랜지션을 찾습니다."""
        transitions = await jira_port.get_transitions(ticket_key)
        wanted = request.target_value.lower()

        match = next((t for t in transitions if t.name.lower() == wanted), None)
        if match is None:
            available = [t.name for t in transitions]
            logger.error(
                "❌ '%s' 트랜지션 없음: key=%s, 사용 가능: %s",
                request.target_value, ticket_key, available,
            )
            raise InvalidTransition(request.target_value, available)

        logger.info("선택된 트랜지션: %s (id=%s)", match.name, match.id)
        return match

    @staticmethod
    def _ack(ticket_key: str, updated_fields: list[str], transition: str | None) -> dict:
        return {
            "key": ticket_key,
            "message": "Ticket updated successfully.",
            "updated_fields": updated_fields,
            "transition": transition,
        }
