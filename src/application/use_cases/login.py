import logging

from src.application.ports.jira_port import JiraPortFactory
from src.application.ports.session_store_port import SessionStorePort
from src.domain.errors import AuthError, BadRequestError, UpstreamError
from src.domain.jira import JiraSession, build_basic_auth_header, normalize_site_url

logger = logging.getLogger(__name__)


class LoginUseCase:
    """Jira 자격 증명을 검증하고 세션을 생성하는 Use Case"""

    def __init__(self, jira_port_factory: JiraPortFactory, session_store: SessionStorePort):
        self.jira_port_factory = jira_port_factory
        self.session_store = session_store

    async def execute(
        self,
        session_id: str,
        site: str,
        identity: str,
        secret: str,
        project_key: str,
    ) -> JiraSession:
        """
        자격 증명을 /myself 로 검증한 뒤 세션을 저장합니다.

        Args:
            session_id: 세션 저장 키
            site: Jira 사이트 (스킴 없으면 https:// 추가)
            identity: 이메일 또는 사용자명
            secret: API 토큰 또는 비밀번호
            project_key: 대시보드 대상 프로젝트 키

        Raises:
            BadRequestError: 필수 입력 누락
            AuthError: 검증 실패 (invalid-credentials | unreachable | unexpected-status)
        """
        missing = [
            label for label, value in (
                ("Jira Site", site),
                ("Email", identity),
                ("API Token", secret),
                ("Project Key", project_key),
            )
            if not (value or "").strip()
        ]
        if missing:
            raise BadRequestError(f"{', '.join(missing)} required.")

        session = JiraSession(
            base_url=normalize_site_url(site),
            auth_header=build_basic_auth_header(identity.strip(), secret),
            project_key=project_key.strip(),
        )
        logger.info("🔐 LoginUseCase 실행: site=%s, project=%s", session.base_url, session.project_key)

        jira_port = self.jira_port_factory(session)
        try:
            await jira_port.get_myself()
        except UpstreamError as e:
            raise self._to_auth_error(e) from e

        # 로그인 시점에 만료 세션 정리 (만료 리스너가 draft 도 삭제)
        self.session_store.cleanup_expired()
        self.session_store.save(session_id, session)
        logger.info("✅ 로그인 성공: project=%s", session.project_key)
        return session

    @staticmethod
    def _to_auth_error(error: UpstreamError) -> AuthError:
        if error.status is None:
            logger.error("❌ Jira 연결 실패: %s", error.message)
            return AuthError(AuthError.UNREACHABLE, f"Login failed: {error.message}")
        if error.status in (401, 403):
            logger.error("❌ Jira 인증 실패: %d", error.status)
            return AuthError(
                AuthError.INVALID_CREDENTIALS,
                "Login failed: invalid credentials",
                status=error.status,
            )
        logger.error("❌ 예상치 못한 응답: %d", error.status)
        return AuthError(
            AuthError.UNEXPECTED_STATUS,
            f"Login failed: unexpected status {error.status}",
            status=error.status,
        )
