import logging
from typing import Any

import httpx

from src.domain.errors import UpstreamError
from src.domain.jira import FieldDescriptor, JiraTicket, JiraTransition

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT_SECONDS = 30.0


class JiraAdapter:
    """Jira REST API와 통신하는 Outbound Adapter (세션 자격 증명 단위)"""

    def __init__(
        self,
        base_url: str,
        auth_header: str,
        api_version: str = "3",
        timeout: float = _DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.auth_header = auth_header
        self.api_version = api_version
        self.timeout = timeout
        self._transport = transport

    # ------------------------------------------------------------------
    # Public methods
    # ------------------------------------------------------------------

    async def get_myself(self) -> dict[str, Any]:
        """자격 증명 검증용 사용자 정보 조회. HTTP 200 만 성공으로 봅니다."""
        url = self._api_url("myself")
        logger.info("🌐 Jira 사용자 확인: %s", url)

        response = await self._send("GET", url, context_msg="Jira 사용자 확인")
        if response.status_code != 200:
            logger.error("❌ 예상치 못한 응답 코드: %d", response.status_code)
            raise UpstreamError(
                f"Unexpected Jira response: {response.status_code}",
                status=response.status_code,
                body=response.text,
            )
        # 200 이면 본문 형식과 무관하게 인증 성공
        try:
            data = response.json() if response.content else {}
        except ValueError:
            logger.warning("⚠️ /myself 응답이 JSON 이 아님 (인증은 성공 처리)")
            data = {}
        if not isinstance(data, dict):
            data = {}
        logger.info("✅ Jira 사용자 확인 성공: %s", data.get("displayName", ""))
        return data

    async def get_fields(self) -> list[FieldDescriptor]:
        """Jira 필드 디렉터리를 조회합니다."""
        url = self._api_url("field")
        data = await self._request("GET", url, context_msg="Jira 필드 조회")

        fields = [
            FieldDescriptor(
                id=str(item.get("id", "")),
                name=str(item.get("name", "")),
                custom=bool(item.get("custom", False)),
            )
            for item in data or []
            if item.get("id")
        ]
        logger.info("✅ Jira 필드 조회 성공: %d개", len(fields))
        return fields

    async def search_issues(self, jql: str, fields: list[str]) -> list[JiraTicket]:
        """JQL 쿼리를 사용하여 Jira 이슈를 조회합니다."""
        url = self._api_url("search")
        params = {
            "jql": jql,
            "fields": ",".join(fields),
        }

        logger.info("🌐 Jira 이슈 조회 시작")
        logger.info("JQL: %s", jql)
        logger.info("요청 필드: %s", params["fields"])

        data = await self._request("GET", url, params=params, context_msg="Jira 이슈 조회")

        tickets = [self._parse_ticket(issue) for issue in data.get("issues", [])]
        logger.info("✅ Jira 이슈 조회 성공: %d건", len(tickets))
        return tickets

    async def get_transitions(self, key: str) -> list[JiraTransition]:
        """이슈에서 전환 가능한 트랜지션 목록을 조회합니다."""
        url = self._api_url(f"issue/{key}/transitions")
        data = await self._request("GET", url, context_msg="트랜지션 목록 조회")

        transitions = []
        for t in data.get("transitions", []):
            transition = JiraTransition(
                id=str(t.get("id", "")),
                name=t.get("name", ""),
                to_status=(t.get("to") or {}).get("name", ""),
            )
            transitions.append(transition)
            logger.info("  가능한 트랜지션: %s (id=%s)", transition.name, transition.id)
        return transitions

    async def update_fields(self, key: str, fields: dict[str, Any]) -> None:
        """PUT /issue/{key} 로 필드를 일괄 수정합니다."""
        url = self._api_url(f"issue/{key}")
        logger.info("🔄 이슈 필드 수정: key=%s, fields=%s", key, list(fields))
        await self._request("PUT", url, json={"fields": fields}, context_msg="이슈 필드 수정")
        logger.info("✅ 이슈 필드 수정 완료: %s", key)

    async def apply_transition(self, key: str, transition_id: str) -> None:
        url = self._api_url(f"issue/{key}/transitions")
        logger.info("🔄 트랜지션 실행: key=%s, id=%s", key, transition_id)
        await self._request(
            "POST",
            url,
            json={"transition": {"id": transition_id}},
            context_msg="트랜지션 실행",
        )
        logger.info("✅ 트랜지션 완료: %s", key)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _api_url(self, path: str) -> str:
        return f"{self.base_url}/rest/api/{self.api_version}/{path}"

    def _client(self) -> httpx.AsyncClient:
        """인증 헤더와 timeout이 설정된 httpx.AsyncClient를 반환합니다."""
        return httpx.AsyncClient(
            headers={
                "Authorization": self.auth_header,
                "Accept": "application/json",
            },
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _send(
        self,
        method: str,
        url: str,
        *,
        context_msg: str = "Jira API",
        **kwargs,
    ) -> httpx.Response:
        """HTTP 요청을 보내고 응답을 그대로 반환합니다. 전송 오류만 변환합니다."""
        try:
            async with self._client() as client:
                response = await client.request(method, url, **kwargs)
                logger.info("%s HTTP Status: %d", context_msg, response.status_code)
                return response
        except httpx.TimeoutException as e:
            logger.error("❌ 요청 시간 초과: %s", url)
            raise UpstreamError(f"Jira request timed out: {self.base_url}") from e
        except httpx.RequestError as e:
            logger.error("❌ 네트워크 오류: %s", str(e))
            raise UpstreamError(f"Could not connect to Jira: {self.base_url}") from e

    async def _request(
        self,
        method: str,
        url: str,
        *,
        context_msg: str = "Jira API",
        **kwargs,
    ) -> Any:
        """공통 HTTP 요청. 2xx 가 아니면 UpstreamError, 본문이 없으면 {} 반환."""
        response = await self._send(method, url, context_msg=context_msg, **kwargs)
        if response.is_error:
            logger.error("❌ HTTP 오류 발생: %d", response.status_code)
            logger.error("응답 본문: %s", response.text[:500])
            raise UpstreamError(
                f"{context_msg} failed: HTTP {response.status_code}",
                status=response.status_code,
                body=response.text,
            )
        return self._json(response)

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(
                "Jira returned a non-JSON response",
                status=response.status_code,
                body=response.text,
            ) from e

    @staticmethod
    def _parse_ticket(issue_data: dict[str, Any]) -> JiraTicket:
        """API 응답을 JiraTicket 스냅샷으로 변환합니다."""
        return JiraTicket(
            key=issue_data.get("key", ""),
            fields=dict(issue_data.get("fields") or {}),
        )
