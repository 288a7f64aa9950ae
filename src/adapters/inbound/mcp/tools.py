import json
import logging
import sys
import traceback
from datetime import date

from mcp.server import Server
from mcp.types import TextContent

from src.configuration.container import Container, build_container
from src.domain.errors import DashboardError

logger = logging.getLogger(__name__)

# 로그에서 마스킹할 민감 필드
_SENSITIVE_FIELDS = {"api_token", "secret", "session_id"}


def _mask_arguments(arguments: dict) -> dict:
    """로깅용으로 민감 필드를 마스킹합니다."""
    return {
        key: "***" if key in _SENSITIVE_FIELDS else value
        for key, value in arguments.items()
    }


def _cell(value) -> str:
    """Jira 필드 값을 표 셀 문자열로 변환합니다."""
    if value is None:
        return ""
    if isinstance(value, dict):
        return str(value.get("name") or value.get("value") or value.get("displayName") or "")
    if isinstance(value, list):
        return ", ".join(_cell(v) for v in value)
    return str(value).replace("|", "\\|").replace("\n", " ")


def _require(arguments: dict, name: str) -> str:
    value = str(arguments.get(name) or "").strip()
    if not value:
        raise ValueError(f"{name} 파라미터가 필요합니다")
    return value


async def handle_jira_login(container: Container, arguments: dict) -> str:
    session_id = _require(arguments, "session_id")
    session = await container.login_use_case.execute(
        session_id=session_id,
        site=arguments.get("site", ""),
        identity=arguments.get("email", ""),
        secret=arguments.get("api_token", ""),
        project_key=arguments.get("project_key", ""),
    )
    text = "# ✅ Jira 로그인 성공\n\n"
    text += "| 항목 | 내용 |\n"
    text += "|------|------|\n"
    text += f"| **사이트** | {session.base_url} |\n"
    text += f"| **프로젝트** | {session.project_key} |\n"
    text += f"| **세션 유효 시간** | {container.settings.session_ttl_minutes}분 (연장 없음) |\n"
    return text


async def handle_jira_logout(container: Container, arguments: dict) -> str:
    container.logout_use_case.execute(_require(arguments, "session_id"))
    return "# 👋 로그아웃 완료\n"


async def handle_get_dashboard_fields(container: Container, arguments: dict) -> str:
    entries = await container.get_field_catalog_use_case.execute(_require(arguments, "session_id"))

    text = "# 🗂️ 대시보드 컬럼 매핑\n\n"
    text += "| 컬럼 | Jira 필드 id | 유형 | 편집 | 표시 | 해석 |\n"
    text += "|------|-------------|------|------|------|------|\n"
    for e in entries:
        text += (
            f"| {e['name']} | `{e['id']}` | {e['type']} | "
            f"{'✔' if e['editable'] else ''} | {'✔' if e['visible'] else ''} | "
            f"{'✔' if e['resolved'] else '⚠️ 미해석'} |\n"
        )
    return text


async def handle_get_dashboard_tickets(container: Container, arguments: dict) -> str:
    session_id = _require(arguments, "session_id")
    rows = await container.list_tickets_use_case.execute(
        session_id,
        issue_type=arguments.get("issue_type"),
    )
    if not rows:
        return "조회된 티켓이 없습니다."

    catalog = await container.get_field_catalog_use_case.execute(session_id)
    visible = [e for e in catalog if e["visible"]]

    text = "# 📋 대시보드 티켓\n\n"
    text += f"**총 {len(rows)}건**\n\n"
    text += "| Item# | " + " | ".join(e["name"] for e in visible) + " |\n"
    text += "|" + "---|" * (len(visible) + 1) + "\n"
    for row in rows:
        draft = row["draft"]
        cells = [
            _cell(draft[e["name"]]) if e["name"] in draft else _cell(row["fields"].get(e["id"]))
            for e in visible
        ]
        text += f"| {row['key']} | " + " | ".join(cells) + " |\n"
    return text


async def handle_update_dashboard_ticket(container: Container, arguments: dict) -> str:
    changes = arguments.get("changes")
    if not isinstance(changes, dict):
        raise ValueError("changes 파라미터는 객체여야 합니다")

    result = await container.update_ticket_use_case.execute(
        _require(arguments, "session_id"),
        ticket_key=_require(arguments, "key"),
        changes=changes,
    )
    text = "# ✅ 티켓 업데이트 완료\n\n"
    text += "| 항목 | 내용 |\n"
    text += "|------|------|\n"
    text += f"| **이슈 키** | {result['key']} |\n"
    text += f"| **수정 필드** | {', '.join(result['updated_fields']) or '-'} |\n"
    text += f"| **트랜지션** | {result['transition'] or '-'} |\n"
    return text


async def handle_evaluate_dashboard_rows(container: Container, arguments: dict) -> str:
    today_raw = arguments.get("today")
    today = date.fromisoformat(today_raw) if today_raw else None
    result = container.evaluate_rows_use_case.execute(
        arguments.get("session_id") or None,
        rows=arguments.get("rows") or [],
        today=today,
    )

    text = "# 🧮 행 검증 결과\n\n"
    banner = result["banner"]
    if banner["visible"]:
        text += "## ⚠️ 오류\n\n"
        text += "".join(f"- {m}\n" for m in banner["messages"])
        text += "\n"
    for row in result["rows"]:
        text += f"### {row['key']}\n\n"
        text += "```json\n" + json.dumps(row, ensure_ascii=False, indent=2) + "\n```\n\n"
    return text


async def handle_reload_dashboard_columns(container: Container, arguments: dict) -> str:
    result = container.reload_columns_use_case.execute()
    text = "# 🔄 컬럼 정의 리로드 완료\n\n"
    text += f"**컬럼 수:** {result['column_count']}\n\n"
    text += f"**편집 가능:** {', '.join(result['editable_columns'])}\n"
    return text


TOOL_HANDLERS = {
    "jira_login": handle_jira_login,
    "jira_logout": handle_jira_logout,
    "get_dashboard_fields": handle_get_dashboard_fields,
    "get_dashboard_tickets": handle_get_dashboard_tickets,
    "update_dashboard_ticket": handle_update_dashboard_ticket,
    "evaluate_dashboard_rows": handle_evaluate_dashboard_rows,
    "reload_dashboard_columns": handle_reload_dashboard_columns,
}


def format_error(name: str, error: Exception) -> str:
    text = f"""# ❌ 오류 발생

**Tool:** {name}
**오류 타입:** {type(error).__name__}
**오류 메시지:** {str(error)}
"""
    if isinstance(error, DashboardError) and error.details:
        text += f"**상세:** `{json.dumps(error.details, ensure_ascii=False)}`\n"
    text += "\n자세한 내용은 서버 로그를 확인하세요.\n"
    return text


def register_tools(app: Server) -> None:
    """MCP Tool 핸들러를 서버에 등록합니다."""

    @app.call_tool()
    async def call_tool(name: str, arguments: dict):
        try:
            container = build_container()
            logger.info("=" * 60)
            logger.info("🔧 Tool 호출: %s", name)
            logger.info("인자: %s", _mask_arguments(arguments))
            logger.info("=" * 60)

            handler = TOOL_HANDLERS.get(name)
            if handler is None:
                raise ValueError(f"알 수 없는 tool: {name}")

            text = await handler(container, arguments)
            logger.info("✅ Tool 실행 완료: %s", name)
            return [TextContent(type="text", text=text)]

        except Exception as e:
            logger.error("=" * 60)
            logger.error("❌ Tool 실행 실패!")
            logger.error("Tool: %s", name)
            logger.error("오류 타입: %s", type(e).__name__)
            logger.error("오류 메시지: %s", str(e))
            logger.error("=" * 60)
            traceback.print_exc(file=sys.stderr)

            # MCP 표준 형식으로 에러 메시지 반환
            return [TextContent(type="text", text=format_error(name, e))]

    @app.list_tools()
    async def list_tools():
        from mcp.types import Tool

        session_id_prop = {
            "type": "string",
            "description": "대화별 세션 식별자 (로그인 시 지정한 값)",
        }

        return [
            Tool(
                name="jira_login",
                description="""Jira 자격 증명을 검증하고 대시보드 세션을 생성합니다.

사이트에 스킴이 없으면 https:// 가 자동으로 붙습니다. 세션은 로그인 시점부터 고정 시간 동안만 유효합니다.""",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "session_id": session_id_prop,
                        "site": {"type": "string", "description": "Jira 사이트 (예: 'example.atlassian.net')"},
                        "email": {"type": "string", "description": "Jira 계정 이메일"},
                        "api_token": {"type": "string", "description": "Jira API 토큰"},
                        "project_key": {"type": "string", "description": "대시보드 프로젝트 키 (예: 'ABC')"},
                    },
                    "required": ["session_id", "site", "email", "api_token", "project_key"],
                },
            ),
            Tool(
                name="jira_logout",
                description="대시보드 세션과 편집 중인 draft 를 삭제합니다.",
                inputSchema={
                    "type": "object",
                    "properties": {"session_id": session_id_prop},
                    "required": ["session_id"],
                },
            ),
            Tool(
                name="get_dashboard_fields",
                description="대시보드 컬럼과 Jira 필드 id 매핑을 조회합니다. 미해석 컬럼은 ⚠️ 로 표시됩니다.",
                inputSchema={
                    "type": "object",
                    "properties": {"session_id": session_id_prop},
                    "required": ["session_id"],
                },
            ),
            Tool(
                name="get_dashboard_tickets",
                description="""세션 프로젝트의 티켓을 생성일 내림차순으로 조회합니다.

**기본 동작**: issue_type 을 생략하면 Story 유형만 조회합니다.""",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "session_id": session_id_prop,
                        "issue_type": {"type": "string", "description": "이슈 유형 필터 (기본값: Story)"},
                    },
                    "required": ["session_id"],
                },
            ),
            Tool(
                name="update_dashboard_ticket",
                description="""티켓의 대시보드 컬럼 값을 수정합니다.

- **Status** 키는 필드 쓰기가 아닌 워크플로우 트랜지션으로 처리됩니다 (트랜지션 이름, 대소문자 무시).
- 일치하는 트랜지션이 없으면 아무 것도 수정하지 않고 실패합니다.
- 필드 값이 먼저 반영된 뒤 트랜지션이 실행됩니다.""",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "session_id": session_id_prop,
                        "key": {"type": "string", "description": "Jira 이슈 키 (예: 'ABC-1')"},
                        "changes": {
                            "type": "object",
                            "description": "컬럼명 → 새 값 (예: {'UAT Status': 'In Progress', 'Status': 'Done'})",
                        },
                    },
                    "required": ["session_id", "key", "changes"],
                },
            ),
            Tool(
                name="evaluate_dashboard_rows",
                description="""행별 날짜 선후 관계를 검증하고 UAT/릴리스 상태를 산출합니다.

**규칙**: 시작 예정일 ≥ 인계일, 완료 예정일 ≥ 시작 예정일, 릴리스 예정일 ≥ 완료 예정일.
예정일이 지났는데 Not Started 이면 Delayed, 예정일이 미래이면 Not Started.""",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "session_id": session_id_prop,
                        "rows": {
                            "type": "array",
                            "items": {
                                "type": "object",
                                "properties": {
                                    "key": {"type": "string"},
                                    "values": {"type": "object"},
                                },
                                "required": ["key"],
                            },
                        },
                        "today": {"type": "string", "description": "기준일 (YYYY-MM-DD). 생략하면 오늘"},
                    },
                    "required": ["rows"],
                },
            ),
            Tool(
                name="reload_dashboard_columns",
                description="컬럼 정의 YAML 을 다시 로드합니다.",
                inputSchema={"type": "object", "properties": {}},
            ),
        ]
