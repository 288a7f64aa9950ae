"""
대시보드 HTTP API (FastAPI).

세션은 HttpOnly 쿠키의 세션 id 로 식별하며, Jira 자격 증명은 서버 세션 저장소에만 보관합니다.
"""
import logging
import secrets

from fastapi import FastAPI, Query, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.adapters.inbound.http.schemas import EvaluateRowsRequest, LoginRequest, UpdateTicketRequest
from src.configuration.container import Container, build_container
from src.domain.errors import DashboardError

logger = logging.getLogger(__name__)

SESSION_COOKIE = "jira_dashboard_sid"


def create_app(container: Container | None = None) -> FastAPI:
    container = container or build_container()
    settings = container.settings

    app = FastAPI(
        title=settings.server_name,
        description="Jira UAT dashboard proxy",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(DashboardError)
    async def dashboard_error_handler(request: Request, exc: DashboardError):
        logger.error(
            "❌ %s %s 실패: %s (%s)",
            request.method, request.url.path, type(exc).__name__, exc.message,
        )
        return JSONResponse(
            status_code=exc.http_status,
            content={"message": exc.message, "details": exc.details},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.error("❌ 잘못된 요청 본문: %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=400,
            content={"message": "Malformed request.", "details": jsonable_encoder(exc.errors())},
        )

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.post("/api/auth/login")
    async def login(body: LoginRequest, response: Response):
        # 로그인마다 새 세션 id 발급
        session_id = secrets.token_urlsafe(32)
        await container.login_use_case.execute(
            session_id=session_id,
            site=body.site,
            identity=body.identity,
            secret=body.secret,
            project_key=body.project_key,
        )
        response.set_cookie(
            SESSION_COOKIE,
            session_id,
            max_age=settings.session_ttl_minutes * 60,
            httponly=True,
            samesite="lax",
            secure=settings.secure_cookies,
        )
        return {"message": "Login successful"}

    @app.post("/api/auth/logout")
    async def logout(request: Request, response: Response):
        result = container.logout_use_case.execute(request.cookies.get(SESSION_COOKIE))
        response.delete_cookie(SESSION_COOKIE)
        return result

    @app.get("/api/jira-fields")
    async def jira_fields(request: Request):
        return await container.get_field_catalog_use_case.execute(
            request.cookies.get(SESSION_COOKIE)
        )

    @app.get("/api/tickets")
    async def list_tickets(request: Request, issue_type: str | None = Query(None, alias="issueType")):
        return await container.list_tickets_use_case.execute(
            request.cookies.get(SESSION_COOKIE),
            issue_type=issue_type,
        )

    @app.api_route("/api/tickets/{issue_key}", methods=["PATCH", "PUT"])
    async def update_ticket(issue_key: str, body: UpdateTicketRequest, request: Request):
        return await container.update_ticket_use_case.execute(
            request.cookies.get(SESSION_COOKIE),
            ticket_key=issue_key,
            changes=body.changes,
        )

    @app.post("/api/rows/evaluate")
    async def evaluate_rows(body: EvaluateRowsRequest, request: Request):
        return container.evaluate_rows_use_case.execute(
            request.cookies.get(SESSION_COOKIE),
            rows=[row.model_dump() for row in body.rows],
            today=body.today,
        )

    return app
