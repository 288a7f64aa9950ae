import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _load_env() -> None:
    app_env = os.getenv("APP_ENV", "local")
    # 프로젝트 루트 디렉토리 찾기 (src/configuration/settings.py -> ../../)
    project_root = Path(__file__).parent.parent.parent
    env_file = project_root / f".env.{app_env}"
    load_dotenv(env_file)


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    app_env: str
    server_name: str
    jira_api_version: str
    jira_timeout_seconds: int
    dashboard_issue_type: str
    session_ttl_minutes: int  # 로그인 시점 기준 고정 만료 (활동 시 연장 없음)
    columns_yaml_path: str
    cors_allowed_origins: list[str]
    http_host: str
    http_port: int

    @property
    def secure_cookies(self) -> bool:
        return self.app_env == "production"


def build_settings() -> Settings:
    _load_env()

    required_vars = ("APP_ENV", "SERVER_NAME")
    missing = [k for k in required_vars if not os.getenv(k)]
    if missing:
        raise RuntimeError(f"필수 환경 변수 누락: {', '.join(missing)}")

    project_root = Path(__file__).parent.parent.parent
    default_columns_path = str(project_root / "config" / "dashboard_columns.yaml")

    origins_raw = os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
    cors_allowed_origins = [o.strip() for o in origins_raw.split(",") if o.strip()]

    return Settings(
        app_env=os.environ["APP_ENV"],
        server_name=os.environ["SERVER_NAME"],
        jira_api_version=os.getenv("JIRA_API_VERSION", "3"),
        jira_timeout_seconds=_int_env("JIRA_TIMEOUT_SECONDS", 30),
        dashboard_issue_type=os.getenv("DASHBOARD_ISSUE_TYPE", "Story"),
        session_ttl_minutes=_int_env("SESSION_TTL_MINUTES", 60 * 24),
        columns_yaml_path=os.getenv("COLUMNS_YAML_PATH", default_columns_path),
        cors_allowed_origins=cors_allowed_origins,
        http_host=os.getenv("HTTP_HOST", "127.0.0.1"),
        http_port=_int_env("HTTP_PORT", 5001),
    )
