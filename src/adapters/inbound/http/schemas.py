from datetime import date
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """로그인 요청. 기존 프론트엔드 필드명(jiraSite, email, apiToken, jiraProjectKey)도 허용"""
    model_config = ConfigDict(populate_by_name=True)

    site: str = Field("", validation_alias=AliasChoices("site", "jiraSite"))
    identity: str = Field("", validation_alias=AliasChoices("identity", "email"))
    secret: str = Field("", validation_alias=AliasChoices("secret", "apiToken"))
    project_key: str = Field(
        "", validation_alias=AliasChoices("projectKey", "jiraProjectKey", "project_key")
    )


class UpdateTicketRequest(BaseModel):
    changes: dict[str, Any] | None = Field(
        None, validation_alias=AliasChoices("changes", "updates", "fields")
    )


class RowInput(BaseModel):
    key: str
    values: dict[str, Any] = Field(default_factory=dict)


class EvaluateRowsRequest(BaseModel):
    rows: list[RowInput]
    today: date | None = None
