import os

import pytest

from src.adapters.outbound.yaml_column_repository import YamlColumnRepository
from src.application.use_cases.reload_columns import ReloadColumnsUseCase
from src.domain.field_catalog import FieldKind


def test_default_columns_load(column_repo):
    columns = {c.name: c for c in column_repo.get_columns()}

    assert columns["UAT Handover Date"].jira_name == "duedate"
    assert columns["UAT Handover Date"].kind is FieldKind.DATE
    assert columns["Release Status"].allowed_values == ("Not Started", "In Progress", "Released", "Delayed")
    assert columns["Created"].visible is False


def test_changed_file_is_reloaded(tmp_path):
    path = tmp_path / "columns.yaml"
    path.write_text("columns:\n  - name: Title\n    jira_name: summary\n", encoding="utf-8")
    repo = YamlColumnRepository(path)
    assert [c.name for c in repo.get_columns()] == ["Title"]

    path.write_text(
        "columns:\n  - name: Title\n    jira_name: summary\n  - name: Due\n    jira_name: duedate\n    type: date\n",
        encoding="utf-8",
    )
    stat = path.stat()
    os.utime(path, (stat.st_atime, stat.st_mtime + 10))

    assert [c.name for c in repo.get_columns()] == ["Title", "Due"]


def test_unknown_type_is_rejected(tmp_path):
    path = tmp_path / "columns.yaml"
    path.write_text("columns:\n  - name: X\n    type: number\n", encoding="utf-8")

    with pytest.raises(ValueError):
        YamlColumnRepository(path).get_columns()


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        YamlColumnRepository(tmp_path / "missing.yaml").get_columns()


def test_reload_use_case(column_repo):
    result = ReloadColumnsUseCase(column_repo).execute()

    assert result["status"] == "success"
    assert "Status" in result["editable_columns"]
    assert "Created" not in result["editable_columns"]
