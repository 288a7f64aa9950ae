import pytest

from src.application.use_cases.get_field_catalog import GetFieldCatalogUseCase
from src.application.use_cases.list_tickets import ListTicketsUseCase
from src.domain.errors import Unauthorized, UpstreamError


@pytest.fixture
def use_case(jira_factory, session_store, column_repo, draft_store):
    return ListTicketsUseCase(
        jira_port_factory=jira_factory,
        session_store=session_store,
        column_repo=column_repo,
        draft_store=draft_store,
    )


@pytest.mark.asyncio
async def test_query_filters_project_and_story(use_case, fake_jira, logged_in):
    rows = await use_case.execute(logged_in)

    _, search = next(c for c in fake_jira.calls if c[0] == "search_issues")
    assert search["jql"] == 'project = "ABC" AND issuetype = "Story" ORDER BY created DESC'
    assert [r["key"] for r in rows] == ["ABC-2", "ABC-1"]


@pytest.mark.asyncio
async def test_query_requests_only_catalog_fields(use_case, fake_jira, logged_in):
    await use_case.execute(logged_in)

    _, search = next(c for c in fake_jira.calls if c[0] == "search_issues")
    assert search["fields"][:4] == ["summary", "status", "duedate", "customfield_10010"]
    assert "customfield_10014" in search["fields"]
    assert "description" not in search["fields"]


@pytest.mark.asyncio
async def test_issue_type_override(use_case, fake_jira, logged_in):
    await use_case.execute(logged_in, issue_type="Bug")

    _, search = next(c for c in fake_jira.calls if c[0] == "search_issues")
    assert 'issuetype = "Bug"' in search["jql"]


@pytest.mark.asyncio
async def test_listing_twice_returns_identical_rows(use_case, logged_in):
    assert await use_case.execute(logged_in) == await use_case.execute(logged_in)


@pytest.mark.asyncio
async def test_rows_carry_session_drafts(use_case, draft_store, logged_in):
    draft_store.save(logged_in, "ABC-1", {"UAT Status": "In Progress"})

    rows = await use_case.execute(logged_in)

    by_key = {r["key"]: r for r in rows}
    assert by_key["ABC-1"]["draft"] == {"UAT Status": "In Progress"}
    assert by_key["ABC-2"]["draft"] == {}


@pytest.mark.asyncio
async def test_requires_session(use_case, fake_jira):
    with pytest.raises(Unauthorized):
        await use_case.execute(None)
    assert fake_jira.calls == []


@pytest.mark.asyncio
async def test_upstream_errors_propagate(use_case, fake_jira, logged_in):
    async def failing_search(jql, fields):
        raise UpstreamError("search failed", status=400, body='{"errorMessages": ["bad jql"]}')

    fake_jira.search_issues = failing_search

    with pytest.raises(UpstreamError) as exc_info:
        await use_case.execute(logged_in)
    assert exc_info.value.details == ["bad jql"]


@pytest.mark.asyncio
async def test_field_catalog_marks_unresolved_columns(jira_factory, session_store, column_repo, fake_jira, logged_in):
    fake_jira.fields = [f for f in fake_jira.fields if f.name != "Release Status"]
    use_case = GetFieldCatalogUseCase(jira_factory, session_store, column_repo)

    entries = await use_case.execute(logged_in)

    release = next(e for e in entries if e["name"] == "Release Status")
    assert release["resolved"] is False
    assert release["id"] == "Release Status"
    assert release["options"] == ["Not Started", "In Progress", "Released", "Delayed"]
