import json

import httpx
import pytest

from src.adapters.outbound.jira_adapter import JiraAdapter
from src.domain.errors import UpstreamError

BASE_URL = "https://example.atlassian.net"


def make_adapter(handler) -> tuple[JiraAdapter, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def recording(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    adapter = JiraAdapter(
        base_url=BASE_URL + "/",
        auth_header="Basic abc",
        transport=httpx.MockTransport(recording),
    )
    return adapter, requests


@pytest.mark.asyncio
async def test_get_myself_sends_auth_header():
    adapter, requests = make_adapter(lambda r: httpx.Response(200, json={"displayName": "Tester"}))

    data = await adapter.get_myself()

    assert data["displayName"] == "Tester"
    assert str(requests[0].url) == f"{BASE_URL}/rest/api/3/myself"
    assert requests[0].headers["Authorization"] == "Basic abc"


@pytest.mark.asyncio
async def test_get_myself_accepts_200_with_non_json_body():
    adapter, _ = make_adapter(lambda r: httpx.Response(200, text="<html>ok</html>"))

    assert await adapter.get_myself() == {}


@pytest.mark.asyncio
async def test_get_myself_requires_200():
    adapter, _ = make_adapter(lambda r: httpx.Response(204))

    with pytest.raises(UpstreamError) as exc_info:
        await adapter.get_myself()
    assert exc_info.value.status == 204


@pytest.mark.asyncio
async def test_http_errors_become_upstream_errors():
    adapter, _ = make_adapter(lambda r: httpx.Response(401, text="Unauthorized"))

    with pytest.raises(UpstreamError) as exc_info:
        await adapter.get_myself()
    assert exc_info.value.status == 401


@pytest.mark.asyncio
async def test_network_errors_have_no_status():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    adapter, _ = make_adapter(handler)

    with pytest.raises(UpstreamError) as exc_info:
        await adapter.get_fields()
    assert exc_info.value.status is None


@pytest.mark.asyncio
async def test_search_sends_jql_and_field_list():
    payload = {"issues": [{"key": "ABC-1", "fields": {"summary": "First"}}]}
    adapter, requests = make_adapter(lambda r: httpx.Response(200, json=payload))

    tickets = await adapter.search_issues('project = "ABC"', ["summary", "status"])

    params = requests[0].url.params
    assert params["jql"] == 'project = "ABC"'
    assert params["fields"] == "summary,status"
    assert tickets[0].key == "ABC-1"
    assert tickets[0].fields == {"summary": "First"}


@pytest.mark.asyncio
async def test_get_fields_parses_directory():
    payload = [
        {"id": "summary", "name": "Summary", "custom": False},
        {"id": "customfield_1", "name": "UAT Status", "custom": True},
    ]
    adapter, _ = make_adapter(lambda r: httpx.Response(200, json=payload))

    fields = await adapter.get_fields()

    assert [(f.id, f.name, f.custom) for f in fields] == [
        ("summary", "Summary", False),
        ("customfield_1", "UAT Status", True),
    ]


@pytest.mark.asyncio
async def test_transitions_round_trip():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json={"transitions": [
                {"id": "31", "name": "Done", "to": {"name": "Closed"}},
            ]})
        return httpx.Response(204)

    adapter, requests = make_adapter(handler)

    transitions = await adapter.get_transitions("ABC-1")
    await adapter.apply_transition("ABC-1", "31")

    assert transitions[0].name == "Done"
    assert transitions[0].to_status == "Closed"
    assert requests[1].method == "POST"
    assert str(requests[1].url) == f"{BASE_URL}/rest/api/3/issue/ABC-1/transitions"
    assert json.loads(requests[1].content) == {"transition": {"id": "31"}}


@pytest.mark.asyncio
async def test_update_fields_puts_bulk_payload():
    adapter, requests = make_adapter(lambda r: httpx.Response(204))

    await adapter.update_fields("ABC-1", {"summary": "x", "duedate": None})

    assert requests[0].method == "PUT"
    assert json.loads(requests[0].content) == {"fields": {"summary": "x", "duedate": None}}


@pytest.mark.asyncio
async def test_update_error_keeps_jira_payload():
    body = {"errorMessages": [], "errors": {"customfield_1": "Field cannot be set"}}
    adapter, _ = make_adapter(lambda r: httpx.Response(400, json=body))

    with pytest.raises(UpstreamError) as exc_info:
        await adapter.update_fields("ABC-1", {"customfield_1": "x"})
    assert exc_info.value.details == {"customfield_1": "Field cannot be set"}
