"""Integration tests for the HTTP API (JSON-RPC over SSE)."""

import json

import pytest
from fastapi.testclient import TestClient

pytestmark = pytest.mark.integration

from coursesections import http_api
from coursesections.access import AccessControl
from coursesections.http_api import app, bearer_token
from coursesections.storage.course_store import CourseStore
from tests.conftest import INSTRUCTOR_TOKEN, seed_users


@pytest.fixture
def client(temp_db, monkeypatch):
    """Test client whose requests run against the temporary database."""
    monkeypatch.setattr(http_api, "get_db", lambda: temp_db)
    return TestClient(app)


@pytest.fixture
def course_id(temp_db):
    with temp_db.session() as session:
        seed_users(AccessControl(session))
        return CourseStore(session).create_course("H", num_sections=2).id


def rpc(client, method, params=None, request_id=1, token=INSTRUCTOR_TOKEN):
    """POST a JSON-RPC request and decode the single SSE event it returns."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    response = client.post(
        "/mcp/sse",
        json={"jsonrpc": "2.0", "id": request_id, "method": method, "params": params or {}},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    assert response.text.startswith("data: ")
    return json.loads(response.text[len("data: "):].strip())


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "course-sections"}


def test_initialize(client):
    response = rpc(client, "initialize")
    assert response["id"] == 1
    assert response["result"]["protocolVersion"] == "2024-11-05"
    assert response["result"]["serverInfo"]["name"] == "course-sections"


def test_tools_list(client):
    tools = rpc(client, "tools/list")["result"]["tools"]
    names = {tool["name"] for tool in tools}
    assert "create_sections" in names
    assert "update_section_format_options" in names
    assert len(tools) == 9


def test_empty_prompts_and_resources(client):
    assert rpc(client, "prompts/list")["result"] == {"prompts": []}
    assert rpc(client, "resources/list")["result"] == {"resources": []}


def test_unknown_method(client):
    assert rpc(client, "sampling/createMessage")["error"]["code"] == -32601


def test_tool_call_with_bearer_token(client, course_id):
    response = rpc(
        client,
        "tools/call",
        {"name": "get_section_names", "arguments": {"courseid": course_id}},
        request_id=7,
    )

    assert response["id"] == 7
    names = json.loads(response["result"]["content"][0]["text"])
    assert [n["name"] for n in names] == ["General", "Topic 1", "Topic 2"]


def test_tool_call_without_token(client, course_id):
    response = rpc(
        client,
        "tools/call",
        {"name": "get_section_names", "arguments": {"courseid": course_id}},
        token=None,
    )

    assert response["error"]["code"] == -32003
    assert response["error"]["data"] == {"errorcode": "invalidtoken"}


def test_tool_error(client, course_id):
    response = rpc(
        client,
        "tools/call",
        {"name": "create_sections", "arguments": {"courseid": course_id, "position": 0, "number": 0}},
    )
    assert response["error"]["code"] == -32602


@pytest.mark.parametrize(
    "header,expected",
    [
        (None, None),
        ("", None),
        ("Bearer abc", "abc"),
        ("bearer  abc ", "abc"),
        ("Basic abc", None),
        ("Bearer", None),
    ],
)
def test_bearer_token(header, expected):
    assert bearer_token(header) == expected
