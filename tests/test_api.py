import inspect

import pytest
from fastapi.testclient import TestClient

from main import app
from utils.auth import SESSION_COOKIE_NAME, create_caller_token

TEST_SECRET = "test-secret"


def _headers(principal: str) -> dict:
    token = create_caller_token(principal, TEST_SECRET, 5)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(ledger_dir):
    return TestClient(app)


def _register(client, principal, name, role):
    response = client.post(
        "/users/register",
        json={"name": name, "role": role},
        headers=_headers(principal),
    )
    assert response.status_code == 200, response.text
    return response


def test_full_walkthrough_over_http(client):
    _register(client, "alice", "Alice", 2)
    _register(client, "bob", "Bob", 4)

    response = client.post(
        "/relationships",
        json={"child_id": "bob", "kind": "parent-child"},
        headers=_headers("alice"),
    )
    assert response.json() == {"ok": True}

    response = client.post("/forests", json={"name": "Math"}, headers=_headers("alice"))
    assert response.json() == {"id": 1}

    response = client.post(
        "/milestones",
        json={"title": "Counting", "difficulty": 1, "forest_id": 1},
        headers=_headers("alice"),
    )
    assert response.json() == {"id": 1}
    response = client.post(
        "/milestones",
        json={"title": "Addition", "difficulty": 2, "forest_id": 1, "parent_milestone_id": 1},
        headers=_headers("alice"),
    )
    assert response.json() == {"id": 2}

    response = client.post("/milestones/2/prerequisites", json={"prerequisite_id": 1}, headers=_headers("alice"))
    assert response.json() == {"ok": True}

    response = client.post("/completions/self", json={"milestone_id": 2}, headers=_headers("bob"))
    assert response.status_code == 409
    assert response.json() == {"error": "PrerequisitesNotCompleted", "code": 108}

    response = client.post("/completions/self", json={"milestone_id": 1}, headers=_headers("bob"))
    assert response.json() == {"ok": True}
    response = client.post(
        "/completions/self",
        json={"milestone_id": 2, "evidence_url": "https://example.org/sums"},
        headers=_headers("bob"),
    )
    assert response.json() == {"ok": True}

    record = client.get("/completions/2/bob").json()
    assert record["verifier"] == "bob"
    assert record["evidence_url"] == "https://example.org/sums"
    assert client.get("/completions/2/bob/status").json() == {"completed": True}
    assert client.get("/completions/2/alice/status").json() == {"completed": False}

    edges = client.get("/milestones/2/prerequisites").json()
    assert [(e["milestone_id"], e["prerequisite_id"]) for e in edges] == [(2, 1)]
    assert client.get("/milestones/2/prerequisites/1").json()["milestone_id"] == 2
    titles = [m["title"] for m in client.get("/forests/1/milestones").json()]
    assert titles == ["Counting", "Addition"]
    assert client.get("/relationships/alice").json()[0]["child"] == "bob"


def test_heights_increase_per_write(client):
    _register(client, "alice", "Alice", 2)
    _register(client, "erin", "Erin", 3)
    assert client.get("/users/alice").json()["registered_at"] == 1
    assert client.get("/users/erin").json()["registered_at"] == 2


def test_rejected_write_returns_single_code(client):
    _register(client, "bob", "Bob", 4)
    response = client.post("/users/register", json={"name": "Bob", "role": 1}, headers=_headers("bob"))
    assert response.status_code == 409
    assert response.json() == {"error": "MilestoneAlreadyExists", "code": 103}
    assert client.get("/users/bob").json()["role"] == 4

    response = client.post("/forests", json={"name": "Math"}, headers=_headers("bob"))
    assert response.status_code == 403
    assert response.json()["error"] == "NotAuthorized"


def test_invalid_role_reaches_ledger(client):
    response = client.post("/users/register", json={"name": "Zed", "role": 9}, headers=_headers("zed"))
    assert response.status_code == 400
    assert response.json() == {"error": "InvalidUserRole", "code": 110}


def test_reads_return_null_for_missing_records(client):
    assert client.get("/users/nobody").json() is None
    assert client.get("/forests/3").json() is None
    assert client.get("/milestones/3").json() is None
    assert client.get("/relationships/alice/bob").json() is None
    assert client.get("/completions/1/bob").json() is None


def test_writes_require_caller_token(client):
    response = client.post("/users/register", json={"name": "Alice", "role": 2})
    assert response.status_code == 401

    bad = {"Authorization": "Bearer alice:9999999999:deadbeef"}
    response = client.post("/users/register", json={"name": "Alice", "role": 2}, headers=bad)
    assert response.status_code == 401


def test_session_cookie_accepted(client):
    client.cookies.set(SESSION_COOKIE_NAME, create_caller_token("alice", TEST_SECRET, 5))
    response = client.post("/users/register", json={"name": "Alice", "role": 2})
    assert response.status_code == 200
    assert client.get("/users/alice").json()["name"] == "Alice"


def test_owner_from_config_can_verify(client):
    _register(client, "bob", "Bob", 4)
    _register(client, "ada", "Ada", 1)
    client.post("/forests", json={"name": "Math"}, headers=_headers("ada"))
    client.post("/milestones", json={"title": "Counting", "difficulty": 1, "forest_id": 1}, headers=_headers("ada"))

    response = client.post("/completions", json={"milestone_id": 1, "child_id": "bob"}, headers=_headers("ada"))
    assert response.status_code == 403

    response = client.post(
        "/completions",
        json={"milestone_id": 1, "child_id": "bob"},
        headers=_headers("SP-OPERATOR"),
    )
    assert response.json() == {"ok": True}
    assert client.get("/completions/1/bob").json()["verifier"] == "SP-OPERATOR"


def test_failed_milestone_create_keeps_ids_dense(client):
    _register(client, "alice", "Alice", 2)
    client.post("/forests", json={"name": "Math"}, headers=_headers("alice"))
    response = client.post(
        "/milestones",
        json={"title": "Counting", "difficulty": 9, "forest_id": 1},
        headers=_headers("alice"),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "InvalidParameters"
    response = client.post(
        "/milestones",
        json={"title": "Counting", "difficulty": 3, "forest_id": 1},
        headers=_headers("alice"),
    )
    assert response.json() == {"id": 1}


def test_malformed_role_maps_to_invalid_user_role(client):
    response = client.post("/users/register", json={"name": "Zed", "role": "parent"}, headers=_headers("zed"))
    assert response.status_code == 400
    assert response.json() == {"error": "InvalidUserRole", "code": 110}
    assert client.get("/users/zed").json() is None


def test_fractional_difficulty_maps_to_invalid_parameters(client):
    _register(client, "alice", "Alice", 2)
    client.post("/forests", json={"name": "Math"}, headers=_headers("alice"))
    response = client.post(
        "/milestones",
        json={"title": "Counting", "difficulty": 2.5, "forest_id": 1},
        headers=_headers("alice"),
    )
    assert response.status_code == 400
    assert response.json() == {"error": "InvalidParameters", "code": 109}
    assert client.get("/milestones/1").json() is None


def test_null_description_maps_to_invalid_parameters(client):
    _register(client, "alice", "Alice", 2)
    response = client.post(
        "/forests",
        json={"name": "Math", "description": None},
        headers=_headers("alice"),
    )
    assert response.status_code == 400
    assert response.json() == {"error": "InvalidParameters", "code": 109}
    assert client.get("/forests/1").json() is None


def test_route_handlers_run_in_threadpool():
    # blocking sqlite calls must not run on the event loop
    for route in app.routes:
        if getattr(route, "path", "").startswith(("/users", "/relationships", "/forests", "/milestones", "/completions")):
            assert not inspect.iscoroutinefunction(route.endpoint), route.path
