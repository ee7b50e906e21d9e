"""HTTP tests against the FastAPI app with the session dependency pointed at the test store."""
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import SQLAlchemyError

from taskboard.core import snapshots
from taskboard.core.daily import DailyEnsureTracker
from taskboard.db.session import get_db
from taskboard.main import app


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.state.daily_tracker = DailyEnsureTracker()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def headers(org, user_id):
    return {"X-Organization-Id": str(org.id), "X-User-Id": str(user_id)}


@pytest.mark.asyncio
async def test_finish_and_reset_over_http(client, headers):
    board = (await client.post("/api/boards/", json={"title": "Daily Chores"}, headers=headers)).json()
    todo = (
        await client.post(f"/api/boards/{board['id']}/columns", json={"title": "Todo"})
    ).json()

    task_ids = []
    for title in ("T1", "T2"):
        response = await client.post(
            f"/api/boards/{board['id']}/tasks",
            json={"column_id": todo["id"], "title": title},
            headers=headers,
        )
        assert response.status_code == 201
        task_ids.append(response.json()["id"])

    response = await client.post(f"/api/tasks/{task_ids[0]}/complete", json={}, headers=headers)
    assert response.json()["completed"] is True
    assert response.json()["completed_by"] == headers["X-User-Id"]

    response = await client.post(f"/api/boards/{board['id']}/snapshot", json={}, headers=headers)
    assert response.status_code == 200
    snapshot_id = response.json()["snapshot_id"]

    detail = (await client.get(f"/api/snapshots/{snapshot_id}")).json()
    assert detail["title"] == "Daily Chores"
    assert detail["column_id"] is None
    assert detail["submission_type"] == "user"
    assert detail["submitted_by"] == headers["X-User-Id"]
    assert [c["title"] for c in detail["columns"]] == ["Todo"]
    assert [(t["title"], t["completed"]) for t in detail["tasks"]] == [("T1", True), ("T2", False)]

    live = (await client.get(f"/api/boards/{board['id']}")).json()
    assert live["finished_at"] is not None
    assert [t["completed"] for t in live["columns"][0]["tasks"]] == [False, False]

    history = (await client.get("/api/snapshots/", headers=headers)).json()
    assert [s["id"] for s in history] == [snapshot_id]

    assert (await client.delete(f"/api/snapshots/{snapshot_id}")).status_code == 204
    assert (await client.get(f"/api/snapshots/{snapshot_id}")).status_code == 404


@pytest.mark.asyncio
async def test_deduplicated_snapshot_returns_same_id(client, chores):
    url = f"/api/boards/{chores.board.id}/snapshot"
    body = {"finished_on": "2026-10-18", "dedupe": True, "submission_type": "admin_finish"}

    first = (await client.post(url, json=body)).json()["snapshot_id"]
    second = (await client.post(url, json=body)).json()["snapshot_id"]

    assert first == second


@pytest.mark.asyncio
async def test_snapshot_of_missing_board_returns_null(client):
    response = await client.post(f"/api/boards/{uuid.uuid4()}/snapshot", json={})

    assert response.status_code == 200
    assert response.json() == {"snapshot_id": None}


@pytest.mark.asyncio
async def test_column_snapshot_endpoint(client, chores, headers):
    response = await client.post(
        f"/api/boards/{chores.board.id}/columns/{chores.done.id}/snapshot", json={}, headers=headers
    )
    snapshot_id = response.json()["snapshot_id"]

    detail = (await client.get(f"/api/snapshots/{snapshot_id}")).json()
    assert detail["title"] == "Daily Chores - Done"
    assert detail["column_id"] == str(chores.done.id)
    assert [c["title"] for c in detail["columns"]] == ["Done"]
    assert [t["title"] for t in detail["tasks"]] == ["T3"]


@pytest.mark.asyncio
async def test_reorder_endpoint(client, chores):
    response = await client.post(
        f"/api/columns/{chores.todo.id}/tasks/{chores.tasks['T2'].id}/reorder",
        json={"direction": "up"},
    )

    assert response.status_code == 200
    assert [t["title"] for t in response.json()] == ["T2", "T1"]
    assert [t["position"] for t in response.json()] == [0, 1]


@pytest.mark.asyncio
async def test_reorder_rejects_unknown_direction(client, chores):
    response = await client.post(
        f"/api/columns/{chores.todo.id}/tasks/{chores.tasks['T2'].id}/reorder",
        json={"direction": "left"},
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_copy_task_endpoint(client, chores, headers):
    board = (await client.post("/api/boards/", json={"title": "Weekend"}, headers=headers)).json()
    inbox = (await client.post(f"/api/boards/{board['id']}/columns", json={"title": "Inbox"})).json()

    response = await client.post(
        f"/api/tasks/{chores.tasks['T1'].id}/copy",
        json={"target_board_id": board["id"], "target_column_id": inbox["id"]},
        headers=headers,
    )

    assert response.status_code == 201
    copied = response.json()
    assert copied["title"] == "T1"
    assert copied["completed"] is False
    assert copied["board_id"] == board["id"]


@pytest.mark.asyncio
async def test_foreground_endpoint(client, org, chores):
    url = f"/api/organizations/{org.id}/foreground"

    response = await client.post(url, json={"local_date": "2026-10-18"})

    assert response.status_code == 200
    ensured = response.json()["ensured"]
    assert [e["utc_date"] for e in ensured] == ["2026-10-17", "2026-10-18"]
    assert list(ensured[0]["snapshots"]) == [str(chores.board.id)]

    again = await client.post(url, json={"local_date": "2026-10-18"})
    assert again.json() == {"ensured": []}


@pytest.mark.asyncio
async def test_daily_snapshots_endpoint(client, org, chores):
    response = await client.post(
        f"/api/organizations/{org.id}/daily-snapshots", json={"utc_date": "2026-10-18"}
    )

    assert response.status_code == 200
    assert list(response.json()["snapshots"]) == [str(chores.board.id)]


@pytest.mark.asyncio
async def test_background_sweep_needs_a_worker_queue(client, org):
    response = await client.post(
        f"/api/organizations/{org.id}/daily-snapshots?background=true",
        json={"utc_date": "2026-10-18"},
    )

    assert response.status_code == 503


@pytest.mark.asyncio
async def test_organization_endpoints(client, org):
    response = await client.get(f"/api/organizations/by-code/{org.code}")
    assert response.json()["id"] == str(org.id)

    duplicate = await client.post("/api/organizations/", json={"name": "Again", "code": org.code})
    assert duplicate.status_code == 409

    blank = await client.post("/api/organizations/", json={"name": "  "})
    assert blank.status_code == 422

    assert (await client.get(f"/api/organizations/{uuid.uuid4()}")).status_code == 404


@pytest.mark.asyncio
async def test_domain_errors_map_to_status_codes(client, chores, headers, org):
    other = (await client.post("/api/boards/", json={"title": "Other"}, headers=headers)).json()

    invalid = await client.post(
        f"/api/boards/{other['id']}/tasks",
        json={"column_id": str(chores.todo.id), "title": "Lost"},
        headers=headers,
    )
    assert invalid.status_code == 422

    missing = await client.patch(f"/api/tasks/{uuid.uuid4()}", json={"title": "Nothing"})
    assert missing.status_code == 404
    assert "not found" in missing.json()["detail"]

    no_user = await client.post(
        "/api/boards/", json={"title": "Anon"}, headers={"X-Organization-Id": str(org.id)}
    )
    assert no_user.status_code == 401


@pytest.mark.asyncio
async def test_failed_snapshot_reports_generic_error(client, chores, monkeypatch):
    async def broken_finish(db, board):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(snapshots, "mark_board_finished", broken_finish)

    response = await client.post(f"/api/boards/{chores.board.id}/snapshot", json={})

    assert response.status_code == 500
    assert response.json() == {"detail": "The change could not be saved."}


@pytest.mark.asyncio
async def test_system_stats(client, chores):
    stats = (await client.get("/api/system/stats")).json()

    assert stats == {
        "organizations": 1,
        "boards": 1,
        "active_boards": 1,
        "tasks": 3,
        "snapshots": 0,
    }
