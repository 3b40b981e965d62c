import json
import uuid

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from practice_api.core.deps import COOKIE_NAME, get_db
from practice_api.core.security import create_session_token
from practice_api.core.websocket import ConnectionManager
from practice_api.main import app


class FakeWebSocket:
    def __init__(self, fail: bool = False) -> None:
        self.accepted = False
        self.fail = fail
        self.sent: list[dict] = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(json.loads(data))


# =============================================================================
# Connection registry
# =============================================================================


@pytest.mark.asyncio
async def test_send_to_user_reaches_every_connection_of_that_user():
    manager = ConnectionManager()
    user_a = uuid.uuid4()
    user_b = uuid.uuid4()
    tab_1, tab_2, other = FakeWebSocket(), FakeWebSocket(), FakeWebSocket()

    await manager.connect(tab_1, user_a)
    await manager.connect(tab_2, user_a)
    await manager.connect(other, user_b)

    delivered = await manager.send_to_user(user_a, {"type": "count_update", "data": {"count": 2}})

    assert delivered == 2
    assert tab_1.sent == tab_2.sent == [{"type": "count_update", "data": {"count": 2}}]
    assert other.sent == []
    assert manager.get_connected_count(user_a) == 2
    assert manager.get_total_connections() == 3


@pytest.mark.asyncio
async def test_broadcast_drops_dead_connections():
    manager = ConnectionManager()
    alive, dead = FakeWebSocket(), FakeWebSocket(fail=True)
    user_alive, user_dead = uuid.uuid4(), uuid.uuid4()

    await manager.connect(alive, user_alive)
    await manager.connect(dead, user_dead)

    delivered = await manager.broadcast({"type": "invalidate"})

    assert delivered == 1
    assert alive.sent == [{"type": "invalidate"}]
    assert manager.get_connected_count(user_dead) == 0
    assert manager.get_total_connections() == 1


@pytest.mark.asyncio
async def test_disconnect_forgets_user():
    manager = ConnectionManager()
    user_id = uuid.uuid4()
    ws = FakeWebSocket()

    await manager.connect(ws, user_id)
    await manager.disconnect(ws, user_id)
    await manager.disconnect(ws, user_id)

    assert manager.get_connected_count(user_id) == 0
    assert await manager.send_to_user(user_id, {"type": "notification"}) == 0


# =============================================================================
# Endpoint
# =============================================================================


@pytest.fixture
def ws_client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _token(user):
    return create_session_token(user.id, user.role, user.token_version)


def test_ping_pong(ws_client, supervisor):
    with ws_client.websocket_connect(f"/ws/notifications?token={_token(supervisor)}") as ws:
        ws.send_text("ping")
        assert ws.receive_text() == "pong"


def test_invalid_token_is_rejected(ws_client):
    with pytest.raises(WebSocketDisconnect) as exc:
        with ws_client.websocket_connect("/ws/notifications?token=not-a-jwt") as ws:
            ws.receive_text()
    assert exc.value.code == 4001


def test_missing_credentials_are_rejected(ws_client):
    with pytest.raises(WebSocketDisconnect) as exc:
        with ws_client.websocket_connect("/ws/notifications") as ws:
            ws.receive_text()
    assert exc.value.code == 4001


def test_create_and_review_push_live_updates(ws_client, therapist, supervisor, patient):
    sup_token = _token(supervisor)
    ther_token = _token(therapist)
    headers = {"X-Requested-With": "XMLHttpRequest"}

    with ws_client.websocket_connect(f"/ws/notifications?token={sup_token}") as sup_ws:
        resp = ws_client.post(
            f"/api/patients/{patient.id}/discharge-requests",
            json={"reason": "ready"},
            headers={**headers, "Authorization": f"Bearer {ther_token}"},
        )
        assert resp.status_code == 201, resp.text
        request_id = resp.json()["id"]

        notification = sup_ws.receive_json()
        assert notification["type"] == "notification"
        assert notification["data"]["type"] == "discharge_request_created"
        assert notification["data"]["data"]["requestId"] == request_id

        count = sup_ws.receive_json()
        assert count == {"type": "count_update", "data": {"count": 1}}

        invalidate = sup_ws.receive_json()
        assert invalidate["type"] == "invalidate"
        assert invalidate["event"] == "discharge_request_created"
        assert invalidate["data"]["requestId"] == request_id
        assert "discharge-requests:pending" in invalidate["data"]["resources"]
        assert f"patient:{patient.id}" in invalidate["data"]["resources"]

    with ws_client.websocket_connect(f"/ws/notifications?token={ther_token}") as ther_ws:
        resp = ws_client.patch(
            f"/api/patients/{patient.id}/discharge-requests/{request_id}",
            json={"status": "denied", "reviewNotes": "keep going"},
            headers={**headers, "Authorization": f"Bearer {sup_token}"},
        )
        assert resp.status_code == 200, resp.text

        notification = ther_ws.receive_json()
        assert notification["data"]["type"] == "discharge_request_denied"
        assert notification["data"]["data"]["reviewNotes"] == "keep going"
        assert ther_ws.receive_json()["type"] == "count_update"

        invalidate = ther_ws.receive_json()
        assert invalidate["event"] == "discharge_request_updated"
        assert invalidate["data"]["status"] == "denied"


def test_revoked_session_is_rejected(ws_client, db, supervisor):
    token = _token(supervisor)
    supervisor.token_version += 1
    db.commit()

    with pytest.raises(WebSocketDisconnect) as exc:
        with ws_client.websocket_connect(f"/ws/notifications?token={token}") as ws:
            ws.receive_text()
    assert exc.value.code == 4001


def test_inactive_user_is_rejected(ws_client, db, therapist):
    token = _token(therapist)
    therapist.is_active = False
    db.commit()

    with pytest.raises(WebSocketDisconnect) as exc:
        with ws_client.websocket_connect(f"/ws/notifications?token={token}") as ws:
            ws.receive_text()
    assert exc.value.code == 4001


def test_token_for_unknown_user_is_rejected(ws_client):
    token = create_session_token(uuid.uuid4(), "admin", 1)

    with pytest.raises(WebSocketDisconnect) as exc:
        with ws_client.websocket_connect(f"/ws/notifications?token={token}") as ws:
            ws.receive_text()
    assert exc.value.code == 4001


def test_cookie_authenticates_active_user(ws_client, supervisor):
    ws_client.cookies.set(COOKIE_NAME, _token(supervisor))
    try:
        with ws_client.websocket_connect("/ws/notifications") as ws:
            ws.send_text("ping")
            assert ws.receive_text() == "pong"
    finally:
        ws_client.cookies.clear()
