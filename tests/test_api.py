import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from enterate.context import build_app_context
from enterate.database import Settings
from enterate.main import create_app
from enterate.schemas.common import OperationResult

EVENT_PAYLOAD = {
    "title": "Cine al aire libre",
    "description": "Clásicos del cine argentino",
    "date": "2025-02-14",
    "time": "21:00",
    "location": "Parque Lezama",
    "category": "Cultura",
    "price": 0,
}

JUAN = {"X-User-Id": "1"}
ANA = {"X-User-Id": "2"}
CARLOS = {"X-User-Id": "3"}


@pytest.fixture
def context(session_factory):
    settings = Settings(supabase_url=None, supabase_anon_key=None, email_delay_seconds=0)
    context = build_app_context(settings, session_factory=session_factory)
    context.load()
    return context


@pytest_asyncio.fixture
async def client(context):
    app = create_app(context)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client


async def test_health_and_status(client):
    resp = await client.get("/api/health")
    assert resp.json() == {"status": "healthy", "backend": "local"}

    resp = await client.get("/api/status")
    data = resp.json()["data"]
    assert data["backend"] == "local"
    assert data["local"]["events"] == 4
    assert data["session_id"].startswith("session_")


async def test_list_and_filter_events(client):
    resp = await client.get("/api/events/")
    assert resp.status_code == 200
    assert resp.json()["data"]["total"] == 4

    resp = await client.get("/api/events/", params={"category": "Gastronomía"})
    [event] = resp.json()["data"]["events"]
    assert event["id"] == "2"
    assert event["is_free"] is True


async def test_get_unknown_event_is_404(client):
    resp = await client.get("/api/events/missing")
    assert resp.status_code == 404


async def test_create_requires_a_user(client):
    resp = await client.post("/api/events/", json=EVENT_PAYLOAD)
    assert resp.status_code == 401

    resp = await client.post("/api/events/", json=EVENT_PAYLOAD, headers={"X-User-Id": "999"})
    assert resp.status_code == 401


async def test_create_update_delete_event(client):
    resp = await client.post("/api/events/", json=EVENT_PAYLOAD, headers=JUAN)
    assert resp.status_code == 201
    event = resp.json()["data"]["event"]
    assert event["organizer_name"] == "Juan Pérez"

    resp = await client.put(f"/api/events/{event['id']}", json={"price": 300}, headers=JUAN)
    assert resp.json()["data"]["event"]["price"] == 300

    resp = await client.delete(f"/api/events/{event['id']}", headers=ANA)
    assert resp.status_code == 403

    resp = await client.delete(f"/api/events/{event['id']}", headers=JUAN)
    assert resp.status_code == 200
    resp = await client.get(f"/api/events/{event['id']}")
    assert resp.status_code == 404


async def test_invalid_event_payload_is_rejected(client):
    payload = {**EVENT_PAYLOAD, "date": "14/02/2025", "image_url": "not a url"}
    resp = await client.post("/api/events/", json=payload, headers=JUAN)
    assert resp.status_code == 422


async def test_like_and_attendance(client):
    resp = await client.put("/api/events/3/like", json={"present": True}, headers=JUAN)
    assert resp.json()["data"]["counters"]["likes"] == 2

    resp = await client.put("/api/events/3/like", json={"present": False}, headers=JUAN)
    assert resp.json()["data"]["counters"]["liked_by"] == ["3"]

    await client.put("/api/events/3/attendance", json={"present": True}, headers=JUAN)
    await client.put("/api/events/3/attendance", json={"present": True}, headers=JUAN)
    resp = await client.get("/api/events/3/interactions", headers=JUAN)
    assert resp.json()["data"]["interactions"] == {
        "event_id": "3",
        "user_id": "1",
        "is_liked": False,
        "is_attending": True,
    }

    resp = await client.get("/api/events/3")
    assert resp.json()["data"]["event"]["attendees"] == ["3", "1"]


async def test_storage_failure_maps_to_503(client, context, monkeypatch):
    monkeypatch.setattr(
        context.events.ledger,
        "set_interaction",
        lambda *args: OperationResult.failure("interaction_write_failed"),
    )

    resp = await client.put("/api/events/1/like", json={"present": True}, headers=JUAN)

    assert resp.status_code == 503
    assert resp.json()["detail"]["reason"] == "interaction_write_failed"


async def test_comment(client):
    resp = await client.post("/api/events/4/comments", json={"content": "¡Me encanta!"}, headers=ANA)
    assert resp.status_code == 201

    resp = await client.get("/api/events/4")
    [comment] = resp.json()["data"]["event"]["comments"]
    assert comment["user_name"] == "Ana García"

    resp = await client.post("/api/events/4/comments", json={"content": "  "}, headers=ANA)
    assert resp.status_code == 422


async def test_register_login_and_session(client):
    resp = await client.post(
        "/api/auth/register",
        json={"name": "Lucía", "email": "lucia@x.com", "password": "secreto", "confirm_password": "secreto"},
    )
    assert resp.status_code == 201

    resp = await client.get("/api/auth/me")
    assert resp.json()["data"]["user"]["email"] == "lucia@x.com"

    resp = await client.post(
        "/api/auth/register",
        json={"name": "Lucía", "email": "lucia@x.com", "password": "secreto", "confirm_password": "secreto"},
    )
    assert resp.status_code == 400

    await client.post("/api/auth/logout")
    resp = await client.get("/api/auth/me")
    assert resp.status_code == 401

    resp = await client.post("/api/auth/login", json={"email": "lucia@x.com"})
    assert resp.json()["data"]["user"]["name"] == "Lucía"
    resp = await client.get("/api/auth/me/points")
    assert resp.json()["data"]["points"] == 0


async def test_admin_request_review(client):
    resp = await client.post("/api/auth/me/admin-request", headers=JUAN)
    assert resp.json()["data"]["user"]["admin_status"] == "pending"

    resp = await client.get("/api/admin/requests", headers=JUAN)
    assert resp.status_code == 403

    resp = await client.get("/api/admin/requests", headers=ANA)
    assert [u["id"] for u in resp.json()["data"]["requests"]] == ["1"]

    resp = await client.put("/api/admin/requests/1", json={"approved": True}, headers=ANA)
    body = resp.json()
    assert body["data"]["user"]["role"] == "admin"
    assert body["data"]["email_sent"] is True

    resp = await client.get("/api/admin/emails", headers=CARLOS)
    assert resp.json()["data"]["total"] == 1


async def test_upload_image(client):
    files = {"file": ("cartel.png", b"\x89PNG\r\n\x1a\n", "image/png")}

    resp = await client.post("/api/images/", files=files, headers=JUAN)

    assert resp.status_code == 201
    image_url = resp.json()["data"]["image_url"]
    assert image_url.startswith("data:image/png;base64,")

    resp = await client.post(
        "/api/images/", files={"file": ("notas.txt", b"hola", "text/plain")}, headers=JUAN
    )
    assert resp.status_code == 400


async def test_refresh_keeps_backend(client):
    resp = await client.post("/api/refresh")
    data = resp.json()["data"]
    assert data["backend"] == "local"
    assert data["total"] == 4


async def test_categories(client):
    resp = await client.get("/api/events/categories")
    assert "Gastronomía" in resp.json()["data"]["categories"]

    resp = await client.post(
        "/api/events/", json={**EVENT_PAYLOAD, "end_time": "20:00"}, headers=JUAN
    )
    assert resp.status_code == 400


async def test_null_fields_in_update_are_rejected(client):
    resp = await client.post("/api/events/", json=EVENT_PAYLOAD, headers=JUAN)
    event_id = resp.json()["data"]["event"]["id"]

    resp = await client.put(f"/api/events/{event_id}", json={"title": None}, headers=JUAN)
    assert resp.status_code == 422
    resp = await client.put(
        f"/api/events/{event_id}", json={"time": None, "end_time": "23:00"}, headers=JUAN
    )
    assert resp.status_code == 422

    resp = await client.get("/api/events/")
    assert resp.json()["data"]["total"] == 5
    assert event_id in [e["id"] for e in resp.json()["data"]["events"]]


async def test_oversized_upload_is_rejected(client):
    content = b"\x89PNG\r\n\x1a\n" + b"\x00" * (6 * 1024 * 1024)
    files = {"file": ("enorme.png", content, "image/png")}

    resp = await client.post("/api/images/", files=files, headers=JUAN)

    assert resp.status_code == 400


@pytest_asyncio.fixture
async def remote_client(settings, session_factory, fake_client):
    context = build_app_context(settings, client=fake_client, session_factory=session_factory)
    context.load()
    app = create_app(context)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client


async def test_remote_identity_comes_from_bearer_token(remote_client, fake_client):
    resp = await remote_client.post(
        "/api/auth/register",
        json={"name": "Lucía", "email": "lucia@x.com", "password": "secreto", "confirm_password": "secreto"},
    )
    user_id = resp.json()["data"]["user"]["id"]

    resp = await remote_client.post("/api/auth/login", json={"email": "lucia@x.com"})
    assert resp.status_code == 401

    resp = await remote_client.post("/api/events/", json=EVENT_PAYLOAD, headers={"X-User-Id": user_id})
    assert resp.status_code == 401

    resp = await remote_client.get("/api/auth/me", headers={"Authorization": "Bearer forged"})
    assert resp.status_code == 401

    resp = await remote_client.post(
        "/api/auth/login", json={"email": "lucia@x.com", "password": "secreto"}
    )
    token = resp.json()["data"]["access_token"]
    resp = await remote_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.json()["data"]["user"]["id"] == user_id


async def test_remote_session_picks_up_role_change(remote_client, fake_client):
    fake_client.tables.setdefault("users", []).append(
        {"id": "admin-1", "name": "Carlos", "email": "carlos@x.com", "role": "admin"}
    )
    fake_client.auth.sign_up({"email": "carlos@x.com", "password": "admin123"})
    resp = await remote_client.post(
        "/api/auth/login", json={"email": "carlos@x.com", "password": "admin123"}
    )
    admin_headers = {"Authorization": f"Bearer {resp.json()['data']['access_token']}"}

    resp = await remote_client.post(
        "/api/auth/register",
        json={"name": "Lucía", "email": "lucia@x.com", "password": "secreto", "confirm_password": "secreto"},
    )
    user_id = resp.json()["data"]["user"]["id"]
    await remote_client.post("/api/auth/me/admin-request")

    resp = await remote_client.put(
        f"/api/admin/requests/{user_id}", json={"approved": True}, headers=admin_headers
    )
    assert resp.status_code == 200

    resp = await remote_client.get("/api/auth/me")
    assert resp.json()["data"]["user"]["role"] == "admin"
    assert resp.json()["data"]["user"]["admin_status"] == "approved"
