"""Tests for auth and thread API endpoints using httpx AsyncClient."""


async def test_health_check(anon_client):
    res = await anon_client.get("/api/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


async def test_me_returns_logged_in_user(client):
    res = await client.get("/api/auth/me")
    assert res.status_code == 200
    assert res.json()["user"]["email"] == "owner@example.com"


async def test_me_anonymous(anon_client):
    res = await anon_client.get("/api/auth/me")
    assert res.status_code == 401
    assert res.json() == {"error": "Authentication required"}


async def test_register_duplicate_email(client):
    res = await client.post("/api/auth/register", json={"email": "Owner@Example.com", "password": "TestPass123!"})
    assert res.status_code == 409
    assert res.json() == {"error": "Email already registered"}


async def test_login_and_logout(client, anon_client):
    res = await anon_client.post("/api/auth/login", json={"email": "owner@example.com", "password": "wrong-pass"})
    assert res.status_code == 401

    res = await anon_client.post("/api/auth/login", json={"email": "owner@example.com", "password": "TestPass123!"})
    assert res.status_code == 200
    assert (await anon_client.get("/api/auth/me")).status_code == 200

    await anon_client.post("/api/auth/logout")
    assert (await anon_client.get("/api/auth/me")).status_code == 401


async def test_create_thread(client):
    res = await client.post("/api/threads", json={"title": "Weekend plans"})
    assert res.status_code == 200
    data = res.json()
    assert data["id"].startswith("thread_")
    assert data["title"] == "Weekend plans"
    assert data["isShared"] is False
    assert data["isBranched"] is False
    assert data["sharedAt"] is None
    assert "ownerUserId" not in data


async def test_create_thread_default_title(client):
    res = await client.post("/api/threads", json={})
    assert res.json()["title"] == "New Chat"


async def test_list_threads_empty(client):
    res = await client.get("/api/threads")
    assert res.status_code == 200
    assert res.json() == []


async def test_list_threads_only_own(client, other_client):
    await client.post("/api/threads", json={"title": "Mine"})
    await other_client.post("/api/threads", json={"title": "Theirs"})

    res = await client.get("/api/threads")
    assert [t["title"] for t in res.json()] == ["Mine"]


async def test_get_thread_detail(client):
    thread_id = (await client.post("/api/threads", json={"title": "Detail"})).json()["id"]
    await client.post(f"/api/threads/{thread_id}/messages", json={"role": "user", "content": "hi"})
    await client.post(f"/api/threads/{thread_id}/messages", json={"role": "assistant", "content": "hello", "model": "m"})

    res = await client.get(f"/api/threads/{thread_id}")
    assert res.status_code == 200
    data = res.json()
    assert data["title"] == "Detail"
    assert [m["content"] for m in data["messages"]] == ["hi", "hello"]
    assert data["messages"][1]["model"] == "m"


async def test_get_thread_not_found(client):
    res = await client.get("/api/threads/thread_missing")
    assert res.status_code == 404
    assert res.json() == {"error": "Thread not found"}


async def test_foreign_thread_not_found(client, other_client):
    thread_id = (await client.post("/api/threads", json={})).json()["id"]

    res = await other_client.get(f"/api/threads/{thread_id}")
    assert res.status_code == 404
    res = await other_client.post(f"/api/threads/{thread_id}/messages", json={"role": "user", "content": "x"})
    assert res.status_code == 404


async def test_add_message_invalid_role(client):
    thread_id = (await client.post("/api/threads", json={})).json()["id"]
    res = await client.post(f"/api/threads/{thread_id}/messages", json={"role": "narrator", "content": "x"})
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid request body"}


async def test_threads_require_login(anon_client):
    res = await anon_client.get("/api/threads")
    assert res.status_code == 401
    res = await anon_client.post("/api/threads", json={})
    assert res.status_code == 401
