from datetime import timedelta

from tour_booking.utils.security import create_access_token, decode_access_token


def _login(client, username="alice", password="secret"):
    return client.post("/api/v1/auth/login", json={"username": username, "password": password})


def test_login_returns_token(client, user):
    resp = _login(client)

    assert resp.status_code == 200
    body = resp.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["username"] == "alice"
    assert decode_access_token(body["access_token"])["sub"] == str(user.id)


def test_login_wrong_password(client, user):
    resp = _login(client, password="nope")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid username or password"


def test_login_unknown_user(client):
    assert _login(client, username="ghost").status_code == 401


def test_login_inactive_user(client, user):
    client.put(f"/api/v1/users/{user.id}/deactivate")
    assert _login(client).status_code == 403


def test_me(client, user):
    token = _login(client).json()["access_token"]

    resp = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 200
    assert resp.json()["full_name"] == "Alice Nguyen"


def test_me_rejects_bad_tokens(client, user):
    expired = create_access_token({"sub": str(user.id)}, expires_delta=timedelta(minutes=-5))

    assert client.get("/api/v1/auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 401
    assert client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {expired}"}).status_code == 401
    assert client.get("/api/v1/auth/me").status_code in (401, 403)


def test_health(client):
    resp = client.get("/api/v1/health")
    assert resp.json()["version"] == "1.0.0"
    assert resp.status_code in (200, 503)
    assert resp.json()["connection"]["dialect"] == "sqlite"
