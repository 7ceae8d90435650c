from conftest import API, signup


async def test_signup_returns_tokens_and_me(client):
    headers = await signup(client, "marta", document="28999111", first_name="Marta", email="marta@example.com")
    resp = await client.get(f"{API}/auth/me", headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["username"] == "marta"
    assert body["role"] == "client"
    assert body["provider_id"] is None
    assert "hashed_password" not in body


async def test_signup_cannot_create_admin(client):
    payload = {"username": "sneaky", "password": "secret123", "role": "admin", "provider_id": "santi"}
    resp = await client.post(f"{API}/auth/signup", json=payload)
    assert resp.status_code == 201
    me = await client.get(
        f"{API}/auth/me", headers={"Authorization": f"Bearer {resp.json()['access_token']}"}
    )
    assert me.json()["role"] == "client"


async def test_duplicate_username_and_document(client):
    await signup(client, "marta", document="28999111")
    resp = await client.post(f"{API}/auth/signup", json={"username": "marta", "password": "secret123"})
    assert resp.status_code == 409
    assert "username" in resp.json()["detail"]
    resp = await client.post(
        f"{API}/auth/signup", json={"username": "other", "password": "secret123", "document": "28999111"}
    )
    assert resp.status_code == 409
    assert "document" in resp.json()["detail"]


async def test_signup_validation(client):
    resp = await client.post(f"{API}/auth/signup", json={"username": "ab", "password": "secret123"})
    assert resp.status_code == 422
    resp = await client.post(f"{API}/auth/signup", json={"username": "abcd", "password": "123"})
    assert resp.status_code == 422
    resp = await client.post(
        f"{API}/auth/signup", json={"username": "abcd", "password": "secret123", "email": "not-an-email"}
    )
    assert resp.status_code == 422


async def test_login_by_username_or_document(client):
    await signup(client, "marta", document="28999111")
    for identifier in ("marta", "28999111"):
        resp = await client.post(f"{API}/auth/login", json={"identifier": identifier, "password": "secret123"})
        assert resp.status_code == 200
        assert resp.json()["token_type"] == "bearer"


async def test_login_wrong_password(client):
    await signup(client, "marta")
    resp = await client.post(f"{API}/auth/login", json={"identifier": "marta", "password": "nope123"})
    assert resp.status_code == 401


async def test_me_requires_token(client):
    assert (await client.get(f"{API}/auth/me")).status_code == 401
    resp = await client.get(f"{API}/auth/me", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 401


async def test_refresh_rotates_token(client):
    resp = await client.post(f"{API}/auth/signup", json={"username": "marta", "password": "secret123"})
    first = resp.json()["refresh_token"]

    resp = await client.post(f"{API}/auth/refresh", json={"refresh_token": first})
    assert resp.status_code == 200
    second = resp.json()["refresh_token"]
    assert second != first

    # a rotated token cannot be used again
    resp = await client.post(f"{API}/auth/refresh", json={"refresh_token": first})
    assert resp.status_code == 401

    resp = await client.post(f"{API}/auth/refresh", headers={"X-Refresh-Token": second})
    assert resp.status_code == 200


async def test_refresh_requires_token(client):
    resp = await client.post(f"{API}/auth/refresh")
    assert resp.status_code == 401


async def test_logout_revokes_refresh_token(client):
    resp = await client.post(f"{API}/auth/signup", json={"username": "marta", "password": "secret123"})
    token = resp.json()["refresh_token"]
    resp = await client.post(f"{API}/auth/logout", json={"refresh_token": token})
    assert resp.status_code == 200
    resp = await client.post(f"{API}/auth/refresh", json={"refresh_token": token})
    assert resp.status_code == 401
