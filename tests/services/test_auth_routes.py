"""Auth Routes — register, login and /me over the HTTP envelope."""

from bookstore.config import get_settings
from bookstore.infrastructure.security import create_access_token
from uuid import uuid4


async def test_register_then_login(client):
    res = await client.post("/auth/register", json={
        "username": "ana", "email": "Ana@Example.com", "password": "pw123456",
    })
    assert res.status_code == 201
    assert res.json()["data"]["email"] == "ana@example.com"

    login = await client.post("/auth/login", json={
        "email": "ana@example.com", "password": "pw123456",
    })
    assert login.status_code == 200
    token = login.json()["data"]["access_token"]

    me = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["data"]["username"] == "ana"


async def test_register_duplicate_email_is_409(client, user):
    res = await client.post("/auth/register", json={
        "email": user.email, "password": "another",
    })
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "DUPLICATE_RESOURCE"


async def test_register_rejects_bad_email(client):
    res = await client.post("/auth/register", json={
        "email": "no-at-sign", "password": "pw",
    })
    assert res.status_code == 400


async def test_login_wrong_password_is_401(client, user):
    res = await client.post("/auth/login", json={
        "email": user.email, "password": "wrong",
    })
    assert res.status_code == 401
    assert res.json()["message"] == "Invalid credentials"


async def test_login_unknown_email_is_401(client):
    res = await client.post("/auth/login", json={
        "email": "ghost@example.com", "password": "whatever",
    })
    assert res.status_code == 401
    assert res.json()["message"] == "Invalid credentials"


async def test_me_requires_token(client):
    res = await client.get("/auth/me")
    assert res.status_code == 401
    assert res.json()["message"] == "Missing Authorization header"


async def test_me_for_vanished_user_is_404(client):
    token = create_access_token(uuid4(), get_settings())
    res = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 404
