"""
Tests for password hashing and the signup/login/logout routes.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from jobboard.accounts import AccountStore, hash_password, verify_password


def test_hash_round_trip():
    encoded = hash_password("s3cret")
    assert "s3cret" not in encoded
    assert verify_password("s3cret", encoded)
    assert not verify_password("S3cret", encoded)


def test_hashes_are_salted():
    assert hash_password("same") != hash_password("same")


def test_malformed_hash_never_verifies():
    assert not verify_password("anything", "not-a-hash")


def signup(client: TestClient, username="alice", password="pw"):
    return client.post("/auth/signup", json={"username": username, "password": password})


def login(client: TestClient, username="alice", password="pw"):
    return client.post("/auth/login", json={"username": username, "password": password})


def test_signup_then_login(client: TestClient):
    response = signup(client)
    assert response.status_code == 201
    assert "Signup successful" in response.json()["message"]

    response = login(client)
    assert response.status_code == 200
    session = response.json()
    assert session["username"] == "alice"
    assert session["token"]


@pytest.mark.parametrize("username, password", [("", "pw"), ("alice", ""), ("   ", "pw")])
def test_signup_rejects_empty_credentials(client: TestClient, account_store, username, password):
    response = signup(client, username, password)
    assert response.status_code == 400
    assert account_store.accounts == {}


def test_login_with_wrong_password_is_rejected(client: TestClient):
    signup(client)
    response = login(client, password="nope")
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid credentials"}


def test_login_unknown_user_is_rejected(client: TestClient):
    assert login(client, "ghost").status_code == 401


def test_signup_again_overwrites_password(client: TestClient):
    signup(client, password="old")
    signup(client, password="new")
    assert login(client, password="old").status_code == 401
    assert login(client, password="new").status_code == 200


def test_session_lookup_and_logout(client: TestClient):
    signup(client)
    token = login(client).json()["token"]
    headers = {"Authorization": f"Bearer {token}"}

    response = client.get("/auth/session", headers=headers)
    assert response.status_code == 200
    assert response.json()["username"] == "alice"

    assert client.post("/auth/logout", headers=headers).status_code == 200
    assert client.get("/auth/session", headers=headers).status_code == 401


def test_session_requires_token(client: TestClient):
    assert client.get("/auth/session").status_code == 401


def test_logout_without_session_is_harmless(client: TestClient):
    assert client.post("/auth/logout").status_code == 200


def test_job_routes_stay_open_without_login(client: TestClient, engineer_payload: dict):
    job_id = client.post("/jobs", json=engineer_payload).json()["_id"]
    assert client.delete(f"/jobs/{job_id}").status_code == 200


@pytest.mark.asyncio
async def test_store_login_checks_hash_before_creating_session():
    result = MagicMock()
    result.single = AsyncMock(return_value={"hash": hash_password("right")})
    session = MagicMock()
    session.run = AsyncMock(return_value=result)

    store = AccountStore(session)

    assert await store.login("bob", "wrong") is None
    assert session.run.await_count == 1

    result.consume = AsyncMock()
    info = await store.login("bob", "right")
    assert info.username == "bob"
    assert session.run.await_count == 3
    create_call = session.run.await_args_list[-1]
    assert "CREATE (:Session" in create_call.args[0]
    assert create_call.kwargs["token"] == info.token
