"""
Integration tests for identity resolution and the profile endpoints.
"""

from datetime import datetime, timedelta, timezone

from jose import jwt

from config import JWT_ALGORITHM, JWT_SECRET
from conftest import auth, make_token


def test_get_me(client, owner):
    response = client.get("/api/users/me", headers=auth(owner))

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == owner.id
    assert body["full_name"] == "Olga Owner"
    assert body["email"] == "olga@example.com"
    assert body["role"] == "owner"


def test_id_claim_is_accepted(client, tenant):
    token = make_token(tenant.id, claim="id")

    response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["role"] == "tenant"


def test_missing_token(client):
    response = client.get("/api/users/me")

    assert response.status_code == 401
    assert response.json()["error"] == "unauthorized"


def test_malformed_header(client, owner):
    response = client.get("/api/users/me", headers={"Authorization": make_token(owner.id)})

    assert response.status_code == 401


def test_token_with_wrong_signature(client, owner):
    token = jwt.encode({"sub": owner.id}, "not-the-secret", algorithm=JWT_ALGORITHM)

    response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_expired_token(client, owner):
    expired = datetime.now(timezone.utc) - timedelta(minutes=5)
    token = jwt.encode({"sub": owner.id, "exp": expired}, JWT_SECRET, algorithm=JWT_ALGORITHM)

    response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_token_without_subject(client):
    token = jwt.encode({"role": "owner"}, JWT_SECRET, algorithm=JWT_ALGORITHM)

    response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_principal_without_profile(client):
    token = make_token("5d1f0c0e-0000-4000-8000-000000000000")

    response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 404
    assert response.json()["error"] == "user_not_found"


def test_update_full_name(client, tenant):
    response = client.patch("/api/users/me", json={"full_name": "Tomasz T. Tenant"}, headers=auth(tenant))

    assert response.status_code == 200
    assert response.json()["full_name"] == "Tomasz T. Tenant"
    assert client.get("/api/users/me", headers=auth(tenant)).json()["full_name"] == "Tomasz T. Tenant"


def test_role_cannot_be_changed(client, tenant):
    response = client.patch(
        "/api/users/me",
        json={"full_name": "Tomasz Tenant", "role": "owner"},
        headers=auth(tenant),
    )

    assert response.status_code == 400
    assert client.get("/api/users/me", headers=auth(tenant)).json()["role"] == "tenant"


def test_full_name_validation(client, owner):
    for full_name in ("A", "x" * 101):
        response = client.patch("/api/users/me", json={"full_name": full_name}, headers=auth(owner))
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
