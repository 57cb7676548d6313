"""
Centralized Test Configuration.

Every test runs against a fresh in-memory SQLite database (foreign keys on)
and an in-memory attachment store; requests authenticate with HS256 tokens
signed by the same secret the app verifies.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("AZURE_STORAGE_ACCOUNT", "teststorage")
os.environ.setdefault("PUBLIC_APP_URL", "http://localhost:4321")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from azure_blob import get_blob_storage
from config import JWT_ALGORITHM, JWT_SECRET
from database import get_session
from errors import StorageError
from main import app
from models import Base, Lease, LeaseStatus, User, UserRole

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite://"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


class FakeBlobStorage:
    """In-memory stand-in for the attachments container."""

    def __init__(self):
        self.files = {}
        self.calls = []
        self.fail_upload = False
        self.fail_delete = False

    def upload(self, path, data, content_type):
        self.calls.append(("upload", path))
        if self.fail_upload:
            raise StorageError(f"Failed to upload {path}")
        self.files[path] = (data, content_type)

    def delete(self, path):
        self.calls.append(("delete", path))
        if self.fail_delete:
            raise StorageError(f"Failed to delete {path}")
        self.files.pop(path, None)

    def download_url(self, path):
        return f"https://teststorage.blob.core.windows.net/charge-attachments/{path}?sig=test"


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test function and drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage():
    return FakeBlobStorage()


@pytest.fixture
def client(storage):
    def override_get_session():
        session = TestingSessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_blob_storage] = lambda: storage
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides = {}


# ---------------------------------------------------------------------------
# Users and credentials
# ---------------------------------------------------------------------------

def make_token(user_id, claim="sub"):
    return jwt.encode({claim: user_id}, JWT_SECRET, algorithm=JWT_ALGORITHM)


def auth(user):
    return {"Authorization": f"Bearer {make_token(user.id)}"}


@pytest.fixture
def make_user(db_session):
    def _make_user(role, full_name, email):
        user = User(full_name=full_name, email=email, role=role)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def owner(make_user):
    return make_user(UserRole.OWNER, "Olga Owner", "olga@example.com")


@pytest.fixture
def other_owner(make_user):
    return make_user(UserRole.OWNER, "Oscar Owner", "oscar@example.com")


@pytest.fixture
def tenant(make_user):
    return make_user(UserRole.TENANT, "Tomasz Tenant", "tomasz@example.com")


@pytest.fixture
def other_tenant(make_user):
    return make_user(UserRole.TENANT, "Teresa Tenant", "teresa@example.com")


# ---------------------------------------------------------------------------
# Domain helpers
# ---------------------------------------------------------------------------

def create_apartment(client, owner, name="Sunny Flat", address="12 Long Street, Springfield"):
    response = client.post("/api/apartments", json={"name": name, "address": address}, headers=auth(owner))
    assert response.status_code == 201, response.text
    return response.json()


def create_invitation(client, owner, apartment_id):
    response = client.post(f"/api/apartments/{apartment_id}/invitations", headers=auth(owner))
    assert response.status_code == 201, response.text
    return response.json()


def accept_invitation(client, tenant, token):
    return client.post(f"/api/invitations/{token}/accept", headers=auth(tenant))


def lease_apartment(client, owner, tenant, apartment_id):
    """Invite and accept; returns the created lease."""
    invitation = create_invitation(client, owner, apartment_id)
    response = accept_invitation(client, tenant, invitation["token"])
    assert response.status_code == 201, response.text
    return response.json()["lease"]


def create_charge(client, owner, apartment_id, amount=1000.00, due_date=None, type="rent", comment=None):
    body = {
        "amount": amount,
        "due_date": (due_date or date.today()).isoformat(),
        "type": type,
    }
    if comment is not None:
        body["comment"] = comment
    response = client.post(f"/api/apartments/{apartment_id}/charges", json=body, headers=auth(owner))
    assert response.status_code == 201, response.text
    return response.json()


def record_payment(client, owner, charge_id, amount, payment_date=None):
    return client.post(
        f"/api/charges/{charge_id}/payments",
        json={"amount": amount, "payment_date": (payment_date or date.today()).isoformat()},
        headers=auth(owner),
    )


def active_lease_count(db_session, **filters):
    return (
        db_session.query(Lease)
        .filter_by(status=LeaseStatus.ACTIVE, **filters)
        .count()
    )


@pytest.fixture
def leased_apartment(client, owner, tenant):
    """Apartment owned by `owner` with `tenant` holding the active lease."""
    apartment = create_apartment(client, owner)
    lease = lease_apartment(client, owner, tenant, apartment["id"])
    return apartment, lease
