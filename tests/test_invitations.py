"""
Integration tests for the invitation state machine.

Covers link creation and supersession, public token validation, acceptance,
and the one-pending-link / one-active-lease rules.
"""

from datetime import date

from conftest import (
    TestingSessionLocal,
    accept_invitation,
    active_lease_count,
    auth,
    create_apartment,
    create_invitation,
)
from models import InvitationLink, InvitationStatus, Lease, LeaseStatus
from services import invitation_service


def pending_count(db_session, apartment_id):
    return (
        db_session.query(InvitationLink)
        .filter_by(apartment_id=apartment_id, status=InvitationStatus.PENDING)
        .count()
    )


def test_create_invitation_returns_shareable_url(client, owner):
    apartment = create_apartment(client, owner)

    invitation = create_invitation(client, owner, apartment["id"])

    assert invitation["status"] == "pending"
    assert invitation["apartment_id"] == apartment["id"]
    assert len(invitation["token"]) >= 32
    assert invitation["invitation_url"] == (
        f"http://localhost:4321/register/tenant?token={invitation['token']}"
    )


def test_new_invitation_expires_previous_pending(client, owner, db_session):
    apartment = create_apartment(client, owner)
    first = create_invitation(client, owner, apartment["id"])
    second = create_invitation(client, owner, apartment["id"])

    assert first["token"] != second["token"]
    statuses = {
        link.token: link.status
        for link in db_session.query(InvitationLink).filter_by(apartment_id=apartment["id"])
    }
    assert statuses[first["token"]] == InvitationStatus.EXPIRED
    assert statuses[second["token"]] == InvitationStatus.PENDING
    assert pending_count(db_session, apartment["id"]) == 1


def test_expired_token_is_invalid(client, owner):
    apartment = create_apartment(client, owner)
    first = create_invitation(client, owner, apartment["id"])
    create_invitation(client, owner, apartment["id"])

    response = client.get(f"/api/invitations/{first['token']}")

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_token"


def test_validate_token_is_public_and_minimal(client, owner):
    apartment = create_apartment(client, owner, name="Garden Loft", address="7 Elm Road, Riverton")
    invitation = create_invitation(client, owner, apartment["id"])

    response = client.get(f"/api/invitations/{invitation['token']}")

    assert response.status_code == 200
    assert response.json() == {
        "valid": True,
        "apartment": {"name": "Garden Loft", "address": "7 Elm Road, Riverton"},
        "owner": {"full_name": "Olga Owner"},
    }


def test_validate_token_is_idempotent(client, owner, db_session):
    apartment = create_apartment(client, owner)
    invitation = create_invitation(client, owner, apartment["id"])

    first = client.get(f"/api/invitations/{invitation['token']}")
    second = client.get(f"/api/invitations/{invitation['token']}")

    assert first.status_code == second.status_code == 200
    assert first.json() == second.json()
    assert pending_count(db_session, apartment["id"]) == 1


def test_unknown_token_is_invalid(client):
    response = client.get("/api/invitations/does-not-exist")

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_token"


def test_accept_creates_active_lease(client, owner, tenant, db_session):
    apartment = create_apartment(client, owner)
    invitation = create_invitation(client, owner, apartment["id"])

    response = accept_invitation(client, tenant, invitation["token"])

    assert response.status_code == 201
    lease = response.json()["lease"]
    assert lease["status"] == "active"
    assert lease["apartment_id"] == apartment["id"]
    assert lease["tenant_id"] == tenant.id
    assert lease["start_date"] == date.today().isoformat()

    link = db_session.query(InvitationLink).filter_by(token=invitation["token"]).one()
    assert link.status == InvitationStatus.ACCEPTED
    assert link.accepted_by == tenant.id


def test_accepted_token_cannot_be_reused(client, owner, tenant, other_tenant):
    apartment = create_apartment(client, owner)
    invitation = create_invitation(client, owner, apartment["id"])
    assert accept_invitation(client, tenant, invitation["token"]).status_code == 201

    response = accept_invitation(client, other_tenant, invitation["token"])

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_token"
    assert client.get(f"/api/invitations/{invitation['token']}").status_code == 400


def test_invitation_rejected_when_apartment_has_active_lease(client, owner, tenant):
    apartment = create_apartment(client, owner)
    invitation = create_invitation(client, owner, apartment["id"])
    accept_invitation(client, tenant, invitation["token"])

    response = client.post(f"/api/apartments/{apartment['id']}/invitations", headers=auth(owner))

    assert response.status_code == 400
    assert response.json()["error"] == "active_lease_exists"


def test_tenant_with_lease_cannot_accept_another(client, owner, tenant, db_session):
    first_apartment = create_apartment(client, owner, name="First Flat")
    second_apartment = create_apartment(client, owner, name="Second Flat")
    first = create_invitation(client, owner, first_apartment["id"])
    second = create_invitation(client, owner, second_apartment["id"])
    assert accept_invitation(client, tenant, first["token"]).status_code == 201

    response = accept_invitation(client, tenant, second["token"])

    assert response.status_code == 400
    assert response.json()["error"] == "user_has_lease"
    assert active_lease_count(db_session, tenant_id=tenant.id) == 1
    link = db_session.query(InvitationLink).filter_by(token=second["token"]).one()
    assert link.status == InvitationStatus.PENDING


def test_accept_loses_race_to_existing_lease(client, owner, tenant, other_tenant, db_session):
    """A pending link whose apartment gained a lease meanwhile fails cleanly."""
    apartment = create_apartment(client, owner)
    invitation = create_invitation(client, owner, apartment["id"])
    db_session.add(
        Lease(
            apartment_id=apartment["id"],
            tenant_id=other_tenant.id,
            status=LeaseStatus.ACTIVE,
            start_date=date.today(),
            created_by=other_tenant.id,
        )
    )
    db_session.commit()

    response = accept_invitation(client, tenant, invitation["token"])

    assert response.status_code == 400
    assert response.json()["error"] == "apartment_has_lease"
    assert active_lease_count(db_session, apartment_id=apartment["id"]) == 1
    assert active_lease_count(db_session, tenant_id=tenant.id) == 0


def test_only_tenants_accept(client, owner, other_owner):
    apartment = create_apartment(client, owner)
    invitation = create_invitation(client, owner, apartment["id"])

    response = accept_invitation(client, other_owner, invitation["token"])

    assert response.status_code == 403
    assert response.json()["error"] == "forbidden"


def test_accept_requires_authentication(client, owner):
    apartment = create_apartment(client, owner)
    invitation = create_invitation(client, owner, apartment["id"])

    response = client.post(f"/api/invitations/{invitation['token']}/accept")

    assert response.status_code == 401
    assert response.json()["error"] == "unauthorized"


def test_create_invitation_for_foreign_apartment_is_forbidden(client, owner, other_owner):
    apartment = create_apartment(client, owner)

    response = client.post(f"/api/apartments/{apartment['id']}/invitations", headers=auth(other_owner))

    assert response.status_code == 403
    assert response.json()["error"] == "forbidden"


def test_tenant_cannot_create_invitation(client, owner, tenant):
    apartment = create_apartment(client, owner)

    response = client.post(f"/api/apartments/{apartment['id']}/invitations", headers=auth(tenant))

    assert response.status_code == 403


def test_list_invitations_newest_first_with_acceptor(client, owner, tenant):
    apartment = create_apartment(client, owner)
    first = create_invitation(client, owner, apartment["id"])
    second = create_invitation(client, owner, apartment["id"])
    accept_invitation(client, tenant, second["token"])

    response = client.get(f"/api/apartments/{apartment['id']}/invitations", headers=auth(owner))

    assert response.status_code == 200
    invitations = response.json()["invitations"]
    assert [item["token"] for item in invitations] == [second["token"], first["token"]]
    assert invitations[0]["status"] == "accepted"
    assert invitations[0]["accepted_by"] == {"id": tenant.id, "full_name": "Tomasz Tenant"}
    assert invitations[1]["status"] == "expired"
    assert invitations[1]["accepted_by"] is None


def test_apartment_becomes_invitable_after_lease_archived(client, owner, tenant, other_tenant, db_session):
    apartment = create_apartment(client, owner)
    first = create_invitation(client, owner, apartment["id"])
    accept_invitation(client, tenant, first["token"])

    archive = client.post(f"/api/apartments/{apartment['id']}/lease/archive", headers=auth(owner))
    assert archive.status_code == 200

    second = create_invitation(client, owner, apartment["id"])
    response = accept_invitation(client, other_tenant, second["token"])

    assert response.status_code == 201
    assert active_lease_count(db_session, apartment_id=apartment["id"]) == 1


def test_concurrent_invitation_creation_leaves_one_pending(client, owner, db_session, monkeypatch):
    """A rival pending link committed mid-request wins; the second creator gets a conflict."""
    apartment = create_apartment(client, owner)
    real_generate_token = invitation_service.generate_token

    def generate_after_rival_commits():
        rival = TestingSessionLocal()
        try:
            rival.add(
                InvitationLink(
                    apartment_id=apartment["id"],
                    token=real_generate_token(),
                    status=InvitationStatus.PENDING,
                    created_by=owner.id,
                )
            )
            rival.commit()
        finally:
            rival.close()
        return real_generate_token()

    monkeypatch.setattr(invitation_service, "generate_token", generate_after_rival_commits)

    response = client.post(f"/api/apartments/{apartment['id']}/invitations", headers=auth(owner))

    assert response.status_code == 400
    assert response.json()["error"] == "invitation_conflict"
    assert pending_count(db_session, apartment["id"]) == 1
