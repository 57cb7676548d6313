"""
Integration tests for the lease lifecycle: archive transition and history.
"""

from conftest import (
    accept_invitation,
    active_lease_count,
    auth,
    create_apartment,
    create_invitation,
    lease_apartment,
)


def test_archive_active_lease(client, owner, leased_apartment, db_session):
    apartment, lease = leased_apartment

    response = client.post(f"/api/apartments/{apartment['id']}/lease/archive", headers=auth(owner))

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == lease["id"]
    assert body["status"] == "archived"
    assert body["archived_at"] is not None
    assert active_lease_count(db_session, apartment_id=apartment["id"]) == 0


def test_archive_without_active_lease(client, owner):
    apartment = create_apartment(client, owner)

    response = client.post(f"/api/apartments/{apartment['id']}/lease/archive", headers=auth(owner))

    assert response.status_code == 400
    assert response.json()["error"] == "no_active_lease"


def test_archived_is_terminal(client, owner, leased_apartment):
    apartment, _ = leased_apartment
    client.post(f"/api/apartments/{apartment['id']}/lease/archive", headers=auth(owner))

    response = client.post(f"/api/apartments/{apartment['id']}/lease/archive", headers=auth(owner))

    assert response.status_code == 400
    assert response.json()["error"] == "no_active_lease"


def test_archive_frees_tenant_for_new_lease(client, owner, tenant, leased_apartment, db_session):
    apartment, _ = leased_apartment
    client.post(f"/api/apartments/{apartment['id']}/lease/archive", headers=auth(owner))

    other_apartment = create_apartment(client, owner, name="Second Flat")
    invitation = create_invitation(client, owner, other_apartment["id"])
    response = accept_invitation(client, tenant, invitation["token"])

    assert response.status_code == 201
    assert active_lease_count(db_session, tenant_id=tenant.id) == 1


def test_archive_requires_ownership(client, other_owner, tenant, leased_apartment):
    apartment, _ = leased_apartment

    as_other_owner = client.post(f"/api/apartments/{apartment['id']}/lease/archive", headers=auth(other_owner))
    as_tenant = client.post(f"/api/apartments/{apartment['id']}/lease/archive", headers=auth(tenant))

    assert as_other_owner.status_code == 403
    assert as_tenant.status_code == 403


def test_lease_history_newest_first(client, owner, tenant, other_tenant):
    apartment = create_apartment(client, owner)
    first = lease_apartment(client, owner, tenant, apartment["id"])
    client.post(f"/api/apartments/{apartment['id']}/lease/archive", headers=auth(owner))
    second = lease_apartment(client, owner, other_tenant, apartment["id"])

    response = client.get(f"/api/apartments/{apartment['id']}/leases", headers=auth(owner))

    assert response.status_code == 200
    leases = response.json()["leases"]
    assert [lease["id"] for lease in leases] == [second["id"], first["id"]]
    assert [lease["status"] for lease in leases] == ["active", "archived"]
    assert leases[0]["tenant"]["full_name"] == "Teresa Tenant"
    assert leases[1]["tenant"]["email"] == "tomasz@example.com"
