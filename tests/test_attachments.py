"""
Integration tests for charge attachments.

Checks file validation, replacement, removal and the storage/pointer
ordering when one side fails.
"""

from sqlalchemy import event
from sqlalchemy.exc import OperationalError

from conftest import TestingSessionLocal, auth, create_charge, record_payment
from models import Charge
from utils.file_validation import MAX_FILE_SIZE

PDF = ("invoice.pdf", b"%PDF-1.4 test", "application/pdf")
PNG = ("scan.png", b"\x89PNG\r\n\x1a\n", "image/png")
JPEG = ("photo.jpg", b"\xff\xd8\xff\xe0", "image/jpeg")


def upload(client, user, charge_id, file):
    return client.post(f"/api/charges/{charge_id}/attachment", files={"file": file}, headers=auth(user))


def test_upload_pdf(client, owner, leased_apartment, storage):
    apartment, _ = leased_apartment
    charge = create_charge(client, owner, apartment["id"])

    response = upload(client, owner, charge["id"], PDF)

    assert response.status_code == 200
    body = response.json()
    expected_path = f"{apartment['id']}/{charge['id']}.pdf"
    assert body["attachment_path"] == expected_path
    assert body["attachment_url"].endswith(f"{expected_path}?sig=test")
    assert storage.files[expected_path] == (PDF[1], "application/pdf")


def test_jpeg_is_stored_as_jpg(client, owner, leased_apartment, storage):
    apartment, _ = leased_apartment
    charge = create_charge(client, owner, apartment["id"])

    response = upload(client, owner, charge["id"], JPEG)

    assert response.json()["attachment_path"].endswith(".jpg")


def test_attachment_url_in_charge_listing(client, owner, tenant, leased_apartment):
    apartment, _ = leased_apartment
    charge = create_charge(client, owner, apartment["id"])
    upload(client, owner, charge["id"], PDF)

    body = client.get(f"/api/apartments/{apartment['id']}/charges", headers=auth(tenant)).json()
    listed = [c for items in body["charges_by_month"].values() for c in items][0]

    assert listed["attachment_path"] == f"{apartment['id']}/{charge['id']}.pdf"
    assert listed["attachment_url"].startswith("https://teststorage.blob.core.windows.net/")


def test_invalid_file_type_touches_nothing(client, owner, leased_apartment, storage, db_session):
    apartment, _ = leased_apartment
    charge = create_charge(client, owner, apartment["id"])
    upload(client, owner, charge["id"], PDF)
    storage.calls.clear()

    response = upload(client, owner, charge["id"], ("notes.txt", b"hello", "text/plain"))

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_file_type"
    assert storage.calls == []
    assert db_session.get(Charge, charge["id"]).attachment_path == f"{apartment['id']}/{charge['id']}.pdf"


def test_file_too_large(client, owner, leased_apartment, storage):
    apartment, _ = leased_apartment
    charge = create_charge(client, owner, apartment["id"])

    response = upload(client, owner, charge["id"], ("big.pdf", b"0" * (MAX_FILE_SIZE + 1), "application/pdf"))

    assert response.status_code == 413
    assert response.json()["error"] == "file_too_large"
    assert storage.calls == []


def test_file_at_limit_is_accepted(client, owner, leased_apartment):
    apartment, _ = leased_apartment
    charge = create_charge(client, owner, apartment["id"])

    response = upload(client, owner, charge["id"], ("max.png", b"0" * MAX_FILE_SIZE, "image/png"))

    assert response.status_code == 200


def test_missing_file_is_validation_error(client, owner, leased_apartment):
    apartment, _ = leased_apartment
    charge = create_charge(client, owner, apartment["id"])

    response = client.post(f"/api/charges/{charge['id']}/attachment", headers=auth(owner))

    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"


def test_replace_deletes_old_before_upload(client, owner, leased_apartment, storage):
    apartment, _ = leased_apartment
    charge = create_charge(client, owner, apartment["id"])
    upload(client, owner, charge["id"], PDF)
    old_path = f"{apartment['id']}/{charge['id']}.pdf"
    new_path = f"{apartment['id']}/{charge['id']}.png"
    storage.calls.clear()

    response = upload(client, owner, charge["id"], PNG)

    assert response.status_code == 200
    assert response.json()["attachment_path"] == new_path
    assert storage.calls == [("delete", old_path), ("upload", new_path)]
    assert list(storage.files) == [new_path]


def test_replace_proceeds_when_old_delete_fails(client, owner, leased_apartment, storage):
    apartment, _ = leased_apartment
    charge = create_charge(client, owner, apartment["id"])
    upload(client, owner, charge["id"], PDF)
    storage.fail_delete = True

    response = upload(client, owner, charge["id"], PNG)

    assert response.status_code == 200
    assert response.json()["attachment_path"].endswith(".png")


def test_upload_failure_keeps_no_dangling_pointer(client, owner, leased_apartment, storage, db_session):
    apartment, _ = leased_apartment
    charge = create_charge(client, owner, apartment["id"])
    upload(client, owner, charge["id"], PDF)
    storage.fail_upload = True

    response = upload(client, owner, charge["id"], PNG)

    assert response.status_code == 500
    assert response.json()["error"] == "storage_error"
    assert db_session.get(Charge, charge["id"]).attachment_path is None


def test_upload_failure_without_previous_file(client, owner, leased_apartment, storage, db_session):
    apartment, _ = leased_apartment
    charge = create_charge(client, owner, apartment["id"])
    storage.fail_upload = True

    response = upload(client, owner, charge["id"], PDF)

    assert response.status_code == 500
    assert db_session.get(Charge, charge["id"]).attachment_path is None


def test_remove_attachment(client, owner, leased_apartment, storage, db_session):
    apartment, _ = leased_apartment
    charge = create_charge(client, owner, apartment["id"])
    upload(client, owner, charge["id"], PDF)

    response = client.delete(f"/api/charges/{charge['id']}/attachment", headers=auth(owner))

    assert response.status_code == 200
    assert response.json()["attachment_path"] is None
    assert storage.files == {}
    assert db_session.get(Charge, charge["id"]).attachment_path is None


def test_remove_attachment_when_none(client, owner, leased_apartment):
    apartment, _ = leased_apartment
    charge = create_charge(client, owner, apartment["id"])

    response = client.delete(f"/api/charges/{charge['id']}/attachment", headers=auth(owner))

    assert response.status_code == 404
    assert response.json()["error"] == "no_attachment"


def test_remove_clears_pointer_even_if_delete_fails(client, owner, leased_apartment, storage, db_session):
    apartment, _ = leased_apartment
    charge = create_charge(client, owner, apartment["id"])
    upload(client, owner, charge["id"], PDF)
    storage.fail_delete = True

    response = client.delete(f"/api/charges/{charge['id']}/attachment", headers=auth(owner))

    assert response.status_code == 200
    assert db_session.get(Charge, charge["id"]).attachment_path is None


def test_delete_charge_removes_attachment(client, owner, leased_apartment, storage):
    apartment, _ = leased_apartment
    charge = create_charge(client, owner, apartment["id"])
    upload(client, owner, charge["id"], PDF)

    response = client.delete(f"/api/charges/{charge['id']}", headers=auth(owner))

    assert response.status_code == 204
    assert storage.files == {}


def test_delete_charge_survives_attachment_delete_failure(client, owner, leased_apartment, storage, db_session):
    apartment, _ = leased_apartment
    charge = create_charge(client, owner, apartment["id"])
    upload(client, owner, charge["id"], PDF)
    storage.fail_delete = True

    response = client.delete(f"/api/charges/{charge['id']}", headers=auth(owner))

    assert response.status_code == 204
    assert db_session.get(Charge, charge["id"]) is None


def test_attachment_is_owner_only(client, owner, tenant, leased_apartment):
    apartment, _ = leased_apartment
    charge = create_charge(client, owner, apartment["id"])

    response = upload(client, tenant, charge["id"], PDF)

    assert response.status_code == 403


def test_attachment_allowed_on_paid_charge(client, owner, leased_apartment):
    apartment, _ = leased_apartment
    charge = create_charge(client, owner, apartment["id"], amount=10)
    record_payment(client, owner, charge["id"], 10)

    response = upload(client, owner, charge["id"], PDF)

    assert response.status_code == 200


def test_pointer_update_failure_removes_new_upload(client, owner, leased_apartment, storage, db_session):
    apartment, _ = leased_apartment
    charge = create_charge(client, owner, apartment["id"])

    def fail_flush(session, flush_context, instances):
        raise OperationalError("UPDATE charges", {}, Exception("database is locked"))

    event.listen(TestingSessionLocal, "before_flush", fail_flush)
    try:
        response = upload(client, owner, charge["id"], PDF)
    finally:
        event.remove(TestingSessionLocal, "before_flush", fail_flush)

    new_path = f"{apartment['id']}/{charge['id']}.pdf"
    assert response.status_code == 500
    assert storage.calls == [("upload", new_path), ("delete", new_path)]
    assert storage.files == {}
    assert db_session.get(Charge, charge["id"]).attachment_path is None
