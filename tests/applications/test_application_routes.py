from __future__ import annotations

import io

from src.construction_hr.construction_hr.core.enums import Role


def _form(**overrides):
    form = {
        "fullName": "Sita",
        "surname": "Devi",
        "email": "sita@example.com",
        "phone": "9876543210",
        "position": "Mason",
        "username": "sita",
        "password": "chosen-pass",
        "dateOfBirth": "1990-01-01",
    }
    form.update(overrides)
    return form


def test_public_registration_with_documents(client, repos, auth_header):
    data = _form(resume=(io.BytesIO(b"%PDF-1.4 cv"), "cv.pdf"), photo=(io.BytesIO(b"img"), "me.jpg"))

    resp = client.post("/api/applications/register", data=data, content_type="multipart/form-data")

    assert resp.status_code == 201
    application_id = resp.get_json()["applicationId"]

    manager = repos.users.add("mgr", role=Role.MANAGER)
    resume = client.get(f"/api/applications/{application_id}/resume", headers=auth_header(manager))
    assert resume.status_code == 200
    assert resume.headers["Content-Disposition"].startswith("attachment")
    assert resume.data == b"%PDF-1.4 cv"

    photo = client.get(f"/api/applications/{application_id}/document/photo", headers=auth_header(manager))
    assert photo.status_code == 200
    assert photo.headers["Content-Disposition"].startswith("inline")


def test_underage_registration_is_400(client):
    resp = client.post("/api/applications/register", json=_form(dateOfBirth="2020-01-01"))

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "You must be at least 18 years old to apply"


def test_hire_is_admin_only_and_created(client, repos, auth_header):
    manager = repos.users.add("mgr", role=Role.MANAGER)
    admin = repos.users.add("boss", role=Role.ADMIN)
    application_id = client.post("/api/applications/register", json=_form()).get_json()["applicationId"]

    body = {"salary": 15000, "role": "Worker"}
    assert client.post(f"/api/applications/{application_id}/hire", json=body, headers=auth_header(manager)).status_code == 403

    resp = client.post(f"/api/applications/{application_id}/hire", json=body, headers=auth_header(admin))
    assert resp.status_code == 201
    info = resp.get_json()["employeeInfo"]
    assert info["username"] == "sita"
    assert info["password"] is None

    again = client.post(f"/api/applications/{application_id}/hire", json=body, headers=auth_header(admin))
    assert again.status_code == 400
    assert again.get_json()["message"] == "This applicant has already been hired"


def test_listing_hides_password_hash(client, repos, auth_header):
    admin = repos.users.add("boss", role=Role.ADMIN)
    client.post("/api/applications/register", json=_form())

    rows = client.get("/api/applications", headers=auth_header(admin)).get_json()

    assert len(rows) == 1
    assert not any("password" in key.lower() for key in rows[0])
