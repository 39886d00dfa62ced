from __future__ import annotations

import pytest

from src.construction_hr.construction_hr.container import assemble
from src.construction_hr.construction_hr.core.enums import Role
from src.construction_hr.construction_hr.main import create_app
from src.construction_hr.construction_hr.notifications.notifier import SocketIONotifier


@pytest.fixture
def live_app(repos, mailbox, uploads):
    container = assemble(
        users_repo=repos.users,
        employees_repo=repos.employees,
        attendance_repo=repos.attendance,
        leaves_repo=repos.leaves,
        applications_repo=repos.applications,
        site_reports_repo=repos.site_reports,
        uploads=uploads,
        email_client=mailbox,
        notifier=SocketIONotifier(),
        jwt_secret="test-jwt-secret",
    )
    return create_app(container=container)


def _socketio(app):
    return app.extensions["socketio"]


def test_connection_without_token_is_refused(live_app):
    sio_client = _socketio(live_app).test_client(live_app)

    assert not sio_client.is_connected()


def test_connection_with_bad_token_is_refused(live_app):
    sio_client = _socketio(live_app).test_client(live_app, auth={"token": "not-a-jwt"})

    assert not sio_client.is_connected()


def test_attendance_event_reaches_the_owner_but_not_other_workers(live_app, repos, tokens):
    supervisor = repos.users.add("sup", role=Role.SUPERVISOR)
    owner = repos.users.add("ravi")
    bystander = repos.users.add("other")
    ravi = repos.employees.add("Ravi", user_id=owner.user_id)

    owner_sock = _socketio(live_app).test_client(live_app, auth={"token": tokens.issue(owner)})
    bystander_sock = _socketio(live_app).test_client(live_app, auth={"token": tokens.issue(bystander)})
    assert owner_sock.is_connected()

    resp = live_app.test_client().post(
        "/api/attendance",
        json={"employeeId": ravi.employee_id, "date": "2026-03-02", "status": "Present"},
        headers={"Authorization": f"Bearer {tokens.issue(supervisor)}"},
    )
    assert resp.status_code == 201

    received = [m for m in owner_sock.get_received() if m["name"] == "attendanceAdded"]
    assert len(received) == 1
    assert received[0]["args"][0]["attendance"]["employeeName"] == "Ravi"
    assert [m for m in bystander_sock.get_received() if m["name"] == "attendanceAdded"] == []


def test_token_in_query_string_is_accepted(live_app, repos, tokens):
    admin = repos.users.add("boss", role=Role.ADMIN)

    sio_client = _socketio(live_app).test_client(live_app, query_string=f"token={tokens.issue(admin)}")

    assert sio_client.is_connected()


def test_manager_applying_for_own_leave_is_notified_once(live_app, repos, tokens):
    manager = repos.users.add("mgr", role=Role.MANAGER)
    token = tokens.issue(manager)
    sock = _socketio(live_app).test_client(live_app, auth={"token": token})
    assert sock.is_connected()

    resp = live_app.test_client().post(
        "/api/leaves/apply",
        json={"fromDate": "2026-04-01", "toDate": "2026-04-02", "reason": "Site inspection"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert resp.status_code == 201

    received = [m for m in sock.get_received() if m["name"] == "leaveApplied"]
    assert len(received) == 1
    assert received[0]["args"][0]["leave"]["reason"] == "Site inspection"
