from __future__ import annotations

import pytest

from src.construction_hr.construction_hr.core.enums import LeaveStatus, Role
from src.construction_hr.construction_hr.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.construction_hr.construction_hr.notifications.model import LEAVE_APPLIED, LEAVE_STATUS_UPDATED, user_room
from src.construction_hr.construction_hr.users.model import AuthUser


def _caller(user) -> AuthUser:
    return AuthUser(user_id=user.user_id, username=user.username, role=user.role)


@pytest.fixture
def people(repos):
    return {
        "worker": _caller(repos.users.add("worker1", role=Role.WORKER)),
        "manager": _caller(repos.users.add("mgr", role=Role.MANAGER)),
        "admin": _caller(repos.users.add("boss", role=Role.ADMIN)),
        "supervisor": _caller(repos.users.add("sup", role=Role.SUPERVISOR)),
    }


def _apply(container, caller, **kw):
    params = {"from_date": "2026-04-01", "to_date": "2026-04-03", "reason": "Family function"}
    params.update(kw)
    return container.leave_service.apply(caller=caller, **params)


def test_apply_starts_pending_and_notifies(container, people, notifier):
    leave = _apply(container, people["worker"])

    assert leave.status == LeaveStatus.PENDING
    assert notifier.names() == [LEAVE_APPLIED]
    assert user_room(people["worker"].user_id) in notifier.events[0].audience.rooms()


def test_apply_validates_dates_and_reason(container, people):
    with pytest.raises(ValidationError):
        _apply(container, people["worker"], to_date="2026-03-31")
    with pytest.raises(ValidationError):
        _apply(container, people["worker"], reason="  ")
    with pytest.raises(ValidationError):
        _apply(container, people["worker"], from_date="tomorrow")


def test_single_day_leave_is_fine(container, people):
    leave = _apply(container, people["worker"], to_date="2026-04-01")

    assert leave.from_date == leave.to_date


def test_on_behalf_only_for_managers(container, people):
    with pytest.raises(AuthorizationError):
        _apply(container, people["worker"], user_id=people["supervisor"].user_id)

    leave = _apply(container, people["manager"], user_id=people["worker"].user_id)
    assert leave.user_id == people["worker"].user_id

    with pytest.raises(NotFoundError):
        _apply(container, people["admin"], user_id=999)


def test_approve_then_reject_is_refused(container, people, notifier):
    leave = _apply(container, people["worker"])

    approved = container.leave_service.update_status(caller=people["manager"], leave_id=leave.leave_id, status="Approved")
    assert approved.status == LeaveStatus.APPROVED
    assert approved.decided_by == people["manager"].user_id
    assert notifier.names() == [LEAVE_APPLIED, LEAVE_STATUS_UPDATED]
    assert notifier.events[-1].payload["message"] == "Leave request approved"

    with pytest.raises(ValidationError, match="already been processed"):
        container.leave_service.update_status(caller=people["admin"], leave_id=leave.leave_id, status="Rejected")


def test_repeating_the_decision_is_a_quiet_no_op(container, people, notifier):
    leave = _apply(container, people["worker"])
    container.leave_service.update_status(caller=people["admin"], leave_id=leave.leave_id, status="Rejected")

    again = container.leave_service.update_status(caller=people["admin"], leave_id=leave.leave_id, status="Rejected")

    assert again.status == LeaveStatus.REJECTED
    assert notifier.names().count(LEAVE_STATUS_UPDATED) == 1


@pytest.mark.parametrize("role", ["worker", "supervisor"])
def test_only_deciders_may_decide(container, people, role):
    leave = _apply(container, people["worker"])

    with pytest.raises(AuthorizationError):
        container.leave_service.update_status(caller=people[role], leave_id=leave.leave_id, status="Approved")


@pytest.mark.parametrize("status", ["Pending", "Maybe", ""])
def test_invalid_target_status(container, people, status):
    leave = _apply(container, people["worker"])

    with pytest.raises(ValidationError):
        container.leave_service.update_status(caller=people["admin"], leave_id=leave.leave_id, status=status)


def test_unknown_leave(container, people):
    with pytest.raises(NotFoundError):
        container.leave_service.update_status(caller=people["admin"], leave_id=77, status="Approved")


def test_lost_race_reports_already_processed(container, repos, people):
    leave = _apply(container, people["worker"])
    # Another reviewer decides between our read and our write.
    real_get = repos.leaves.get_by_id
    calls = {"n": 0}

    def stale_get(leave_id):
        calls["n"] += 1
        current = real_get(leave_id)
        if calls["n"] == 1:
            repos.leaves.decide(leave_id=leave_id, status=LeaveStatus.REJECTED, decided_by=people["manager"].user_id)
        return current

    repos.leaves.get_by_id = stale_get

    with pytest.raises(ValidationError, match="already been processed"):
        container.leave_service.update_status(caller=people["admin"], leave_id=leave.leave_id, status="Approved")
    assert real_get(leave.leave_id).status == LeaveStatus.REJECTED


def test_lists(container, people):
    _apply(container, people["worker"])
    _apply(container, people["supervisor"])

    assert len(container.leave_service.list_mine(people["worker"].user_id)) == 1
    assert len(container.leave_service.list_all(current_role=Role.MANAGER)) == 2
    with pytest.raises(AuthorizationError):
        container.leave_service.list_all(current_role=Role.SUPERVISOR)
