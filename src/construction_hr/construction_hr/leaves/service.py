from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..common.validators import parse_enum, require_non_empty
from ..core.enums import LeaveStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..notifications.model import Event, leave_applied, leave_status_updated
from ..notifications.notifier import Notifier
from ..users.model import AuthUser
from ..users.repository import UserRepository
from .model import LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)

_DECIDERS = (Role.ADMIN, Role.MANAGER)


class LeaveService:
    """Leave workflow: Pending -> Approved | Rejected, both final."""

    def __init__(self, leaves: LeaveRepository, users: UserRepository, *, notifier: Optional[Notifier] = None):
        self._leaves = leaves
        self._users = users
        self._notifier = notifier

    def _publish(self, event: Event) -> None:
        if not self._notifier:
            return
        try:
            self._notifier.publish(event)
        except Exception:
            logger.warning("%s notification failed", event.name, exc_info=True)

    def _owner_for(self, caller: AuthUser, user_id) -> int:
        if user_id is None or str(user_id).strip() == "":
            return caller.user_id
        try:
            owner = int(user_id)
        except (TypeError, ValueError):
            raise ValidationError("userId must be an integer")
        if owner == caller.user_id:
            return owner
        if caller.role not in _DECIDERS:
            raise AuthorizationError("You can only apply for leave for yourself")
        if not self._users.get_by_id(owner):
            raise NotFoundError("User not found")
        return owner

    def apply(self, *, caller: AuthUser, from_date: str, to_date: str, reason: str, user_id=None) -> LeaveRequest:
        reason = require_non_empty(reason, "Reason")
        start = parse_iso_date(from_date)
        end = parse_iso_date(to_date)
        if end < start:
            raise ValidationError("toDate must be on or after fromDate")
        owner = self._owner_for(caller, user_id)

        leave_id = self._leaves.create(user_id=owner, from_date=start, to_date=end, reason=reason)
        leave = self._get(leave_id)
        logger.info("Leave %s applied for user %s (%s..%s) by %s", leave_id, owner, start, end, caller.username)

        self._publish(leave_applied(leave.to_dict(), owner_id=owner))
        return leave

    def _get(self, leave_id: int) -> LeaveRequest:
        leave = self._leaves.get_by_id(int(leave_id))
        if not leave:
            raise NotFoundError("Leave request not found")
        return leave

    def list_mine(self, user_id: int) -> Sequence[LeaveRequest]:
        return self._leaves.list_for_user(int(user_id))

    def list_all(self, *, current_role: Role) -> Sequence[LeaveRequest]:
        if current_role not in _DECIDERS:
            raise AuthorizationError("Access forbidden: insufficient rights")
        return self._leaves.list_all()

    def update_status(self, *, caller: AuthUser, leave_id: int, status: str) -> LeaveRequest:
        if caller.role not in _DECIDERS:
            raise AuthorizationError("Access forbidden: insufficient rights")

        target = parse_enum(LeaveStatus, status, "status")
        if target == LeaveStatus.PENDING:
            raise ValidationError("A leave request cannot be moved back to Pending")

        leave = self._get(leave_id)
        if leave.status == target:
            # Repeating the same decision changes nothing and notifies nobody.
            return leave
        if leave.is_terminal:
            raise ValidationError("This leave request has already been processed")

        if not self._leaves.decide(leave_id=leave.leave_id, status=target, decided_by=caller.user_id):
            # Lost a race with another reviewer.
            current = self._get(leave.leave_id)
            if current.status == target:
                return current
            raise ValidationError("This leave request has already been processed")

        updated = self._get(leave.leave_id)
        logger.info("Leave %s %s by %s", updated.leave_id, target.value.lower(), caller.username)
        self._publish(leave_status_updated(updated.to_dict(), owner_id=updated.user_id, status=target.value))
        return updated
