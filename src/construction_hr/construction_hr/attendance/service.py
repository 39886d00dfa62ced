from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..common.validators import parse_enum
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.service import EmployeeService
from ..notifications.model import attendance_added
from ..notifications.notifier import Notifier
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Append-only attendance ledger.

    Marks are never merged: two rows for the same employee and date are both
    kept and both count towards pay.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeService,
        *,
        notifier: Optional[Notifier] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._notifier = notifier

    def record(self, *, employee_id, work_date: str, status: str) -> AttendanceRecord:
        if employee_id is None or str(employee_id).strip() == "":
            raise ValidationError("employeeId is required")
        try:
            eid = int(employee_id)
        except (TypeError, ValueError):
            raise ValidationError("employeeId must be an integer")
        day = parse_iso_date(work_date)
        mark = parse_enum(AttendanceStatus, status, "status")

        employee = self._employees.get(eid)
        attendance_id = self._attendance.add(employee_id=employee.employee_id, work_date=day, status=mark)
        record = self._attendance.get_by_id(attendance_id)
        if record is None:
            raise NotFoundError("Attendance record not found")
        logger.info("Attendance %s recorded for %s on %s", mark.value, employee.name, day)

        self._publish(record, employee_user_id=employee.user_id)
        return record

    def _publish(self, record: AttendanceRecord, *, employee_user_id: Optional[int]) -> None:
        if not self._notifier:
            return
        try:
            self._notifier.publish(attendance_added(record.to_dict(), employee_user_id=employee_user_id))
        except Exception:
            logger.warning("attendanceAdded notification failed", exc_info=True)

    def list_all(self) -> Sequence[AttendanceRecord]:
        return self._attendance.list_all()

    def list_for_employee(self, employee_id: int) -> Sequence[AttendanceRecord]:
        employee = self._employees.get(employee_id)
        return self._attendance.list_for_employee(employee.employee_id)

    def list_for_user(self, *, user_id: int, role: Role) -> Sequence[AttendanceRecord]:
        if role == Role.ADMIN:
            raise AuthorizationError("Admins should use the admin dashboard to view attendance")
        employee = self._employees.get_for_user(user_id)
        return self._attendance.list_for_employee(employee.employee_id)
