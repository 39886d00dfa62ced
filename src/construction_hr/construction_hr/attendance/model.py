from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one presence/absence mark for an employee on a date.

    ``employee_name`` is filled by list/get queries that join the employee.
    """

    attendance_id: int
    employee_id: int
    work_date: date
    status: AttendanceStatus
    employee_name: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_present(self) -> bool:
        return self.status == AttendanceStatus.PRESENT

    def to_dict(self) -> dict:
        return {
            "_id": self.attendance_id,
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "date": self.work_date.isoformat(),
            "status": self.status.value,
        }
