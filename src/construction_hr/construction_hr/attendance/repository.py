from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def add(self, *, employee_id: int, work_date: date, status: AttendanceStatus) -> int:
        """Append a mark. Never deduplicates by (employee, date)."""

        raise NotImplementedError

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_all(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        """Newest first; ``start``/``end`` are inclusive when given."""

        raise NotImplementedError

    def count_present(self, employee_id: int, *, start: date, end: date) -> int:
        raise NotImplementedError
